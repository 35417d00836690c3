"""
Reducer - Applies actions to game state.

The reducer is the single point of state mutation.
All state changes must go through apply().

Design principles:
- Pure transition: (state, action) -> (new_state, events)
- Validates before applying; an invalid trigger returns a failure and
  leaves the state untouched
- Delegates tile effects to EffectResolver
- Turn advance and game end live in one place (_apply_outcome)
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Callable, Mapping
import logging

from ..errors import MalformedQuestionError
from .action import Action, ActionType, ActionResult
from .board import SPECIAL_TILES, SpecialTile, DIE_FACES
from .dice import RandomSource, make_random
from .effect_resolver import EffectResolver, ResolutionOutcome, TurnContext
from .events import EventType, GameEvent
from .state import (
    GameState, GamePhase, PlayerState, Question,
    MIN_PLAYERS, MAX_PLAYERS, WELCOME_MESSAGE,
)

logger = logging.getLogger(__name__)


@dataclass
class Reducer:
    """
    Reducer applies actions to game state.

    Stateless apart from the random source - all game state is in GameState.
    """
    rng: RandomSource = field(default_factory=make_random)
    board: Mapping[int, SpecialTile] = field(default_factory=lambda: SPECIAL_TILES)

    def __post_init__(self):
        self.resolver = EffectResolver(rng=self.rng, board=self.board)

    def apply(self, state: GameState, action: Action) -> ActionResult:
        """
        Apply an action to the game state.

        Returns ActionResult with new state and events, or an error.
        """
        validation = self._validate_action(state, action)
        if validation:
            message, error_code = validation
            logger.info("Rejected %s: %s", action.action_type.value, message)
            return ActionResult.failure(message, error_code=error_code)

        handler = self._get_handler(action.action_type)
        logger.debug("Applying %s in phase %s", action.action_type.value, state.phase.value)
        return handler(state, action)

    def _validate_action(self, state: GameState, action: Action) -> tuple[str, str] | None:
        """
        Validate that an action is legal in the current state.

        Returns (message, error_code) if invalid, None if valid.
        """
        action_type = action.action_type
        payload = action.payload

        if action_type == ActionType.RESET:
            return None

        if action_type == ActionType.BEGIN:
            if state.phase != GamePhase.SETUP:
                return f"Cannot begin a session in phase {state.phase.value}", "INVALID_STATE"
            count = payload.player_count
            if count is None or not MIN_PLAYERS <= count <= MAX_PLAYERS:
                return (
                    f"Player count must be between {MIN_PLAYERS} and {MAX_PLAYERS}, got {count}",
                    "INVALID_SETUP",
                )
            if not payload.topic or not payload.topic.strip():
                return "Topic is required", "INVALID_SETUP"
            if payload.player_names is not None and len(payload.player_names) != count:
                return (
                    f"Expected {count} player names, got {len(payload.player_names)}",
                    "INVALID_SETUP",
                )
            return None

        if action_type in {ActionType.QUESTIONS_LOADED, ActionType.QUESTIONS_FAILED}:
            if state.phase != GamePhase.LOADING:
                return f"No question fetch in flight (phase {state.phase.value})", "INVALID_STATE"
            return None

        # Gameplay triggers
        if state.phase != GamePhase.PLAYING:
            return f"Game is not in progress (phase {state.phase.value})", "INVALID_STATE"

        if action_type == ActionType.ROLL:
            if state.pending_question is not None:
                return "Cannot roll while a question is pending", "INVALID_STATE"
            if payload.player_id is not None and payload.player_id != state.current_player.player_id:
                return f"Not player {payload.player_id}'s turn", "NOT_YOUR_TURN"
            return None

        if action_type == ActionType.ANSWER:
            question = state.pending_question
            if question is None:
                return "No question is pending", "INVALID_STATE"
            index = payload.option_index
            if index is None or not 0 <= index < len(question.options):
                return (
                    f"Option index {index} out of range (0..{len(question.options) - 1})",
                    "INVALID_ANSWER",
                )
            return None

        return None

    def _get_handler(self, action_type: ActionType) -> Callable[[GameState, Action], ActionResult]:
        """Get the handler function for an action type."""
        handlers = {
            ActionType.BEGIN: self._handle_begin,
            ActionType.QUESTIONS_LOADED: self._handle_questions_loaded,
            ActionType.QUESTIONS_FAILED: self._handle_questions_failed,
            ActionType.ROLL: self._handle_roll,
            ActionType.ANSWER: self._handle_answer,
            ActionType.RESET: self._handle_reset,
        }
        return handlers[action_type]

    def _handle_begin(self, state: GameState, action: Action) -> ActionResult:
        """SETUP -> LOADING while the question pool is fetched."""
        payload = action.payload
        new_state = state._copy_with(
            phase=GamePhase.LOADING,
            topic=payload.topic.strip(),
            audience=(payload.audience or "").strip(),
            requested_players=payload.player_count,
            player_names=tuple(payload.player_names or ()),
        )
        return ActionResult.success_with_state(new_state, events=[GameEvent(
            event_type=EventType.QUESTIONS_REQUESTED,
            data={
                "topic": new_state.topic,
                "audience": new_state.audience,
                "player_count": new_state.requested_players,
            },
        )])

    def _handle_questions_loaded(self, state: GameState, action: Action) -> ActionResult:
        """LOADING -> PLAYING with a fresh set of players."""
        questions = action.payload.questions or []
        errors = []
        if not questions:
            errors.append("Question pool is empty")
        for i, question in enumerate(questions):
            if not isinstance(question, Question):
                errors.append(f"Question {i} is not a Question instance")
        if errors:
            error = MalformedQuestionError(errors)
            return ActionResult.failure(str(error), error_code="MALFORMED_QUESTION")

        names = state.player_names or (None,) * state.requested_players
        players = tuple(
            PlayerState.create(player_id=i, name=name)
            for i, name in enumerate(names)
        )
        new_state = state._copy_with(
            phase=GamePhase.PLAYING,
            players=players,
            current_player_idx=0,
            turn_number=0,
            last_roll=None,
            questions=tuple(questions),
            pending_question=None,
            history=(WELCOME_MESSAGE,),
            winner_id=None,
        )
        return ActionResult.success_with_state(new_state, events=[GameEvent(
            event_type=EventType.SESSION_STARTED,
            data={"players": len(players), "questions": len(questions)},
        )])

    def _handle_questions_failed(self, state: GameState, action: Action) -> ActionResult:
        """LOADING -> SETUP; the session is not started."""
        new_state = state._copy_with(phase=GamePhase.SETUP)
        return ActionResult.success_with_state(new_state, events=[GameEvent(
            event_type=EventType.QUESTIONS_FAILED,
            data={"error": action.payload.error},
        )])

    def _handle_roll(self, state: GameState, action: Action) -> ActionResult:
        """Consume a skipped turn, or throw the die, move and resolve the tile."""
        ctx = TurnContext(state=state)
        player = state.current_player

        if player.skip_turns > 0:
            ctx.update_player(player.with_skip_turns(player.skip_turns - 1))
            ctx.emit(GameEvent(
                event_type=EventType.TURN_SKIPPED,
                message=f"{player.label} skips this turn",
                player_id=player.player_id,
                data={"skip_turns_left": player.skip_turns - 1},
            ))
            self._apply_outcome(ctx, ResolutionOutcome.ADVANCE)
            return ActionResult.success_with_state(ctx.state, events=ctx.events)

        roll = self.rng.randint(1, DIE_FACES)
        ctx.state = ctx.state._copy_with(last_roll=roll)
        ctx.emit(GameEvent(
            event_type=EventType.DIE_ROLLED,
            message=f"{player.label} rolled {roll}",
            player_id=player.player_id,
            data={"roll": roll},
        ))
        ctx.move_player(player.player_id, roll)

        outcome = self.resolver.resolve(ctx, player.player_id)
        self._apply_outcome(ctx, outcome)
        return ActionResult.success_with_state(ctx.state, events=ctx.events)

    def _handle_answer(self, state: GameState, action: Action) -> ActionResult:
        """Score the answer, apply the penalty, and pass the turn."""
        ctx = TurnContext(state=state)
        player = state.current_player
        question = state.pending_question
        index = action.payload.option_index

        if question.is_correct(index):
            ctx.emit(GameEvent(
                event_type=EventType.ANSWER_CORRECT,
                message=f"{player.label}: correct! ✅",
                player_id=player.player_id,
                data={"option_index": index},
            ))
        else:
            penalty = state.last_roll or 0
            ctx.emit(GameEvent(
                event_type=EventType.ANSWER_WRONG,
                message=f"{player.label}: wrong! ❌ Back {penalty}",
                player_id=player.player_id,
                data={"option_index": index, "penalty": penalty},
            ))
            ctx.move_player(player.player_id, -penalty)

        ctx.state = ctx.state._copy_with(pending_question=None)
        self._apply_outcome(ctx, ResolutionOutcome.ADVANCE)
        return ActionResult.success_with_state(ctx.state, events=ctx.events)

    def _handle_reset(self, state: GameState, action: Action) -> ActionResult:
        """Discard everything and return to SETUP."""
        return ActionResult.success_with_state(
            GameState.initial(),
            events=[GameEvent(event_type=EventType.SESSION_RESET)],
        )

    def _apply_outcome(self, ctx: TurnContext, outcome: ResolutionOutcome) -> None:
        """Advance the turn or end the game according to a terminal outcome."""
        if outcome == ResolutionOutcome.ADVANCE:
            state = ctx.state
            next_idx = (state.current_player_idx + 1) % state.num_players
            ctx.state = state._copy_with(
                current_player_idx=next_idx,
                turn_number=state.turn_number + 1,
            )
            ctx.emit(GameEvent(
                event_type=EventType.TURN_ADVANCED,
                player_id=ctx.state.current_player.player_id,
                data={"current_player_idx": next_idx},
            ))
        elif outcome == ResolutionOutcome.FINISH:
            winner = ctx.state.current_player
            ctx.state = ctx.state._copy_with(
                phase=GamePhase.FINISHED,
                winner_id=winner.player_id,
            )
            ctx.emit(GameEvent(
                event_type=EventType.GAME_WON,
                message=f"{winner.label} wins! 🏁",
                player_id=winner.player_id,
            ))
            logger.info("Game finished, winner %s", winner.name)
        # SUSPEND: the turn waits for an answer


def apply_action(state: GameState, action: Action, rng: RandomSource | None = None) -> ActionResult:
    """
    Convenience function to apply an action.

    Creates a Reducer and applies the action.
    """
    reducer = Reducer(rng=rng or make_random())
    return reducer.apply(state, action)
