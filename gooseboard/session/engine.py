"""
Game Engine - The facade presenters drive.

The engine:
1. Owns the authoritative GameState of one session
2. Turns presenter triggers (begin, roll, answer, reset) into actions
3. Applies them through the reducer, one at a time
4. Raises InvalidStateError for rejected triggers and ProviderError when
   the question bank fails

Usage:
    engine = GameEngine(provider=StaticQuestionProvider(pool))
    engine.begin("Roman history", "8-10 years", player_count=3)

    result = engine.roll()
    if engine.state.pending_question:
        result = engine.answer(option_index)

    # result.events drive presenter animation
"""

from __future__ import annotations
from typing import Callable, Mapping
import logging
import threading

from ..engine_core.action import Action, ActionResult, ActionType
from ..engine_core.board import SPECIAL_TILES, SpecialTile
from ..engine_core.dice import RandomSource, make_random
from ..engine_core.events import GameEvent
from ..engine_core.reducer import Reducer
from ..engine_core.state import GameState, GamePhase, PlayerState
from ..errors import InvalidStateError, InvalidSetupError, MalformedQuestionError, ProviderError
from ..questions.provider import QuestionProvider, validate_question_pool

logger = logging.getLogger(__name__)

StateListener = Callable[[GameState, list[GameEvent]], None]


class GameEngine:
    """
    Single-session game engine.

    Triggers are serialised by a lock. The lock is released while the
    question provider is called; during that time the phase is LOADING
    and every gameplay trigger is rejected.
    """

    def __init__(
        self,
        provider: QuestionProvider,
        rng: RandomSource | None = None,
        board: Mapping[int, SpecialTile] | None = None,
    ):
        self.provider = provider
        self.reducer = Reducer(rng=rng or make_random(), board=board or SPECIAL_TILES)
        self._state = GameState.initial()
        self._lock = threading.Lock()
        self._listeners: list[StateListener] = []
        # Bumped on every BEGIN and RESET; a fetch only settles its own generation
        self._generation = 0
        self.last_events: list[GameEvent] = []

    @property
    def state(self) -> GameState:
        return self._state

    @property
    def phase(self) -> GamePhase:
        return self._state.phase

    @property
    def can_roll(self) -> bool:
        """Presenters disable the roll input when this is False."""
        return self._state.can_roll

    @property
    def winner(self) -> PlayerState | None:
        return self._state.winner

    def subscribe(self, listener: StateListener) -> None:
        """Register a callback invoked with (state, events) after each transition."""
        self._listeners.append(listener)

    def begin(
        self,
        topic: str,
        audience: str,
        player_count: int,
        player_names: list[str] | None = None,
    ) -> ActionResult:
        """
        Start a session: fetch the question pool and set up the players.

        The returned pool is validated whatever the provider. On provider
        failure or a malformed pool the phase returns to SETUP and
        ProviderError (MalformedQuestionError) is raised.
        """
        _, generation = self._apply(Action.begin(topic, audience, player_count, player_names))

        try:
            questions = validate_question_pool(self.provider.fetch_questions(topic, audience))
        except ProviderError as e:
            logger.warning("Question fetch failed for %r: %s", topic, e)
            self._settle(Action.questions_failed(str(e)), generation)
            raise
        except Exception as e:
            logger.exception("Question provider crashed for %r", topic)
            self._settle(Action.questions_failed(repr(e)), generation)
            raise ProviderError(f"Question provider crashed: {e}") from e

        result = self._settle(Action.questions_loaded(questions), generation)
        if result is None:
            raise InvalidStateError(
                "Session was reset while questions were loading",
                error_code="SESSION_RESET",
            )
        if not result.success:
            self._settle(Action.questions_failed(result.error), generation)
            raise MalformedQuestionError([result.error])

        logger.info(
            "Session started: %d players, %d questions on %r",
            self._state.num_players, len(self._state.questions), self._state.topic,
        )
        return result

    def roll(self, player_id: int | None = None) -> ActionResult:
        """Roll for the current player (or consume a skipped turn)."""
        return self.dispatch(Action.roll(player_id))

    def answer(self, option_index: int) -> ActionResult:
        """Answer the pending question."""
        return self.dispatch(Action.answer(option_index))

    def reset(self) -> ActionResult:
        """Discard all state and return to SETUP."""
        return self.dispatch(Action.reset())

    def dispatch(self, action: Action) -> ActionResult:
        """
        Apply an action and commit the result.

        Raises InvalidStateError (or InvalidSetupError) if rejected.
        """
        result, _ = self._apply(action)
        return result

    def _apply(self, action: Action) -> tuple[ActionResult, int]:
        """Apply and commit an action; also return the generation it committed under."""
        with self._lock:
            result = self.reducer.apply(self._state, action)
            if not result.success:
                raise self._error_for(result)
            self._commit(action, result)
            generation = self._generation
        logger.debug("%s -> %s", action.action_type.value, result.state_changes)
        self._notify(result)
        return result, generation

    def _settle(self, action: Action, generation: int) -> ActionResult | None:
        """
        Apply the outcome of the question fetch started under generation.

        Returns None when the session was reset (and possibly begun again)
        during the fetch; the late outcome is dropped.
        """
        with self._lock:
            if generation != self._generation or self._state.phase != GamePhase.LOADING:
                logger.warning(
                    "Dropping %s from a stale fetch: session is in phase %s",
                    action.action_type.value, self._state.phase.value,
                )
                return None
            result = self.reducer.apply(self._state, action)
            if result.success:
                self._commit(action, result)
        if result.success:
            self._notify(result)
        return result

    def _commit(self, action: Action, result: ActionResult) -> None:
        self._state = result.new_state
        self.last_events = list(result.events)
        if action.action_type in (ActionType.BEGIN, ActionType.RESET):
            self._generation += 1

    def _notify(self, result: ActionResult) -> None:
        for listener in self._listeners:
            listener(result.new_state, result.events)

    def _error_for(self, result: ActionResult) -> InvalidStateError:
        if result.error_code == "INVALID_SETUP":
            return InvalidSetupError(result.error)
        return InvalidStateError(result.error, error_code=result.error_code or "INVALID_STATE")
