"""
API Service - Business logic layer between API and engine.

The service:
1. Translates API requests to engine calls
2. Manages sessions
3. Formats snapshots and events for presenters

This layer is framework-agnostic. Engine errors propagate as
GooseError subclasses; the app maps them to error responses.
"""

from __future__ import annotations
from dataclasses import dataclass, field

from ..engine_core.action import ActionResult
from ..engine_core.board import SPECIAL_TILES
from ..engine_core.movement import BOARD_SIZE
from ..engine_core.state import GameState
from ..questions import AUDIENCE_PRESETS, OpenAIQuestionProvider
from ..session import SessionManager, Session
from .schemas import (
    # Requests
    CreateSessionRequest,
    BeginRequest,
    RollRequest,
    AnswerRequest,
    # Responses
    BoardResponse,
    GameStateResponse,
    TriggerResponse,
    SessionResponse,
    # Shared
    TileInfo,
    PlayerInfo,
    QuestionInfo,
    EventInfo,
    Phase,
)


@dataclass
class APIService:
    """
    Main API service for presenters.

    Usage:
        service = APIService()

        session = service.create_session(CreateSessionRequest())
        service.begin(session.session_id, BeginRequest(topic="Volcanoes", player_count=2))
        response = service.roll(session.session_id, RollRequest())
    """
    session_manager: SessionManager = field(
        default_factory=lambda: SessionManager(provider_factory=OpenAIQuestionProvider)
    )

    def create_session(self, request: CreateSessionRequest) -> SessionResponse:
        session = self.session_manager.create_session(seed=request.seed)
        return SessionResponse(
            session_id=session.session_id,
            phase=Phase(session.engine.phase.value),
            created_at=session.created_at,
        )

    def get_state(self, session_id: str) -> GameStateResponse:
        session = self.session_manager.require_session(session_id)
        return self._build_game_state(session_id, session.engine.state)

    def begin(self, session_id: str, request: BeginRequest) -> TriggerResponse:
        """
        Start the game. Blocks while the question pool is fetched.
        """
        session = self.session_manager.require_session(session_id)
        result = session.engine.begin(
            topic=request.topic,
            audience=request.audience,
            player_count=request.player_count,
            player_names=request.player_names,
        )
        return self._trigger_response(session, result)

    def roll(self, session_id: str, request: RollRequest) -> TriggerResponse:
        session = self.session_manager.require_session(session_id)
        result = session.engine.roll(player_id=request.player_id)
        return self._trigger_response(session, result)

    def answer(self, session_id: str, request: AnswerRequest) -> TriggerResponse:
        session = self.session_manager.require_session(session_id)
        result = session.engine.answer(request.option_index)
        return self._trigger_response(session, result)

    def reset(self, session_id: str) -> TriggerResponse:
        session = self.session_manager.require_session(session_id)
        result = session.engine.reset()
        return self._trigger_response(session, result)

    def end_session(self, session_id: str, reason: str = "user_ended") -> bool:
        return self.session_manager.end_session(session_id, reason)

    def list_sessions(self) -> list[str]:
        """Sweep idle sessions, then list the rest."""
        self.session_manager.cleanup_stale_sessions()
        return self.session_manager.list_sessions()

    def get_board(self) -> BoardResponse:
        return BoardResponse(
            board_size=BOARD_SIZE,
            tiles=[
                TileInfo(index=t.index, kind=t.kind.value, label=t.label, icon=t.icon)
                for t in sorted(SPECIAL_TILES.values(), key=lambda t: t.index)
            ],
            audience_presets=list(AUDIENCE_PRESETS),
        )

    # =========================================================================
    # Conversion Helpers
    # =========================================================================

    def _trigger_response(self, session: Session, result: ActionResult) -> TriggerResponse:
        return TriggerResponse(
            session_id=session.session_id,
            state=self._build_game_state(session.session_id, result.new_state),
            events=[EventInfo(**event.to_dict()) for event in result.events],
        )

    def _build_game_state(self, session_id: str, state: GameState) -> GameStateResponse:
        pending = state.pending_question
        return GameStateResponse(
            session_id=session_id,
            phase=Phase(state.phase.value),
            topic=state.topic,
            audience=state.audience,
            players=[
                PlayerInfo(
                    player_id=p.player_id,
                    name=p.name,
                    color=p.color,
                    icon=p.icon,
                    position=p.position,
                    skip_turns=p.skip_turns,
                    is_current_turn=(i == state.current_player_idx),
                )
                for i, p in enumerate(state.players)
            ],
            current_player_idx=state.current_player_idx,
            turn_number=state.turn_number,
            last_roll=state.last_roll,
            pending_question=(
                QuestionInfo(text=pending.text, options=list(pending.options))
                if pending else None
            ),
            history=list(state.history),
            can_roll=state.can_roll,
            winner_id=state.winner_id,
        )
