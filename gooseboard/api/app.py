"""
FastAPI Application - REST adapter for browser presenters.

Endpoints:
    GET    /health                            Health check
    GET    /api/v1/board                      Special-tile table
    POST   /api/v1/sessions                   Create session (setup phase)
    GET    /api/v1/sessions                   List sessions
    GET    /api/v1/sessions/{id}              Get state snapshot
    DELETE /api/v1/sessions/{id}              End session
    POST   /api/v1/sessions/{id}/begin        Fetch questions and start
    POST   /api/v1/sessions/{id}/roll         Roll for the current player
    POST   /api/v1/sessions/{id}/answer       Answer the pending question
    POST   /api/v1/sessions/{id}/reset        Back to setup

Trigger endpoints return the new snapshot plus the events it produced,
so the presenter can animate each intermediate step (e.g. a goose chain).
They are plain `def` handlers: FastAPI runs them in its threadpool and
`begin` blocks while the question provider answers.

All responses are JSON with explicit Pydantic schemas.
"""

from typing import Optional
import logging

from fastapi import FastAPI, Query, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .. import config
from ..errors import (
    GooseError,
    InvalidSetupError,
    InvalidStateError,
    MalformedQuestionError,
    ProviderError,
    SessionNotFoundError,
)
from .service import APIService
from .schemas import (
    # Request models
    CreateSessionRequest,
    BeginRequest,
    RollRequest,
    AnswerRequest,
    # Response models
    BoardResponse,
    GameStateResponse,
    TriggerResponse,
    SessionResponse,
    SessionListResponse,
    EndSessionResponse,
    ErrorResponse,
    HealthResponse,
    # Enums
    ErrorCode,
)

logger = logging.getLogger(__name__)

API_VERSION = "1.0.0"


def _error_details(exc: GooseError) -> tuple[int, ErrorCode, Optional[dict]]:
    """Map an engine error to (status code, error code, details)."""
    if isinstance(exc, SessionNotFoundError):
        return 404, ErrorCode.SESSION_NOT_FOUND, None
    if isinstance(exc, InvalidSetupError):
        return 400, ErrorCode.INVALID_SETUP, None
    if isinstance(exc, InvalidStateError):
        try:
            code = ErrorCode(exc.error_code)
        except ValueError:
            code = ErrorCode.INVALID_STATE
        return 409, code, None
    if isinstance(exc, MalformedQuestionError):
        return 502, ErrorCode.MALFORMED_QUESTION, {"errors": exc.errors}
    if isinstance(exc, ProviderError):
        return 502, ErrorCode.PROVIDER_ERROR, None
    return 500, ErrorCode.INTERNAL_ERROR, None


def create_app(service: APIService | None = None) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        service: Optional APIService instance (creates new if not provided)

    Returns:
        FastAPI application instance
    """
    app = FastAPI(
        title="Goose Board API",
        description="""
Classroom goose game engine - roll, move, answer quiz questions.

## Turn Flow

1. `POST /begin` fetches the question pool and places the players.
2. `POST /roll` moves the current player. If the landing tile is plain,
   `pending_question` is set and `can_roll` becomes false.
3. `POST /answer` scores the answer; a wrong answer moves the player back
   by the last roll. The turn passes to the next player.

## Error Codes

| Code | Description |
|------|-------------|
| `SESSION_NOT_FOUND` | Session does not exist |
| `INVALID_STATE` | Trigger not allowed right now |
| `INVALID_SETUP` | Bad player count, topic or names |
| `INVALID_ANSWER` | Option index out of range |
| `NOT_YOUR_TURN` | Roll for a player other than the current one |
| `PROVIDER_ERROR` | Question bank failed; session stays in setup |
| `MALFORMED_QUESTION` | Question bank returned invalid questions |
        """,
        version=API_VERSION,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    config.configure_logging()
    api_service = service or APIService()

    # =========================================================================
    # Error helpers
    # =========================================================================

    def make_error_response(
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: Optional[dict] = None,
    ) -> JSONResponse:
        """Create a standardized error response."""
        return JSONResponse(
            status_code=status_code,
            content=ErrorResponse(
                error=message,
                error_code=error_code,
                details=details,
            ).model_dump(mode="json"),
        )

    @app.exception_handler(GooseError)
    async def handle_engine_error(request: Request, exc: GooseError) -> JSONResponse:
        status_code, error_code, details = _error_details(exc)
        logger.info("%s %s -> %s: %s", request.method, request.url.path, error_code.value, exc)
        return make_error_response(error_code, str(exc), status_code=status_code, details=details)

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        return make_error_response(
            ErrorCode.VALIDATION_ERROR,
            "Request validation failed",
            status_code=422,
            details={"errors": jsonable_encoder(exc.errors())},
        )

    # =========================================================================
    # Board
    # =========================================================================

    @app.get(
        "/api/v1/board",
        response_model=BoardResponse,
        tags=["Board"],
        summary="Get the special-tile table",
    )
    async def get_board() -> BoardResponse:
        return api_service.get_board()

    # =========================================================================
    # Session Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/sessions",
        response_model=SessionResponse,
        tags=["Sessions"],
        summary="Create a new game session",
    )
    def create_session(request: Optional[CreateSessionRequest] = None) -> SessionResponse:
        """Create a session in the setup phase."""
        return api_service.create_session(request or CreateSessionRequest())

    @app.get(
        "/api/v1/sessions",
        response_model=SessionListResponse,
        tags=["Sessions"],
        summary="List sessions",
    )
    def list_sessions() -> SessionListResponse:
        sessions = api_service.list_sessions()
        return SessionListResponse(sessions=sessions, count=len(sessions))

    @app.get(
        "/api/v1/sessions/{session_id}",
        response_model=GameStateResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Sessions"],
        summary="Get the session state snapshot",
    )
    def get_session(session_id: str) -> GameStateResponse:
        return api_service.get_state(session_id)

    @app.delete(
        "/api/v1/sessions/{session_id}",
        response_model=EndSessionResponse,
        tags=["Sessions"],
        summary="End a game session",
    )
    def end_session(
        session_id: str,
        reason: str = Query("user_ended", description="Reason for ending"),
    ) -> EndSessionResponse:
        """End a game session and release resources."""
        success = api_service.end_session(session_id, reason)
        return EndSessionResponse(success=success, session_id=session_id)

    # =========================================================================
    # Game Triggers
    # =========================================================================

    @app.post(
        "/api/v1/sessions/{session_id}/begin",
        response_model=TriggerResponse,
        responses={
            400: {"model": ErrorResponse, "description": "Invalid setup"},
            404: {"model": ErrorResponse, "description": "Session not found"},
            409: {"model": ErrorResponse, "description": "Session already started"},
            502: {"model": ErrorResponse, "description": "Question bank failed"},
        },
        tags=["Game"],
        summary="Fetch the question pool and start the game",
    )
    def begin(session_id: str, request: BeginRequest) -> TriggerResponse:
        return api_service.begin(session_id, request)

    @app.post(
        "/api/v1/sessions/{session_id}/roll",
        response_model=TriggerResponse,
        responses={
            404: {"model": ErrorResponse, "description": "Session not found"},
            409: {"model": ErrorResponse, "description": "Rolling not allowed"},
        },
        tags=["Game"],
        summary="Roll the die for the current player",
    )
    def roll(session_id: str, request: Optional[RollRequest] = None) -> TriggerResponse:
        return api_service.roll(session_id, request or RollRequest())

    @app.post(
        "/api/v1/sessions/{session_id}/answer",
        response_model=TriggerResponse,
        responses={
            404: {"model": ErrorResponse, "description": "Session not found"},
            409: {"model": ErrorResponse, "description": "No question pending or bad index"},
        },
        tags=["Game"],
        summary="Answer the pending question",
    )
    def answer(session_id: str, request: AnswerRequest) -> TriggerResponse:
        return api_service.answer(session_id, request)

    @app.post(
        "/api/v1/sessions/{session_id}/reset",
        response_model=TriggerResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Game"],
        summary="Discard the game and return to setup",
    )
    def reset(session_id: str) -> TriggerResponse:
        return api_service.reset(session_id)

    # =========================================================================
    # System
    # =========================================================================

    @app.get(
        "/health",
        response_model=HealthResponse,
        tags=["System"],
        summary="Health check",
    )
    async def health_check() -> HealthResponse:
        """Health check endpoint for load balancers."""
        return HealthResponse(
            status="healthy",
            service="gooseboard",
            version=API_VERSION,
        )

    return app


# For running directly: uvicorn gooseboard.api.app:app
app = create_app()
