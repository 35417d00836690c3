"""
Pydantic Schemas for API - Request/response models for OpenAPI.

These models define the contract between a browser presenter and the
engine. Snapshots never include the correct option of the pending
question.

Error Codes:
- SESSION_NOT_FOUND: Session does not exist or has been swept
- INVALID_STATE: Trigger not allowed in the current phase/turn state
- INVALID_SETUP: Player count, topic or names out of range
- INVALID_ANSWER: Option index outside the pending question's options
- NOT_YOUR_TURN: Roll requested for a player other than the current one
- SESSION_RESET: Session was reset while questions were loading
- PROVIDER_ERROR: Question bank failed; the session stays in setup
- MALFORMED_QUESTION: Question bank returned invalid questions
"""

from enum import Enum
from typing import Optional, Any
from pydantic import BaseModel, Field


# =============================================================================
# Enums
# =============================================================================

class Phase(str, Enum):
    """Session phases."""
    SETUP = "setup"
    LOADING = "loading"
    PLAYING = "playing"
    FINISHED = "finished"


class ErrorCode(str, Enum):
    """Structured error codes."""
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    INVALID_STATE = "INVALID_STATE"
    INVALID_SETUP = "INVALID_SETUP"
    INVALID_ANSWER = "INVALID_ANSWER"
    NOT_YOUR_TURN = "NOT_YOUR_TURN"
    SESSION_RESET = "SESSION_RESET"
    PROVIDER_ERROR = "PROVIDER_ERROR"
    MALFORMED_QUESTION = "MALFORMED_QUESTION"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


# =============================================================================
# Shared Models
# =============================================================================

class TileInfo(BaseModel):
    """A special tile for board rendering."""
    index: int
    kind: str
    label: str
    icon: str


class PlayerInfo(BaseModel):
    """Player information for display."""
    player_id: int
    name: str
    color: str
    icon: str
    position: int = Field(..., ge=0, le=47)
    skip_turns: int = 0
    is_current_turn: bool = False


class QuestionInfo(BaseModel):
    """The pending question, without its answer."""
    text: str
    options: list[str]


class EventInfo(BaseModel):
    """An engine event, in the order it happened."""
    event_type: str
    message: Optional[str] = None
    player_id: Optional[int] = None
    data: dict[str, Any] = Field(default_factory=dict)


# =============================================================================
# Request Models
# =============================================================================

class CreateSessionRequest(BaseModel):
    """Request to create a new session."""
    seed: Optional[int] = Field(None, description="Seed for dice and question selection")


class BeginRequest(BaseModel):
    """Request to start the game in a session."""
    topic: str = Field(..., min_length=1, description="Quiz topic")
    audience: str = Field("", description="Audience descriptor, e.g. '8-10 years'")
    player_count: int = Field(..., ge=2, le=5, description="Number of players (2-5)")
    player_names: Optional[list[str]] = Field(None, description="Optional display names")


class RollRequest(BaseModel):
    """Request to roll for the current player."""
    player_id: Optional[int] = Field(None, description="Must match the current player if given")


class AnswerRequest(BaseModel):
    """Answer to the pending question."""
    option_index: int = Field(..., ge=0, description="0-based index of the chosen option")


# =============================================================================
# Response Models
# =============================================================================

class BoardResponse(BaseModel):
    """The board layout."""
    board_size: int
    tiles: list[TileInfo]
    audience_presets: list[str] = Field(default_factory=list)


class GameStateResponse(BaseModel):
    """Snapshot of a session."""
    session_id: str
    phase: Phase
    topic: str = ""
    audience: str = ""
    players: list[PlayerInfo] = Field(default_factory=list)
    current_player_idx: int = 0
    turn_number: int = 0
    last_roll: Optional[int] = None
    pending_question: Optional[QuestionInfo] = None
    history: list[str] = Field(default_factory=list)
    can_roll: bool = False
    winner_id: Optional[int] = None


class TriggerResponse(BaseModel):
    """Result of a trigger: the new snapshot and the events it produced."""
    session_id: str
    state: GameStateResponse
    events: list[EventInfo] = Field(default_factory=list)


class SessionResponse(BaseModel):
    """Response for session creation."""
    session_id: str
    phase: Phase
    created_at: float


class SessionListResponse(BaseModel):
    """List of sessions."""
    sessions: list[str]
    count: int


class EndSessionResponse(BaseModel):
    """Response from ending a session."""
    success: bool
    session_id: str


class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str = Field(..., description="Human-readable error message")
    error_code: ErrorCode = Field(..., description="Machine-readable error code")
    details: Optional[dict[str, Any]] = Field(None, description="Additional error context")
    api_version: str = Field("v1", description="API version")


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    service: str
    version: str
