"""
API Module - HTTP interface for browser presenters.

Exposes the engine via REST:
1. Create a session
2. Begin it with a topic, audience and player count
3. Roll and answer until someone wins
4. Render the returned snapshots and animate the returned events

All state is session-scoped and in-memory.
"""

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
    ErrorResponse,
    # Shared
    PlayerInfo,
    QuestionInfo,
    EventInfo,
    TileInfo,
    # Enums
    ErrorCode,
    Phase,
)
from .service import APIService
from .app import create_app

__all__ = [
    # Requests
    "CreateSessionRequest",
    "BeginRequest",
    "RollRequest",
    "AnswerRequest",
    # Responses
    "BoardResponse",
    "GameStateResponse",
    "TriggerResponse",
    "SessionResponse",
    "ErrorResponse",
    # Shared
    "PlayerInfo",
    "QuestionInfo",
    "EventInfo",
    "TileInfo",
    # Enums
    "ErrorCode",
    "Phase",
    # Service
    "APIService",
    "create_app",
]
