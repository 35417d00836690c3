"""
Action System - Triggers, payloads, and results.

Actions represent:
1. Player triggers (roll, answer)
2. Session triggers (begin, questions loaded/failed, reset)

All state changes flow through actions.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .events import GameEvent


class ActionType(Enum):
    """Types of actions in the system."""
    # Player triggers
    ROLL = "roll"
    ANSWER = "answer"

    # Session triggers
    BEGIN = "begin"
    QUESTIONS_LOADED = "questions_loaded"
    QUESTIONS_FAILED = "questions_failed"
    RESET = "reset"


@dataclass
class ActionPayload:
    """
    Payload for an action - contains the action parameters.

    Different action types use different fields.
    Validation happens in the reducer.
    """
    # Player triggers
    player_id: int | None = None
    option_index: int | None = None

    # Session setup
    topic: str | None = None
    audience: str | None = None
    player_count: int | None = None
    player_names: list[str] | None = None

    # Question provider result
    questions: list[Any] | None = None  # list[Question]
    error: str | None = None


@dataclass
class Action:
    """
    A complete action to be applied to the game state.

    Actions are validated before application and applied
    atomically by the reducer.
    """
    action_type: ActionType
    payload: ActionPayload = field(default_factory=ActionPayload)

    @classmethod
    def begin(
        cls,
        topic: str,
        audience: str,
        player_count: int,
        player_names: list[str] | None = None,
    ) -> Action:
        """Factory for session start."""
        return cls(
            action_type=ActionType.BEGIN,
            payload=ActionPayload(
                topic=topic,
                audience=audience,
                player_count=player_count,
                player_names=player_names,
            ),
        )

    @classmethod
    def questions_loaded(cls, questions: list[Any]) -> Action:
        """Factory for a successful question fetch."""
        return cls(
            action_type=ActionType.QUESTIONS_LOADED,
            payload=ActionPayload(questions=list(questions)),
        )

    @classmethod
    def questions_failed(cls, error: str) -> Action:
        """Factory for a failed question fetch."""
        return cls(
            action_type=ActionType.QUESTIONS_FAILED,
            payload=ActionPayload(error=error),
        )

    @classmethod
    def roll(cls, player_id: int | None = None) -> Action:
        """Factory for a roll request. player_id, when given, must be the current player."""
        return cls(
            action_type=ActionType.ROLL,
            payload=ActionPayload(player_id=player_id),
        )

    @classmethod
    def answer(cls, option_index: int) -> Action:
        """Factory for an answer to the pending question."""
        return cls(
            action_type=ActionType.ANSWER,
            payload=ActionPayload(option_index=option_index),
        )

    @classmethod
    def reset(cls) -> Action:
        return cls(action_type=ActionType.RESET)


@dataclass
class ActionResult:
    """
    Result of applying an action.

    Contains:
    - Whether action succeeded
    - New state (if succeeded)
    - Errors (if failed)
    - Events produced, in order (for history and presenter animation)
    """
    success: bool
    new_state: Any | None = None  # GameState
    error: str | None = None
    error_code: str | None = None
    events: list[GameEvent] = field(default_factory=list)

    @property
    def state_changes(self) -> list[str]:
        """Human-readable messages of the logged events, oldest first."""
        return [e.message for e in self.events if e.message is not None]

    @classmethod
    def failure(cls, error: str, error_code: str | None = None) -> ActionResult:
        """Create a failure result."""
        return cls(success=False, error=error, error_code=error_code)

    @classmethod
    def success_with_state(
        cls,
        state: Any,
        events: list[GameEvent] | None = None,
    ) -> ActionResult:
        """Create a success result with new state."""
        return cls(
            success=True,
            new_state=state,
            events=events or [],
        )
