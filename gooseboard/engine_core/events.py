"""
Events - What happened while a trigger was processed.

Every transition returns the events it produced, in order. Events that
carry a message are also pushed onto the session history; the rest exist
for presenters that animate moves step by step.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class EventType(Enum):
    """Kinds of engine events."""
    # Session lifecycle
    QUESTIONS_REQUESTED = "questions_requested"
    QUESTIONS_FAILED = "questions_failed"
    SESSION_STARTED = "session_started"
    SESSION_RESET = "session_reset"

    # Turn flow
    TURN_SKIPPED = "turn_skipped"
    DIE_ROLLED = "die_rolled"
    PLAYER_MOVED = "player_moved"
    TURN_ADVANCED = "turn_advanced"

    # Tile effects
    TILE_EFFECT = "tile_effect"
    QUESTION_POSED = "question_posed"

    # Answers
    ANSWER_CORRECT = "answer_correct"
    ANSWER_WRONG = "answer_wrong"

    GAME_WON = "game_won"


@dataclass(frozen=True)
class GameEvent:
    """
    A single engine event.

    `message` is the human-readable history entry, or None for events
    that are not logged.
    """
    event_type: EventType
    message: str | None = None
    player_id: int | None = None
    data: dict[str, Any] = field(default_factory=dict)

    @property
    def records_history(self) -> bool:
        return self.message is not None

    def to_dict(self) -> dict[str, Any]:
        return {
            "event_type": self.event_type.value,
            "message": self.message,
            "player_id": self.player_id,
            "data": dict(self.data),
        }
