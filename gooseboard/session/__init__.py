"""
Session Module - Drives game sessions.

A session represents one play-through:
- Created in SETUP when a presenter asks for one
- Holds a GameEngine with the current game state
- Dropped when ended or swept after idling

Sessions are EPHEMERAL: nothing is persisted.
"""

from .engine import GameEngine
from .manager import SessionManager, Session

__all__ = [
    "GameEngine",
    "SessionManager",
    "Session",
]
