"""
Session Manager - Creates and manages game sessions.

LIFECYCLE:
1. Presenter creates a session -> engine in SETUP
2. Presenter begins the session -> question pool fetched, players placed
3. Players roll and answer until someone reaches the final tile
4. Session ended (or swept once idle) -> removed from memory

PERSISTENCE RULES:
- Sessions are in-memory only
- Nothing survives a process restart
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Callable
import logging
import threading
import time
import uuid

from .. import config
from ..engine_core.dice import make_random
from ..engine_core.state import GamePhase
from ..errors import SessionNotFoundError
from ..questions.provider import QuestionProvider
from .engine import GameEngine

logger = logging.getLogger(__name__)


@dataclass
class Session:
    """
    An in-memory game session.

    Holds one GameEngine plus bookkeeping for the manager.
    """
    session_id: str
    engine: GameEngine
    created_at: float
    last_active: float = 0.0

    def touch(self) -> None:
        self.last_active = time.time()

    def is_active(self) -> bool:
        """A session is active while questions load or the game is running."""
        return self.engine.phase in {GamePhase.LOADING, GamePhase.PLAYING}


@dataclass
class SessionManager:
    """
    Manages game sessions.

    Responsibilities:
    - Create sessions, each with its own engine and question provider
    - Track sessions by id
    - Clean up idle sessions
    """
    provider_factory: Callable[[], QuestionProvider]
    ttl_seconds: int = config.SESSION_TTL_SECONDS
    _sessions: dict[str, Session] = field(default_factory=dict)
    _lock: threading.Lock = field(default_factory=threading.Lock)

    def create_session(self, seed: int | None = None) -> Session:
        """
        Create a new session in SETUP.

        Args:
            seed: Optional seed for the dice and question selection
        """
        session_id = str(uuid.uuid4())
        engine = GameEngine(
            provider=self.provider_factory(),
            rng=make_random(seed),
        )
        now = time.time()
        session = Session(
            session_id=session_id,
            engine=engine,
            created_at=now,
            last_active=now,
        )
        with self._lock:
            self._sessions[session_id] = session
        logger.info("Created session %s", session_id)
        return session

    def get_session(self, session_id: str) -> Session | None:
        """Get a session by ID."""
        return self._sessions.get(session_id)

    def require_session(self, session_id: str) -> Session:
        """Get a session by ID, raising SessionNotFoundError if missing."""
        session = self.get_session(session_id)
        if session is None:
            raise SessionNotFoundError(f"Session {session_id} not found")
        session.touch()
        return session

    def end_session(self, session_id: str, reason: str = "completed") -> bool:
        """
        End a session and drop it from memory.

        Returns True if the session existed.
        """
        with self._lock:
            session = self._sessions.pop(session_id, None)
        if session is None:
            return False
        logger.info("Ended session %s (%s)", session_id, reason)
        return True

    def list_sessions(self) -> list[str]:
        """List IDs of all sessions."""
        return list(self._sessions.keys())

    def list_active_sessions(self) -> list[str]:
        """List IDs of sessions that are loading or playing."""
        return [
            sid for sid, session in self._sessions.items()
            if session.is_active()
        ]

    def cleanup_stale_sessions(self, max_age_seconds: int | None = None) -> list[str]:
        """
        Remove sessions idle longer than max_age that are not active.

        Returns the removed session IDs.
        """
        max_age = self.ttl_seconds if max_age_seconds is None else max_age_seconds
        current_time = time.time()
        active = set(self.list_active_sessions())
        to_remove = [
            session_id for session_id, session in list(self._sessions.items())
            if current_time - session.last_active > max_age and session_id not in active
        ]
        for session_id in to_remove:
            self.end_session(session_id, reason="stale")
        return to_remove
