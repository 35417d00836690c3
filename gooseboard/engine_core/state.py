"""
Game State - Immutable snapshots of a goose board session.

Design principles:
- Immutable-friendly: all mutations return new state
- Observable: presenters render a snapshot as-is
- Single mutator: only the reducer builds new snapshots
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Any

from .movement import END_INDEX, START_INDEX

HISTORY_LIMIT = 10
WELCOME_MESSAGE = "Welcome!"

MIN_PLAYERS = 2
MAX_PLAYERS = 5

PLAYER_COLORS = ("#1E3A8A", "#FBBF24", "#F97316", "#15803D", "#7E22CE")
PLAYER_ICONS = ("🐶", "🐱", "🐰", "🦊", "🐸")


class GamePhase(Enum):
    """High-level session phases."""
    SETUP = "setup"
    LOADING = "loading"  # Question fetch in flight
    PLAYING = "playing"
    FINISHED = "finished"


@dataclass(frozen=True)
class Question:
    """
    A multiple-choice quiz question.

    Built by the question bank validation; never changed afterwards.
    """
    text: str
    options: tuple[str, ...]
    correct_index: int

    def is_correct(self, option_index: int) -> bool:
        return option_index == self.correct_index

    def to_dict(self) -> dict[str, Any]:
        return {
            "text": self.text,
            "options": list(self.options),
            "correct_index": self.correct_index,
        }


@dataclass(frozen=True)
class PlayerState:
    """
    State for a single player.

    Color, icon and name are cosmetic; position and skip_turns are the
    only fields the rules read.
    """
    player_id: int
    name: str
    color: str = ""
    icon: str = ""
    position: int = START_INDEX
    skip_turns: int = 0

    @property
    def label(self) -> str:
        """Short display label used in history entries."""
        return f"{self.icon} {self.name}".strip()

    def with_position(self, position: int) -> PlayerState:
        """Return new player state at a different position."""
        return PlayerState(
            player_id=self.player_id,
            name=self.name,
            color=self.color,
            icon=self.icon,
            position=position,
            skip_turns=self.skip_turns,
        )

    def with_skip_turns(self, skip_turns: int) -> PlayerState:
        """Return new player state with a different skip counter."""
        return PlayerState(
            player_id=self.player_id,
            name=self.name,
            color=self.color,
            icon=self.icon,
            position=self.position,
            skip_turns=skip_turns,
        )

    @classmethod
    def create(cls, player_id: int, name: str | None = None) -> PlayerState:
        """Create a player at the start tile with default cosmetics."""
        return cls(
            player_id=player_id,
            name=name or f"P-{player_id + 1}",
            color=PLAYER_COLORS[player_id % len(PLAYER_COLORS)],
            icon=PLAYER_ICONS[player_id % len(PLAYER_ICONS)],
        )


@dataclass(frozen=True)
class GameState:
    """
    Complete session state at a point in time.

    This is the canonical state the engine operates on.
    All state changes go through the reducer.
    """
    phase: GamePhase = GamePhase.SETUP

    # Session setup
    topic: str = ""
    audience: str = ""
    requested_players: int = 0
    player_names: tuple[str, ...] = ()

    # Players and turn
    players: tuple[PlayerState, ...] = ()
    current_player_idx: int = 0
    turn_number: int = 0

    # Dice and questions
    last_roll: int | None = None
    questions: tuple[Question, ...] = ()
    pending_question: Question | None = None

    # Most recent entry first, capped at HISTORY_LIMIT
    history: tuple[str, ...] = (WELCOME_MESSAGE,)

    winner_id: int | None = None

    @classmethod
    def initial(cls) -> GameState:
        """Fresh SETUP state."""
        return cls()

    @property
    def current_player(self) -> PlayerState:
        """Get the current player."""
        return self.players[self.current_player_idx]

    @property
    def num_players(self) -> int:
        return len(self.players)

    @property
    def can_roll(self) -> bool:
        """True when the current player may roll."""
        return self.phase == GamePhase.PLAYING and self.pending_question is None

    @property
    def winner(self) -> PlayerState | None:
        """The player standing on the final tile once the game is finished."""
        if self.phase != GamePhase.FINISHED:
            return None
        for player in self.players:
            if player.position == END_INDEX:
                return player
        return None

    def get_player(self, player_id: int) -> PlayerState | None:
        """Get player by ID."""
        for p in self.players:
            if p.player_id == player_id:
                return p
        return None

    def with_player(self, player: PlayerState) -> GameState:
        """Return new state with updated player."""
        new_players = tuple(
            player if p.player_id == player.player_id else p
            for p in self.players
        )
        return self._copy_with(players=new_players)

    def with_history_entry(self, message: str) -> GameState:
        """Return new state with a message pushed onto the history log."""
        new_history = (message,) + self.history
        return self._copy_with(history=new_history[:HISTORY_LIMIT])

    def _copy_with(self, **kwargs) -> GameState:
        """Create a copy with some fields replaced."""
        return GameState(
            phase=kwargs.get("phase", self.phase),
            topic=kwargs.get("topic", self.topic),
            audience=kwargs.get("audience", self.audience),
            requested_players=kwargs.get("requested_players", self.requested_players),
            player_names=kwargs.get("player_names", self.player_names),
            players=kwargs.get("players", self.players),
            current_player_idx=kwargs.get("current_player_idx", self.current_player_idx),
            turn_number=kwargs.get("turn_number", self.turn_number),
            last_roll=kwargs.get("last_roll", self.last_roll),
            questions=kwargs.get("questions", self.questions),
            pending_question=kwargs.get("pending_question", self.pending_question),
            history=kwargs.get("history", self.history),
            winner_id=kwargs.get("winner_id", self.winner_id),
        )
