"""
Engine Core - Deterministic goose board state machine.

The engine core:
1. Holds the static special-tile table
2. Defines immutable GameState snapshots
3. Applies triggers via the reducer
4. Resolves tile effects, following GOOSE/BRIDGE chains
"""

from .board import EffectKind, SpecialTile, SPECIAL_TILES, build_board, validate_board
from .movement import BOARD_SIZE, START_INDEX, END_INDEX, move
from .state import GameState, GamePhase, PlayerState, Question
from .events import EventType, GameEvent
from .action import Action, ActionType, ActionPayload, ActionResult
from .dice import RandomSource, make_random
from .effect_resolver import EffectResolver, ResolutionOutcome, TurnContext
from .reducer import Reducer, apply_action

__all__ = [
    "EffectKind",
    "SpecialTile",
    "SPECIAL_TILES",
    "build_board",
    "validate_board",
    "BOARD_SIZE",
    "START_INDEX",
    "END_INDEX",
    "move",
    "GameState",
    "GamePhase",
    "PlayerState",
    "Question",
    "EventType",
    "GameEvent",
    "Action",
    "ActionType",
    "ActionPayload",
    "ActionResult",
    "RandomSource",
    "make_random",
    "EffectResolver",
    "ResolutionOutcome",
    "TurnContext",
    "Reducer",
    "apply_action",
]
