"""
Effect Resolver - Tile resolution after a player lands.

Each tile handler mutates the working context and reports one outcome:
- ADVANCE: the turn is over, pass to the next player
- CHAIN: the player moved again; resolve the new tile
- SUSPEND: a question is pending; the turn waits for an answer
- FINISH: the player reached the final tile

The resolver follows CHAIN outcomes itself and hands the terminal outcome
to the reducer, which is the only place that advances the turn or ends
the game.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Mapping
import logging

from ..errors import BoardValidationError
from .board import (
    SPECIAL_TILES, SpecialTile, EffectKind, validate_board,
    BRIDGE_BONUS, WELL_SETBACK, INN_SKIP_TURNS, LABYRINTH_TARGET, DEATH_TARGET,
)
from .dice import RandomSource
from .events import EventType, GameEvent
from .movement import move
from .state import GameState, PlayerState

logger = logging.getLogger(__name__)


class ResolutionOutcome(Enum):
    """What a tile resolution asks the reducer to do next."""
    ADVANCE = "advance"
    CHAIN = "chain"
    SUSPEND = "suspend"
    FINISH = "finish"


def tile_number(position: int) -> int:
    """1-based tile number shown to players."""
    return position + 1


@dataclass
class TurnContext:
    """
    Working state for one trigger.

    Holds the latest snapshot and the events produced so far. Every
    emitted event with a message is committed to history immediately,
    so each chain step sees the history of the steps before it.
    """
    state: GameState
    events: list[GameEvent] = field(default_factory=list)

    def emit(self, event: GameEvent) -> None:
        self.events.append(event)
        if event.records_history:
            self.state = self.state.with_history_entry(event.message)

    def player(self, player_id: int) -> PlayerState:
        player = self.state.get_player(player_id)
        if player is None:
            raise KeyError(f"Player {player_id} not found")
        return player

    def update_player(self, player: PlayerState) -> None:
        self.state = self.state.with_player(player)

    def move_player(self, player_id: int, steps: int) -> int:
        """Move a player through the bounce/clamp arithmetic. Returns the new position."""
        player = self.player(player_id)
        new_position = move(player.position, steps)
        self.update_player(player.with_position(new_position))
        self.emit(GameEvent(
            event_type=EventType.PLAYER_MOVED,
            player_id=player_id,
            data={"from": player.position, "to": new_position, "steps": steps},
        ))
        return new_position

    def place_player(self, player_id: int, position: int) -> None:
        """Teleport a player without movement arithmetic."""
        player = self.player(player_id)
        self.update_player(player.with_position(position))
        self.emit(GameEvent(
            event_type=EventType.PLAYER_MOVED,
            player_id=player_id,
            data={"from": player.position, "to": position, "teleport": True},
        ))


TileHandler = Callable[[TurnContext, PlayerState, "SpecialTile | None"], ResolutionOutcome]


@dataclass
class EffectResolver:
    """
    Resolves the tile under a player, following GOOSE/BRIDGE chains.

    The board is validated on construction, so every chain terminates.
    """
    rng: RandomSource
    board: Mapping[int, SpecialTile] = field(default_factory=lambda: SPECIAL_TILES)

    def __post_init__(self):
        errors = validate_board(self.board)
        if errors:
            raise BoardValidationError(errors)

    def resolve(self, ctx: TurnContext, player_id: int) -> ResolutionOutcome:
        """
        Resolve the player's tile until a terminal outcome is reached.

        Each chain step commits its move and history entry before the
        next tile is resolved.
        """
        outcome = self.resolve_tile(ctx, player_id)
        while outcome == ResolutionOutcome.CHAIN:
            logger.debug(
                "Chain continues for player %s at tile %s",
                player_id, ctx.player(player_id).position,
            )
            outcome = self.resolve_tile(ctx, player_id)
        return outcome

    def resolve_tile(self, ctx: TurnContext, player_id: int) -> ResolutionOutcome:
        """Resolve a single tile without following chains."""
        player = ctx.player(player_id)
        tile = self.board.get(player.position)
        handler = self._get_handler(tile.kind if tile else None)
        return handler(ctx, player, tile)

    def _get_handler(self, kind: EffectKind | None) -> TileHandler:
        """Get the handler function for an effect kind (None for plain tiles)."""
        handlers = {
            None: self._handle_plain,
            EffectKind.START: self._handle_start,
            EffectKind.GOOSE: self._handle_goose,
            EffectKind.BRIDGE: self._handle_bridge,
            EffectKind.INN: self._handle_inn,
            EffectKind.WELL: self._handle_well,
            EffectKind.LABYRINTH: self._handle_labyrinth,
            EffectKind.DEATH: self._handle_death,
            EffectKind.END: self._handle_end,
        }
        return handlers[kind]

    def _handle_plain(self, ctx, player, tile) -> ResolutionOutcome:
        """Pose a random question from the pool."""
        question = self.rng.choice(ctx.state.questions)
        ctx.state = ctx.state._copy_with(pending_question=question)
        ctx.emit(GameEvent(
            event_type=EventType.QUESTION_POSED,
            message=f"{player.label}: quiz on tile {tile_number(player.position)}!",
            player_id=player.player_id,
            data={"position": player.position},
        ))
        return ResolutionOutcome.SUSPEND

    def _handle_start(self, ctx, player, tile) -> ResolutionOutcome:
        return ResolutionOutcome.ADVANCE

    def _handle_goose(self, ctx, player, tile) -> ResolutionOutcome:
        """Repeat the last roll."""
        steps = ctx.state.last_roll or 1
        ctx.emit(GameEvent(
            event_type=EventType.TILE_EFFECT,
            message=f"{player.label} Goose! +{steps}",
            player_id=player.player_id,
            data={"kind": EffectKind.GOOSE.value, "steps": steps},
        ))
        ctx.move_player(player.player_id, steps)
        return ResolutionOutcome.CHAIN

    def _handle_bridge(self, ctx, player, tile) -> ResolutionOutcome:
        ctx.emit(GameEvent(
            event_type=EventType.TILE_EFFECT,
            message=f"{player.label} Bonus! +{BRIDGE_BONUS}",
            player_id=player.player_id,
            data={"kind": EffectKind.BRIDGE.value, "steps": BRIDGE_BONUS},
        ))
        ctx.move_player(player.player_id, BRIDGE_BONUS)
        return ResolutionOutcome.CHAIN

    def _handle_inn(self, ctx, player, tile) -> ResolutionOutcome:
        ctx.update_player(player.with_skip_turns(INN_SKIP_TURNS))
        ctx.emit(GameEvent(
            event_type=EventType.TILE_EFFECT,
            message=f"{player.label} skips a turn! 🚗",
            player_id=player.player_id,
            data={"kind": EffectKind.INN.value, "skip_turns": INN_SKIP_TURNS},
        ))
        return ResolutionOutcome.ADVANCE

    def _handle_well(self, ctx, player, tile) -> ResolutionOutcome:
        ctx.emit(GameEvent(
            event_type=EventType.TILE_EFFECT,
            message=f"{player.label} goes back {WELL_SETBACK} 💡",
            player_id=player.player_id,
            data={"kind": EffectKind.WELL.value, "steps": -WELL_SETBACK},
        ))
        ctx.move_player(player.player_id, -WELL_SETBACK)
        return ResolutionOutcome.ADVANCE

    def _handle_labyrinth(self, ctx, player, tile) -> ResolutionOutcome:
        ctx.emit(GameEvent(
            event_type=EventType.TILE_EFFECT,
            message=f"{player.label} is lost! Back to tile {tile_number(LABYRINTH_TARGET)}",
            player_id=player.player_id,
            data={"kind": EffectKind.LABYRINTH.value, "target": LABYRINTH_TARGET},
        ))
        ctx.place_player(player.player_id, LABYRINTH_TARGET)
        return ResolutionOutcome.ADVANCE

    def _handle_death(self, ctx, player, tile) -> ResolutionOutcome:
        ctx.emit(GameEvent(
            event_type=EventType.TILE_EFFECT,
            message=f"{player.label} starts over! 🍎",
            player_id=player.player_id,
            data={"kind": EffectKind.DEATH.value, "target": DEATH_TARGET},
        ))
        ctx.place_player(player.player_id, DEATH_TARGET)
        return ResolutionOutcome.ADVANCE

    def _handle_end(self, ctx, player, tile) -> ResolutionOutcome:
        return ResolutionOutcome.FINISH
