"""
Board - The static special-tile table.

Design principles:
- Immutable: the table is a read-only mapping keyed by board index
- Validated once: build_board() rejects duplicate indices, misplaced
  START/END tiles and GOOSE/BRIDGE loops before any game starts
- Cosmetic label and icon travel with each tile so presenters need no
  second table
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Iterable, Mapping

from ..errors import BoardValidationError
from .movement import START_INDEX, END_INDEX, is_on_board, move

DIE_FACES = 6

BRIDGE_BONUS = 4
WELL_SETBACK = 5
INN_SKIP_TURNS = 1
LABYRINTH_TARGET = 11
DEATH_TARGET = START_INDEX


class EffectKind(Enum):
    """Effect attached to a special tile."""
    START = "start"
    GOOSE = "goose"
    BRIDGE = "bridge"
    INN = "inn"
    WELL = "well"
    LABYRINTH = "labyrinth"
    DEATH = "death"
    END = "end"


# Effects that move the player and resolve the new tile without player input
CHAIN_KINDS = frozenset({EffectKind.GOOSE, EffectKind.BRIDGE})


@dataclass(frozen=True)
class SpecialTile:
    """A board index with a fixed effect."""
    index: int
    kind: EffectKind
    label: str = ""
    icon: str = ""


def build_board(tiles: Iterable[SpecialTile]) -> Mapping[int, SpecialTile]:
    """
    Build and validate a special-tile table.

    Raises BoardValidationError listing every problem found.
    """
    table: dict[int, SpecialTile] = {}
    errors: list[str] = []

    for tile in tiles:
        if tile.index in table:
            errors.append(
                f"Tile {tile.index} has two effects: "
                f"{table[tile.index].kind.value} and {tile.kind.value}"
            )
            continue
        table[tile.index] = tile

    errors.extend(validate_board(table))
    if errors:
        raise BoardValidationError(errors)

    return MappingProxyType(table)


def validate_board(table: Mapping[int, SpecialTile]) -> list[str]:
    """
    Check the table invariants.

    Returns a list of error messages (empty when valid).
    """
    errors: list[str] = []

    for index, tile in table.items():
        if index != tile.index:
            errors.append(f"Tile keyed at {index} declares index {tile.index}")
        if not is_on_board(index):
            errors.append(f"Tile {index} is off the board (0..{END_INDEX})")
        if tile.kind == EffectKind.START and index != START_INDEX:
            errors.append(f"START tile must be at {START_INDEX}, found at {index}")
        if tile.kind == EffectKind.END and index != END_INDEX:
            errors.append(f"END tile must be at {END_INDEX}, found at {index}")

    start = table.get(START_INDEX)
    if start is None or start.kind != EffectKind.START:
        errors.append(f"Index {START_INDEX} must be the START tile")
    end = table.get(END_INDEX)
    if end is None or end.kind != EffectKind.END:
        errors.append(f"Index {END_INDEX} must be the END tile")

    if not START_INDEX <= LABYRINTH_TARGET <= END_INDEX:
        errors.append(f"Labyrinth target {LABYRINTH_TARGET} is off the board")

    errors.extend(find_chain_cycles(table))
    return errors


def chain_step(tile: SpecialTile, position: int, roll: int) -> int:
    """Landing position after one GOOSE/BRIDGE hop."""
    if tile.kind == EffectKind.GOOSE:
        return move(position, roll)
    return move(position, BRIDGE_BONUS)


def find_chain_cycles(table: Mapping[int, SpecialTile]) -> list[str]:
    """
    Walk every GOOSE/BRIDGE chain for every die value.

    A chain that revisits a tile would never terminate.
    """
    errors: list[str] = []
    for start_index, start_tile in sorted(table.items()):
        if start_tile.kind not in CHAIN_KINDS:
            continue
        for roll in range(1, DIE_FACES + 1):
            path = [start_index]
            position = chain_step(start_tile, start_index, roll)
            while position in table and table[position].kind in CHAIN_KINDS:
                if position in path:
                    path.append(position)
                    errors.append(
                        f"Chain from tile {start_index} loops with roll {roll}: "
                        + " -> ".join(str(p) for p in path)
                    )
                    break
                path.append(position)
                position = chain_step(table[position], position, roll)
    return errors


SPECIAL_TILES: Mapping[int, SpecialTile] = build_board([
    SpecialTile(0, EffectKind.START, "Start", "🚀"),
    SpecialTile(5, EffectKind.GOOSE, "Goose", "🪿"),
    SpecialTile(6, EffectKind.BRIDGE, "Tap", "🚰"),
    SpecialTile(9, EffectKind.GOOSE, "Goose", "🪿"),
    SpecialTile(14, EffectKind.GOOSE, "Goose", "🪿"),
    SpecialTile(18, EffectKind.INN, "Car", "🚗"),
    SpecialTile(23, EffectKind.GOOSE, "Goose", "🪿"),
    SpecialTile(30, EffectKind.WELL, "Energy", "💡"),
    SpecialTile(35, EffectKind.LABYRINTH, "Crow", "🐦‍⬛"),
    SpecialTile(41, EffectKind.DEATH, "Waste", "🍎"),
    SpecialTile(47, EffectKind.END, "Finish", "🏁"),
])


def tile_at(position: int, table: Mapping[int, SpecialTile] = SPECIAL_TILES) -> SpecialTile | None:
    """Special tile at a position, or None for a plain tile."""
    return table.get(position)

