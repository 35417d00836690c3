"""
Movement - Position arithmetic on the 48-tile track.

A step that overshoots the final tile bounces back by the excess distance.
A step that would go below the start tile is clamped to it. The same rule
covers forward rolls and backward penalties.
"""

from __future__ import annotations

BOARD_SIZE = 48
START_INDEX = 0
END_INDEX = BOARD_SIZE - 1


def move(position: int, steps: int) -> int:
    """
    Return the landing position for a player at `position` moving `steps`.

    The reflection is applied once: 44 + 6 lands on 44, 46 + 3 lands on 45.
    Negative steps move backward and never go below START_INDEX.
    """
    new_position = position + steps
    if new_position > END_INDEX:
        new_position = END_INDEX - (new_position - END_INDEX)
    if new_position < START_INDEX:
        new_position = START_INDEX
    return new_position


def is_on_board(position: int) -> bool:
    return START_INDEX <= position <= END_INDEX
