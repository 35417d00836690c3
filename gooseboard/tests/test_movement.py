"""
Tests for movement arithmetic.

Tests:
- Forward moves inside the board
- Bounce off the final tile
- Clamp at the start tile
"""

import pytest

from ..engine_core.movement import move, is_on_board, END_INDEX, START_INDEX


class TestForwardMove:
    """Plain forward moves."""

    def test_move_inside_board(self):
        assert move(3, 2) == 5

    def test_exact_landing_on_end(self):
        assert move(41, 6) == END_INDEX

    def test_zero_steps(self):
        assert move(12, 0) == 12


class TestBounce:
    """Overshooting the final tile reflects back by the excess."""

    @pytest.mark.parametrize("position,steps,expected", [
        (44, 6, 44),
        (46, 3, 45),
        (46, 2, 47 - 1),
        (47, 1, 46),
        (42, 6, 47 - 1),
    ])
    def test_bounce_cases(self, position, steps, expected):
        assert move(position, steps) == expected

    def test_bounce_formula_for_all_die_values(self):
        """For every overshoot, result == 47 - (p + s - 47)."""
        for position in range(START_INDEX, END_INDEX + 1):
            for steps in range(1, 7):
                raw = position + steps
                if raw > END_INDEX:
                    assert move(position, steps) == END_INDEX - (raw - END_INDEX)

    def test_bounce_is_single_reflection(self):
        """A huge overshoot reflects once and then clamps, it does not oscillate."""
        assert move(40, 100) == START_INDEX


class TestBackwardMove:
    """Setbacks clamp at the start tile."""

    def test_backward_inside_board(self):
        assert move(20, -4) == 16

    @pytest.mark.parametrize("position,steps", [(3, -5), (0, -1), (4, -6)])
    def test_clamp_at_start(self, position, steps):
        assert move(position, steps) == START_INDEX

    def test_backward_never_negative(self):
        for position in range(START_INDEX, END_INDEX + 1):
            for steps in range(-10, 0):
                assert move(position, steps) >= START_INDEX


def test_every_result_is_on_board():
    for position in range(START_INDEX, END_INDEX + 1):
        for steps in range(-6, 7):
            assert is_on_board(move(position, steps))
