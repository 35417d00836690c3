"""
Dice - Replaceable source of randomness.

The engine only needs two operations: a die throw and a uniform pick from
the question pool. random.Random provides both, so a seeded instance gives
deterministic games; tests may pass any object with the same two methods.
"""

from __future__ import annotations
import random
from typing import Protocol, Sequence, TypeVar

T = TypeVar("T")


class RandomSource(Protocol):
    """The subset of random.Random the engine uses."""

    def randint(self, a: int, b: int) -> int: ...

    def choice(self, seq: Sequence[T]) -> T: ...


def make_random(seed: int | None = None) -> RandomSource:
    """Create the default random source, optionally seeded."""
    return random.Random(seed)
