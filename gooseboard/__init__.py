"""
Goose Board - Classroom quiz goose game engine.

A deterministic state machine for the goose game, where plain tiles pose
quiz questions from an external question bank. The engine provides:
- Static special-tile table and movement arithmetic
- Immutable game state snapshots
- Tile effect resolution (goose/bridge chains, inn, well, labyrinth, death)
- Turn and question sequencing
"""

__version__ = "0.1.0"
