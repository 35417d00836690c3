"""
Pytest fixtures for goose board tests.
"""

import pytest

from ..engine_core.state import GameState, GamePhase, PlayerState, Question
from ..engine_core.reducer import Reducer
from ..questions import StaticQuestionProvider


class ScriptedRandom:
    """
    Deterministic stand-in for random.Random.

    randint() returns the scripted rolls in order; choice() always picks
    the item at choice_index.
    """

    def __init__(self, rolls=(), choice_index=0):
        self.rolls = list(rolls)
        self.choice_index = choice_index
        self.randint_calls = 0

    def randint(self, a, b):
        self.randint_calls += 1
        if not self.rolls:
            raise AssertionError("No scripted roll left")
        value = self.rolls.pop(0)
        assert a <= value <= b
        return value

    def choice(self, seq):
        return seq[self.choice_index % len(seq)]


def make_reducer(*rolls, choice_index=0) -> Reducer:
    """Reducer whose die returns the given rolls."""
    return Reducer(rng=ScriptedRandom(rolls, choice_index=choice_index))


def place(state: GameState, **positions) -> GameState:
    """Return state with players moved, e.g. place(state, p0=44, p1=3)."""
    for key, position in positions.items():
        player = state.get_player(int(key[1:]))
        state = state.with_player(player.with_position(position))
    return state


@pytest.fixture
def question_records() -> list[dict]:
    """Raw question records as a provider would return them."""
    return [
        {
            "text": "Who was the first emperor of Rome?",
            "options": ["Augustus", "Nero", "Caesar"],
            "correct_index": 0,
        },
        {
            "text": "Which river flows through Rome?",
            "options": ["Po", "Tiber", "Arno", "Adige"],
            "correct_index": 1,
        },
        {
            "text": "What was the Colosseum used for?",
            "options": ["Markets", "Games"],
            "correctIndex": 1,
        },
    ]


@pytest.fixture
def sample_questions(question_records) -> list[Question]:
    return StaticQuestionProvider(question_records).fetch_questions("Rome", "8-10 years")


@pytest.fixture
def static_provider(question_records) -> StaticQuestionProvider:
    return StaticQuestionProvider(question_records)


@pytest.fixture
def playing_state(sample_questions) -> GameState:
    """A 2-player game that has just started."""
    return GameState(
        phase=GamePhase.PLAYING,
        topic="Rome",
        audience="8-10 years",
        requested_players=2,
        players=(
            PlayerState.create(0),
            PlayerState.create(1),
        ),
        questions=tuple(sample_questions),
    )


@pytest.fixture
def three_player_state(playing_state) -> GameState:
    """A 3-player game that has just started."""
    return playing_state._copy_with(
        requested_players=3,
        players=playing_state.players + (PlayerState.create(2),),
    )
