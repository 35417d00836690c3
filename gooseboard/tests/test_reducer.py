"""
Tests for the reducer (state transitions).

Tests:
- Session setup and question loading
- Roll, movement and tile effects
- Question answering
- Validation of invalid triggers
"""

import pytest

from ..engine_core.action import Action, ActionType
from ..engine_core.dice import make_random
from ..engine_core.reducer import Reducer, apply_action
from ..engine_core.events import EventType
from ..engine_core.state import GameState, GamePhase, HISTORY_LIMIT, WELCOME_MESSAGE
from .conftest import make_reducer, place


def event_types(result):
    return [e.event_type for e in result.events]


def turn_advances(result):
    return event_types(result).count(EventType.TURN_ADVANCED)


class TestSessionSetup:
    """BEGIN / QUESTIONS_LOADED / QUESTIONS_FAILED."""

    def test_begin_enters_loading(self):
        result = make_reducer().apply(GameState.initial(), Action.begin("Rome", "8-10 years", 3))

        assert result.success
        assert result.new_state.phase == GamePhase.LOADING
        assert result.new_state.topic == "Rome"
        assert result.new_state.requested_players == 3
        assert event_types(result) == [EventType.QUESTIONS_REQUESTED]

    @pytest.mark.parametrize("count", [0, 1, 6])
    def test_begin_player_count_out_of_range(self, count):
        result = make_reducer().apply(GameState.initial(), Action.begin("Rome", "", count))

        assert not result.success
        assert result.error_code == "INVALID_SETUP"

    def test_begin_requires_topic(self):
        result = make_reducer().apply(GameState.initial(), Action.begin("  ", "", 2))
        assert not result.success
        assert result.error_code == "INVALID_SETUP"

    def test_begin_name_count_mismatch(self):
        result = make_reducer().apply(GameState.initial(), Action.begin("Rome", "", 2, ["Ada"]))
        assert result.error_code == "INVALID_SETUP"

    def test_begin_twice_rejected(self, playing_state):
        result = make_reducer().apply(playing_state, Action.begin("Rome", "", 2))
        assert result.error_code == "INVALID_STATE"

    def test_questions_loaded_starts_game(self, sample_questions):
        reducer = make_reducer()
        loading = reducer.apply(
            GameState.initial(), Action.begin("Rome", "8-10 years", 3, ["Ada", "Bo", "Cy"])
        ).new_state

        result = reducer.apply(loading, Action.questions_loaded(sample_questions))
        state = result.new_state

        assert state.phase == GamePhase.PLAYING
        assert [p.name for p in state.players] == ["Ada", "Bo", "Cy"]
        assert all(p.position == 0 and p.skip_turns == 0 for p in state.players)
        assert state.current_player_idx == 0
        assert state.history == (WELCOME_MESSAGE,)
        assert state.can_roll

    def test_default_player_cosmetics(self, sample_questions):
        reducer = make_reducer()
        loading = reducer.apply(GameState.initial(), Action.begin("Rome", "", 2)).new_state
        state = reducer.apply(loading, Action.questions_loaded(sample_questions)).new_state

        assert [p.name for p in state.players] == ["P-1", "P-2"]
        assert state.players[0].color != state.players[1].color
        assert state.players[0].icon != state.players[1].icon

    def test_empty_pool_rejected(self):
        reducer = make_reducer()
        loading = reducer.apply(GameState.initial(), Action.begin("Rome", "", 2)).new_state

        result = reducer.apply(loading, Action.questions_loaded([]))

        assert not result.success
        assert result.error_code == "MALFORMED_QUESTION"

    def test_questions_failed_returns_to_setup(self):
        reducer = make_reducer()
        loading = reducer.apply(GameState.initial(), Action.begin("Rome", "", 2)).new_state

        result = reducer.apply(loading, Action.questions_failed("timeout"))

        assert result.new_state.phase == GamePhase.SETUP
        assert result.events[0].data["error"] == "timeout"

    def test_questions_loaded_outside_loading(self, sample_questions):
        result = make_reducer().apply(GameState.initial(), Action.questions_loaded(sample_questions))
        assert result.error_code == "INVALID_STATE"


class TestRoll:
    """Die throw, movement and plain tiles."""

    def test_bounce_from_44(self, playing_state):
        """44 + 6 = 50 bounces to 44, a plain tile."""
        state = place(playing_state, p0=44)
        result = make_reducer(6).apply(state, Action.roll())

        new_state = result.new_state
        assert new_state.players[0].position == 44
        assert new_state.last_roll == 6
        assert new_state.pending_question is not None

    def test_bounce_from_46(self, playing_state):
        state = place(playing_state, p0=46)
        result = make_reducer(3).apply(state, Action.roll())

        assert result.new_state.players[0].position == 45

    def test_plain_tile_poses_question(self, playing_state):
        result = make_reducer(3, choice_index=1).apply(playing_state, Action.roll())
        state = result.new_state

        assert state.players[0].position == 3
        assert state.pending_question == playing_state.questions[1]
        assert not state.can_roll
        assert state.current_player_idx == 0
        assert turn_advances(result) == 0
        assert event_types(result) == [
            EventType.DIE_ROLLED,
            EventType.PLAYER_MOVED,
            EventType.QUESTION_POSED,
        ]

    def test_roll_logged_in_history(self, playing_state):
        result = make_reducer(3).apply(playing_state, Action.roll())
        history = result.new_state.history

        assert "rolled 3" in history[1]
        assert "quiz" in history[0]
        assert history[-1] == WELCOME_MESSAGE

    def test_roll_for_other_player_rejected(self, playing_state):
        result = make_reducer(3).apply(playing_state, Action.roll(player_id=1))
        assert result.error_code == "NOT_YOUR_TURN"

    def test_roll_for_current_player_accepted(self, playing_state):
        result = make_reducer(3).apply(playing_state, Action.roll(player_id=0))
        assert result.success

    def test_roll_while_question_pending_rejected(self, playing_state):
        reducer = make_reducer(3, 4)
        pending = reducer.apply(playing_state, Action.roll()).new_state

        result = reducer.apply(pending, Action.roll())

        assert not result.success
        assert result.error_code == "INVALID_STATE"
        assert result.new_state is None

    @pytest.mark.parametrize("phase", [GamePhase.SETUP, GamePhase.LOADING, GamePhase.FINISHED])
    def test_roll_outside_playing_rejected(self, playing_state, phase):
        state = playing_state._copy_with(phase=phase)
        result = make_reducer(3).apply(state, Action.roll())
        assert result.error_code == "INVALID_STATE"


class TestSkipTurn:
    """INN penalty consumed on the next roll."""

    def test_skip_consumes_turn_without_die(self, playing_state):
        player = playing_state.players[0].with_skip_turns(1)
        state = playing_state.with_player(player)._copy_with(last_roll=5)
        reducer = make_reducer()

        result = reducer.apply(state, Action.roll())
        new_state = result.new_state

        assert reducer.rng.randint_calls == 0
        assert new_state.players[0].skip_turns == 0
        assert new_state.players[0].position == player.position
        assert new_state.last_roll == 5
        assert new_state.current_player_idx == 1
        assert turn_advances(result) == 1
        assert "skips this turn" in new_state.history[0]


class TestTileEffects:
    """Special tile dispatch."""

    def test_goose_repeats_roll_then_question(self, playing_state):
        """3 + 2 lands on goose 5, moves 2 more to plain 7, question posed."""
        state = place(playing_state, p0=3)
        result = make_reducer(2).apply(state, Action.roll())
        new_state = result.new_state

        assert new_state.players[0].position == 7
        assert new_state.pending_question is not None
        assert turn_advances(result) == 0
        moves = [e.data for e in result.events if e.event_type == EventType.PLAYER_MOVED]
        assert [(m["from"], m["to"]) for m in moves] == [(3, 5), (5, 7)]

    def test_goose_chain_through_two_geese(self, playing_state):
        """1 + 4 -> goose 5 -> goose 9 -> plain 13."""
        state = place(playing_state, p0=1)
        result = make_reducer(4).apply(state, Action.roll())

        assert result.new_state.players[0].position == 13
        effects = [e for e in result.events if e.event_type == EventType.TILE_EFFECT]
        assert len(effects) == 2

    def test_goose_repeats_full_roll(self, playing_state):
        """0 + 5 -> goose 5 -> +5 -> plain 10."""
        result = make_reducer(5).apply(playing_state, Action.roll())
        assert result.new_state.players[0].position == 10

    def test_goose_onto_bridge_chain(self, playing_state):
        """4 + 1 -> goose 5 -> +1 -> bridge 6 -> +4 -> plain 10."""
        state = place(playing_state, p0=4)
        result = make_reducer(1).apply(state, Action.roll())

        assert result.new_state.players[0].position == 10
        assert result.new_state.pending_question is not None

    def test_bridge_bonus(self, playing_state):
        state = place(playing_state, p0=2)
        result = make_reducer(4).apply(state, Action.roll())

        assert result.new_state.players[0].position == 10
        assert "Bonus! +4" in result.new_state.history[1]

    def test_goose_chain_ending_on_inn_advances_once(self, playing_state):
        """10 + 4 -> goose 14 -> +4 -> inn 18: skip set, turn advances exactly once."""
        state = place(playing_state, p0=10)
        result = make_reducer(4).apply(state, Action.roll())
        new_state = result.new_state

        assert new_state.players[0].position == 18
        assert new_state.players[0].skip_turns == 1
        assert new_state.current_player_idx == 1
        assert turn_advances(result) == 1
        assert new_state.pending_question is None

    def test_inn(self, playing_state):
        state = place(playing_state, p0=15)
        result = make_reducer(3).apply(state, Action.roll())

        assert result.new_state.players[0].skip_turns == 1
        assert result.new_state.current_player_idx == 1

    def test_well_moves_back_five(self, playing_state):
        state = place(playing_state, p0=27)
        result = make_reducer(3).apply(state, Action.roll())
        new_state = result.new_state

        assert new_state.players[0].position == 25
        assert new_state.pending_question is None
        assert new_state.current_player_idx == 1

    def test_labyrinth_teleports_to_11(self, playing_state):
        state = place(playing_state, p0=32)
        result = make_reducer(3).apply(state, Action.roll())

        assert result.new_state.players[0].position == 11
        moved = [e for e in result.events if e.event_type == EventType.PLAYER_MOVED][-1]
        assert moved.data["teleport"] is True
        assert result.new_state.current_player_idx == 1

    def test_death_returns_to_start(self, playing_state):
        state = place(playing_state, p0=38)
        result = make_reducer(3).apply(state, Action.roll())

        assert result.new_state.players[0].position == 0
        assert result.new_state.current_player_idx == 1

    def test_exact_landing_on_end_wins(self, playing_state):
        state = place(playing_state, p0=43)
        result = make_reducer(4).apply(state, Action.roll())
        new_state = result.new_state

        assert new_state.phase == GamePhase.FINISHED
        assert new_state.winner_id == 0
        assert new_state.winner.player_id == 0
        assert not new_state.can_roll
        assert turn_advances(result) == 0
        assert "wins" in new_state.history[0]

    def test_no_triggers_after_finish(self, playing_state):
        reducer = make_reducer(4, 1)
        finished = reducer.apply(place(playing_state, p0=43), Action.roll()).new_state

        result = reducer.apply(finished, Action.roll())

        assert result.error_code == "INVALID_STATE"


class TestAnswer:
    """Answering the pending question."""

    def _pending(self, playing_state, position=20, roll=4):
        state = place(playing_state, p0=position - roll)
        return make_reducer(roll).apply(state, Action.roll()).new_state

    def test_correct_answer_keeps_position(self, playing_state):
        state = self._pending(playing_state)
        correct = state.pending_question.correct_index

        result = make_reducer().apply(state, Action.answer(correct))
        new_state = result.new_state

        assert new_state.players[0].position == 20
        assert new_state.pending_question is None
        assert new_state.current_player_idx == 1
        assert turn_advances(result) == 1
        assert "correct" in new_state.history[0]

    def test_wrong_answer_moves_back_by_last_roll(self, playing_state):
        state = self._pending(playing_state, position=20, roll=4)
        wrong = (state.pending_question.correct_index + 1) % len(state.pending_question.options)

        result = make_reducer().apply(state, Action.answer(wrong))
        new_state = result.new_state

        assert new_state.players[0].position == 16
        assert new_state.pending_question is None
        assert new_state.current_player_idx == 1
        assert turn_advances(result) == 1
        assert "Back 4" in new_state.history[0]

    def test_wrong_answer_does_not_resolve_landing_tile(self, playing_state):
        """Falling back onto goose 5 does not trigger it."""
        state = self._pending(playing_state, position=8, roll=3)
        wrong = (state.pending_question.correct_index + 1) % len(state.pending_question.options)

        result = make_reducer().apply(state, Action.answer(wrong))

        assert result.new_state.players[0].position == 5
        assert EventType.TILE_EFFECT not in event_types(result)

    def test_wrong_answer_without_last_roll(self, playing_state, sample_questions):
        question = sample_questions[0]
        state = place(playing_state, p0=12)._copy_with(pending_question=question, last_roll=None)

        result = make_reducer().apply(state, Action.answer(question.correct_index + 1))

        assert result.new_state.players[0].position == 12

    def test_answer_without_pending_rejected(self, playing_state):
        result = make_reducer().apply(playing_state, Action.answer(0))
        assert result.error_code == "INVALID_STATE"

    @pytest.mark.parametrize("index", [-1, 3, 99])
    def test_answer_out_of_range_rejected(self, playing_state, sample_questions, index):
        state = playing_state._copy_with(pending_question=sample_questions[0])
        result = make_reducer().apply(state, Action.answer(index))
        assert result.error_code == "INVALID_ANSWER"


class TestTurnOrder:
    """Turn index advances modulo player count."""

    def test_wraps_around(self, three_player_state):
        state = three_player_state._copy_with(current_player_idx=2)
        state = place(state, p2=27)

        result = make_reducer(3).apply(state, Action.roll())

        assert result.new_state.current_player_idx == 0
        assert result.new_state.turn_number == 1


class TestHistoryAndReset:

    def test_history_capped(self, playing_state):
        state = playing_state
        for i in range(15):
            state = state.with_history_entry(f"entry {i}")

        assert len(state.history) == HISTORY_LIMIT
        assert state.history[0] == "entry 14"

    def test_reset_from_playing(self, playing_state):
        state = make_reducer(3).apply(playing_state, Action.roll()).new_state

        result = make_reducer().apply(state, Action.reset())

        assert result.new_state == GameState.initial()
        assert event_types(result) == [EventType.SESSION_RESET]

    def test_rejected_trigger_leaves_state_untouched(self, playing_state):
        before = playing_state
        make_reducer().apply(playing_state, Action.answer(0))
        assert playing_state == before


class TestRandomPlay:
    """Seeded full games keep the core invariants on every trigger."""

    @pytest.mark.parametrize("seed", [1, 7, 42, 2024])
    def test_invariants_hold(self, three_player_state, seed):
        reducer = Reducer(rng=make_random(seed))
        answer_rng = make_random(seed + 1)
        state = three_player_state

        for _ in range(20000):
            if state.phase == GamePhase.FINISHED:
                break
            if state.pending_question is not None:
                index = answer_rng.randint(0, len(state.pending_question.options) - 1)
                result = reducer.apply(state, Action.answer(index))
            else:
                result = reducer.apply(state, Action.roll())

            assert result.success
            assert turn_advances(result) <= 1
            state = result.new_state
            assert all(0 <= p.position <= 47 for p in state.players)
            assert all(p.skip_turns >= 0 for p in state.players)
            assert len(state.history) <= HISTORY_LIMIT
            assert not (state.pending_question is not None and state.can_roll)
            if state.phase == GamePhase.FINISHED:
                assert state.winner.position == 47
                assert state.pending_question is None

        assert state.phase == GamePhase.FINISHED


def test_apply_action_convenience(playing_state):
    result = apply_action(playing_state, Action.roll(), rng=make_random(5))

    assert result.success
    assert result.new_state.last_roll in range(1, 7)
    assert "P-1 rolled" in result.state_changes[0]


def test_every_action_type_has_a_handler():
    reducer = make_reducer()
    for action_type in ActionType:
        assert callable(reducer._get_handler(action_type))
