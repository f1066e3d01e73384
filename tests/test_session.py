"""
Tests for AbacusSession: one user action end to end.
"""

import random
from datetime import datetime

import pytest

from core.rods import OutOfRangeError
from generators.challenge_generator import ChallengeGenerator, ProblemType
from trainer.session import CORRECT_ANNOUNCEMENT, AbacusSession, AppMode
from trainer.stats_store import TrainerStore
from validators.answer_validator import AnswerState


@pytest.fixture
def session(store):
    return AbacusSession(
        rod_count=3,
        store=store,
        generator=ChallengeGenerator(3, rng=random.Random(11)),
        clock=lambda: datetime(2024, 5, 1, 8, 30),
    )


def set_digit(session, rod_id, value):
    heaven, earth = (1, value - 5) if value >= 5 else (0, value)
    return session.move_beads(rod_id, heaven, earth)


class TestBeadMoves:
    def test_move_updates_total_and_formula(self, session):
        outcome = session.move_beads(2, 1, 3)
        assert outcome.total == 8
        assert outcome.rod.value == 8
        assert outcome.formula.action == "direct_add_8"
        assert session.last_formula == outcome.formula
        assert session.active_rod_id == 2

    def test_scenario_five_complement_then_total(self, session):
        session.move_beads(2, 1, 3)
        outcome = session.move_beads(2, 0, 3)
        assert outcome.formula.action == "five_complement_subtract_5"
        assert outcome.total == 3

    def test_out_of_range_leaves_everything(self, session):
        session.move_beads(1, 0, 2)
        before = session.snapshot()
        with pytest.raises(OutOfRangeError):
            session.move_beads(1, 0, 6)
        assert session.snapshot() == before

    def test_unknown_rod(self, session):
        with pytest.raises(IndexError):
            session.move_beads(3, 0, 1)

    def test_every_move_counts_as_operation(self, session, store):
        session.move_beads(0, 0, 1)
        session.move_beads(0, 0, 1)
        assert session.stats.total_operations == 2
        assert TrainerStore(store._data_file).stats.total_operations == 2

    def test_free_mode_skips_validation(self, session):
        assert session.move_beads(2, 0, 1).validation is None

    def test_voice_announces_koujue(self, session):
        assert session.move_beads(2, 0, 3).announcement == "三上三"
        session.toggle_setting("voice_enabled")
        assert session.move_beads(2, 0, 4).announcement is None


class TestTraining:
    def test_scenario_add_fifteen(self, session, make_challenge):
        session.set_mode(AppMode.TRAINING)
        session.challenge = make_challenge("ADD", 15, steps=[7, 8], operators=["+"])

        first = set_digit(session, 2, 7)
        assert first.validation.state is AnswerState.IN_PROGRESS
        assert session.challenge.current_step_index == 1

        set_digit(session, 1, 1)
        final = set_digit(session, 2, 5)
        assert final.total == 15
        assert final.validation.state is AnswerState.CORRECT
        assert final.announcement == CORRECT_ANNOUNCEMENT
        assert session.feedback == "Correct!"
        assert session.challenge.is_complete

    def test_correct_counted_once_per_transition(self, session, make_challenge):
        session.set_mode("TRAINING")
        session.challenge = make_challenge("MUL", 6)
        set_digit(session, 2, 6)
        session.move_beads(1, 0, 0)  # board still reads 6
        assert session.stats.correct_answers == 1
        assert session.stats.accuracy_history[-1].time == "08:30"

        set_digit(session, 2, 0)
        set_digit(session, 1, 6)  # 60 is also correct for MUL
        assert session.stats.correct_answers == 2

    def test_too_high_feedback(self, session, make_challenge):
        session.set_mode(AppMode.TRAINING)
        session.challenge = make_challenge("SUB", 5)
        set_digit(session, 2, 9)
        assert session.feedback == "Too high..."

    def test_start_challenge_resets_board(self, session):
        session.move_beads(0, 1, 0)
        challenge = session.start_challenge(ProblemType.MUL)
        assert session.mode is AppMode.TRAINING
        assert session.total == 0
        assert session.last_formula is None
        assert challenge.rule_description
        assert challenge.target_value <= 999

    def test_random_kind_when_none_given(self, session):
        challenge = session.start_challenge()
        assert challenge.type in {ProblemType.ADD, ProblemType.SUB, ProblemType.MUL, ProblemType.DIV}

    def test_abandoned_challenge_recorded(self, session):
        session.start_challenge("ADD")
        session.start_challenge("ADD")
        assert session.recent_results == [False]

    def test_solved_challenge_recorded(self, session, make_challenge):
        session.set_mode(AppMode.TRAINING)
        session.challenge = make_challenge("ADD", 3)
        set_digit(session, 2, 3)
        session.start_challenge("SUB")
        assert session.recent_results == [True]

    def test_reset_after_solving_keeps_result(self, session, make_challenge):
        session.set_mode(AppMode.TRAINING)
        session.challenge = make_challenge("ADD", 3)
        set_digit(session, 2, 3)
        session.reset()
        set_digit(session, 2, 3)
        session.start_challenge("ADD")
        assert session.recent_results == [True]
        assert session.stats.correct_answers == 2

    def test_mode_change_drops_challenge(self, session):
        session.start_challenge("ADD")
        session.set_mode(AppMode.FREE)
        assert session.challenge is None
        assert session.recent_results == [False]

        session.set_mode(AppMode.TRAINING)
        assert session.challenge is None
        assert set_digit(session, 2, 3).validation is None

    def test_same_mode_keeps_challenge(self, session):
        challenge = session.start_challenge("ADD")
        session.set_mode(AppMode.TRAINING)
        assert session.challenge is challenge

    def test_exam_mode_kept_on_new_challenge(self, session):
        session.set_mode(AppMode.EXAM)
        session.start_challenge("ADD")
        assert session.mode is AppMode.EXAM

    def test_reset_announcement_in_training(self, session):
        session.start_challenge("ADD")
        assert session.reset() == "清盘"

    def test_unknown_mode(self, session):
        with pytest.raises(ValueError):
            session.set_mode("PRACTICE")


class TestExamAnswers:
    def test_typed_answer_scores(self, session, make_challenge):
        session.set_mode(AppMode.EXAM)
        session.challenge = make_challenge("MUL", 42)
        result = session.submit_answer("42")
        assert result.correct
        assert session.stats.correct_answers == 1
        session.submit_answer("42")
        assert session.stats.correct_answers == 1

    def test_wrong_typed_answer(self, session, make_challenge):
        session.challenge = make_challenge("ADD", 42)
        result = session.submit_answer("50")
        assert result.state is AnswerState.TOO_HIGH
        assert session.feedback == "Too high..."

    def test_no_challenge(self, session):
        with pytest.raises(ValueError):
            session.submit_answer("1")


class TestSettingsAndStats:
    def test_toggle_setting_persists(self, session, store):
        settings = session.toggle_setting("mental_mode")
        assert settings.mental_mode is True
        assert TrainerStore(store._data_file).settings.mental_mode is True

    def test_unknown_setting(self, session):
        with pytest.raises(ValueError):
            session.toggle_setting("colour")

    def test_clear_stats(self, session):
        session.move_beads(0, 0, 1)
        stats = session.clear_stats()
        assert stats.total_operations == 0
        assert stats.accuracy_history[0].time == "reset"

    def test_session_without_store(self):
        session = AbacusSession(rod_count=2)
        session.move_beads(1, 0, 1)
        assert session.stats.total_operations == 1

    def test_snapshot(self, session):
        session.move_beads(2, 0, 2)
        snapshot = session.snapshot()
        assert snapshot.total == 2
        assert snapshot.mode == "FREE"
        assert len(snapshot.rods) == 3
        assert snapshot.last_formula.koujue == "二上二"
        assert snapshot.challenge is None
