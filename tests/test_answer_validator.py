"""
Unit tests for AnswerValidator.
"""

import pytest

from validators.answer_validator import (
    AnswerState,
    AnswerValidator,
    strip_trailing_zeros,
    validate_board,
)


@pytest.fixture
def validator():
    return AnswerValidator()


class TestExactTypes:
    """Addition and subtraction need the exact value."""

    def test_scenario_idle_progress_correct(self, validator, make_challenge):
        challenge = make_challenge("ADD", 15)
        states = [validator.validate(total, challenge).state for total in (0, 7, 15)]
        assert states == [AnswerState.IDLE, AnswerState.IN_PROGRESS, AnswerState.CORRECT]

    def test_too_high(self, validator, make_challenge):
        result = validator.validate(16, make_challenge("SUB", 15))
        assert result.state is AnswerState.TOO_HIGH
        assert not result.correct

    @pytest.mark.parametrize("value", [0, 1, 14, 15, 16, 150, 1500])
    def test_correct_iff_equal(self, validator, make_challenge, value):
        result = validator.validate(value, make_challenge("ADD", 15))
        assert result.correct == (value == 15)

    def test_trailing_zeros_not_forgiven(self, validator, make_challenge):
        assert validator.validate(150, make_challenge("ADD", 15)).state is AnswerState.TOO_HIGH

    def test_mixed_is_exact(self, validator, make_challenge):
        challenge = make_challenge("MIXED", 42)
        assert validator.validate(4200, challenge).state is AnswerState.TOO_HIGH
        assert validator.validate(42, challenge).correct


class TestAlignedTypes:
    """Multiplication and division ignore trailing zeros on both sides."""

    @pytest.mark.parametrize(
        "value, target",
        [(42000, 42), (60000, 600), (6000000, 600), (42, 42), (6, 600)],
    )
    def test_correct_after_stripping(self, validator, make_challenge, value, target):
        assert validator.validate(value, make_challenge("MUL", target)).correct

    def test_division_uses_same_rule(self, validator, make_challenge):
        assert validator.validate(2100, make_challenge("DIV", 21)).correct

    def test_zero_is_never_correct(self, validator, make_challenge):
        result = validator.validate(0, make_challenge("MUL", 0))
        assert result.state is AnswerState.IDLE

    def test_no_too_high_state(self, validator, make_challenge):
        result = validator.validate(99999, make_challenge("MUL", 42))
        assert result.state is AnswerState.IN_PROGRESS

    def test_inner_zeros_matter(self, validator, make_challenge):
        assert not validator.validate(402, make_challenge("MUL", 42)).correct

    def test_details_show_compared_digits(self, validator, make_challenge):
        result = validator.validate(60000, make_challenge("MUL", 600))
        assert result.details["compared"] == ("6", "6")

    def test_strip_trailing_zeros(self):
        assert strip_trailing_zeros(42000) == "42"
        assert strip_trailing_zeros(0) == ""


class TestMessages:
    def test_state_messages(self, make_challenge):
        challenge = make_challenge("ADD", 15)
        assert validate_board(15, challenge).message == "Correct!"
        assert validate_board(20, challenge).message == "Too high..."
        assert validate_board(3, challenge).message == "Working..."
        assert validate_board(0, challenge).message == ""


class TestTypedAnswers:
    """Exam-mode answers parsed with SymPy."""

    @pytest.mark.parametrize("response", ["42", " 42 ", "42.0"])
    def test_plain_numbers_accepted(self, validator, make_challenge, response):
        assert validator.check_typed_answer(make_challenge("MUL", 42), response).correct

    def test_thousands_separators(self, validator, make_challenge):
        assert validator.check_typed_answer(make_challenge("ADD", 1200), "1,200").correct

    def test_typed_answers_compared_exactly(self, validator, make_challenge):
        result = validator.check_typed_answer(make_challenge("MUL", 42), "4200")
        assert result.state is AnswerState.TOO_HIGH

    def test_too_low(self, validator, make_challenge):
        result = validator.check_typed_answer(make_challenge("ADD", 42), "40")
        assert result.state is AnswerState.IN_PROGRESS
        assert result.message == "Too low..."

    @pytest.mark.parametrize(
        "response",
        ["6*7", "forty two", "", "x", "__import__('os')", "4.5", "()", "42.00000000000000000001"],
    )
    def test_rejected_responses(self, validator, make_challenge, response):
        result = validator.check_typed_answer(make_challenge("ADD", 42), response)
        assert result.state is AnswerState.IDLE
        assert result.message

    def test_nearly_whole_decimal_is_not_rounded(self, validator, make_challenge):
        result = validator.check_typed_answer(make_challenge("ADD", 1), "1.00000000000000000001")
        assert not result.correct
        assert result.state is AnswerState.IDLE

    def test_negative_answer_refused(self, validator, make_challenge):
        result = validator.check_typed_answer(make_challenge("SUB", 5), "-5")
        assert result.state is AnswerState.IDLE
        assert "negative" in result.message
