"""
answer_validator.py

Judges the board against the active challenge. Addition and subtraction need
the exact value on the units rod; multiplication and division are read with
trailing zeros stripped on both sides, because a product set by forward
multiplication may start on any rod. Typed answers from exam (mental) mode are
parsed with SymPy so that "1,200" and " 1200 " read the same while an
expression such as "6*7" is refused.

The validator keeps no state between calls; it is safe to run after every
bead move.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from tokenize import TokenError
from typing import Any, Dict

from sympy import Expr, Rational
from sympy.core.sympify import SympifyError
from sympy.parsing.sympy_parser import parse_expr

from generators.challenge_generator import Challenge, ProblemType

ALIGNMENT_TOLERANT_TYPES = frozenset({ProblemType.MUL, ProblemType.DIV})
TYPED_ANSWER_PATTERN = re.compile(r"[0-9eE.+\-*/^()\s]+")


class AnswerState(str, Enum):
    CORRECT = "CORRECT"
    TOO_HIGH = "TOO_HIGH"
    IN_PROGRESS = "IN_PROGRESS"
    IDLE = "IDLE"


STATE_MESSAGES = {
    AnswerState.CORRECT: "Correct!",
    AnswerState.TOO_HIGH: "Too high...",
    AnswerState.IN_PROGRESS: "Working...",
    AnswerState.IDLE: "",
}


@dataclass
class ValidationResult:
    """
    Represents the outcome of a single validation attempt.
    """

    state: AnswerState
    message: str
    details: Dict[str, Any] = field(default_factory=dict)

    @property
    def correct(self) -> bool:
        return self.state is AnswerState.CORRECT


def strip_trailing_zeros(value: int) -> str:
    return str(value).rstrip("0")


class AnswerValidator:
    """
    Validates board totals (and typed answers) against a challenge.

    Usage:
        validator = AnswerValidator()
        result = validator.validate(board_total, challenge)
        if result.correct:
            ...
    """

    # ------------------------------------------------------------------ #
    # Public API
    # ------------------------------------------------------------------ #

    def validate(self, board_value: int, challenge: Challenge) -> ValidationResult:
        if challenge.type in ALIGNMENT_TOLERANT_TYPES:
            return self._validate_aligned(board_value, challenge.target_value)
        return self._validate_exact(board_value, challenge.target_value)

    def check_typed_answer(self, challenge: Challenge, response: str) -> ValidationResult:
        """
        Checks an answer typed in exam mode. Typed answers have no rod
        alignment to forgive, so they are always compared exactly.
        """

        try:
            value = self._to_integer(response)
        except ValueError as exc:
            return self._result(AnswerState.IDLE, message=str(exc), response=response)

        target = challenge.target_value
        if value == target:
            return self._result(AnswerState.CORRECT, value=value, target=target)
        if value > target:
            return self._result(AnswerState.TOO_HIGH, value=value, target=target)
        return self._result(AnswerState.IN_PROGRESS, message="Too low...", value=value, target=target)

    # ------------------------------------------------------------------ #
    # Internal helpers
    # ------------------------------------------------------------------ #

    def _validate_exact(self, board_value: int, target: int) -> ValidationResult:
        if board_value == target:
            state = AnswerState.CORRECT
        elif board_value > target:
            state = AnswerState.TOO_HIGH
        elif board_value > 0:
            state = AnswerState.IN_PROGRESS
        else:
            state = AnswerState.IDLE
        return self._result(state, value=board_value, target=target)

    def _validate_aligned(self, board_value: int, target: int) -> ValidationResult:
        board_digits = strip_trailing_zeros(board_value)
        target_digits = strip_trailing_zeros(target)
        if board_value > 0 and board_digits == target_digits:
            state = AnswerState.CORRECT
        elif board_value > 0:
            state = AnswerState.IN_PROGRESS
        else:
            state = AnswerState.IDLE
        return self._result(
            state,
            value=board_value,
            target=target,
            compared=(board_digits, target_digits),
        )

    @staticmethod
    def _result(state: AnswerState, message: str | None = None, **details: Any) -> ValidationResult:
        return ValidationResult(
            state=state,
            message=STATE_MESSAGES[state] if message is None else message,
            details=details,
        )

    @staticmethod
    def _to_integer(response: str) -> int:
        cleaned = str(response).replace(",", "").replace("_", "").strip()
        if not cleaned:
            raise ValueError("No answer given.")
        # parse_expr evaluates its input; only arithmetic characters get that far.
        if not TYPED_ANSWER_PATTERN.fullmatch(cleaned):
            raise ValueError(f"Unable to read '{response}' as a number.")
        try:
            expr: Expr = parse_expr(cleaned, evaluate=False)
        except (SympifyError, SyntaxError, TokenError, TypeError, ValueError) as exc:
            raise ValueError(f"Unable to read '{response}' as a number.") from exc

        if not (isinstance(expr, Expr) and expr.is_Atom and expr.is_number):
            raise ValueError(f"'{response}' is not a plain number.")
        # Floats keep the precision of the digits typed, so this is exact.
        value = Rational(expr) if expr.is_Float else expr
        if not value.is_Integer:
            raise ValueError(f"'{response}' is not a whole number.")
        if value < 0:
            raise ValueError(f"'{response}' is negative; the frame only shows whole numbers from zero up.")
        return int(value)


def validate_board(board_value: int, challenge: Challenge) -> ValidationResult:
    """
    Convenience function for one-off validations.
    """

    return AnswerValidator().validate(board_value, challenge)


if __name__ == "__main__":
    from generators.challenge_generator import generate_challenge

    demo = generate_challenge(ProblemType.MUL)
    print(demo.question, AnswerValidator().validate(demo.target_value * 100, demo))
