"""
challenge_generator.py

Builds practice problems for the frame. A challenge carries its question text,
the exact target the board has to reach, the operands in the order they are
set on the rods and, for multiplication and division, a note on where the
answer lands under forward multiplication.

Randomness is always drawn from the `random.Random` handed to the generator,
so a seeded generator reproduces the same sequence of problems.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from enum import Enum
from itertools import permutations
from typing import Callable, Dict, List, Optional, Sequence, Tuple
from uuid import uuid4

from core.difficulty_scaler import DifficultyScaler, OperandPlan
from core.rods import DEFAULT_ROD_COUNT

logger = logging.getLogger(__name__)

MAX_ATTEMPTS = 500


class ProblemType(str, Enum):
    ADD = "ADD"
    SUB = "SUB"
    MUL = "MUL"
    DIV = "DIV"
    MIXED = "MIXED"


BASIC_TYPES = (ProblemType.ADD, ProblemType.SUB, ProblemType.MUL, ProblemType.DIV)
TRAINING_TYPES = BASIC_TYPES
MIXED_PAIRS = tuple(permutations(BASIC_TYPES, 2))

OPERATOR_SYMBOLS = {
    ProblemType.ADD: "+",
    ProblemType.SUB: "-",
    ProblemType.MUL: "×",
    ProblemType.DIV: "÷",
}
LOW_PRECEDENCE = {"+", "-"}

# Exact, and small enough to fit on a single rod.
CANNED_OPERANDS: Dict[ProblemType, Tuple[List[int], List[str]]] = {
    ProblemType.ADD: ([4, 5], ["+"]),
    ProblemType.SUB: ([9, 4], ["-"]),
    ProblemType.MUL: ([3, 3], ["×"]),
    ProblemType.DIV: ([8, 4], ["÷"]),
    ProblemType.MIXED: ([2, 1, 3], ["+", "×"]),
}

Draw = Tuple[List[int], List[str]]


class GenerationExhausted(RuntimeError):
    """No operands satisfying the constraints turned up within the retry cap."""


@dataclass
class Challenge:
    """
    One exercise. Everything but `current_step_index` is fixed once built;
    the cursor is advisory and moved by whoever tracks guided play.
    """

    type: ProblemType
    question: str
    target_value: int
    steps: Tuple[int, ...]
    operators: Tuple[str, ...]
    rule_description: Optional[str] = None
    current_step_index: int = 0
    id: str = field(default_factory=lambda: uuid4().hex)

    def __post_init__(self) -> None:
        self.steps = tuple(self.steps)
        self.operators = tuple(self.operators)
        self._built = True

    def __setattr__(self, name: str, value) -> None:
        if getattr(self, "_built", False) and name != "current_step_index":
            raise AttributeError(f"Challenge.{name} is fixed once the challenge is built")
        super().__setattr__(name, value)

    def running_totals(self) -> List[int]:
        """Board value expected after each step is set."""
        totals = [self.steps[0]]
        for operator, operand in zip(self.operators, self.steps[1:]):
            totals.append(_apply(operator, totals[-1], operand))
        return totals

    def next_checkpoint(self) -> Optional[int]:
        totals = self.running_totals()
        if self.current_step_index >= len(totals):
            return None
        return totals[self.current_step_index]

    def advance(self) -> None:
        if self.current_step_index < len(self.steps):
            self.current_step_index += 1

    @property
    def is_complete(self) -> bool:
        return self.current_step_index >= len(self.steps)


def _apply(operator: str, left: int, right: int) -> Optional[int]:
    """One left-to-right step; None when a division would leave a remainder."""
    if operator == "+":
        return left + right
    if operator == "-":
        return left - right
    if operator == "×":
        return left * right
    if operator == "÷":
        if right == 0 or left % right:
            return None
        return left // right
    raise ValueError(f"Unknown operator: {operator!r}")


def evaluate_steps(steps: Sequence[int], operators: Sequence[str]) -> Optional[int]:
    result: Optional[int] = steps[0]
    for operator, operand in zip(operators, steps[1:]):
        result = _apply(operator, result, operand)
        if result is None:
            return None
    return result


def format_question(steps: Sequence[int], operators: Sequence[str]) -> str:
    """
    Renders the operands so that reading left to right gives the same answer
    as usual operator precedence.
    """

    text = str(steps[0])
    for index, (operator, operand) in enumerate(zip(operators, steps[1:])):
        if index > 0 and operator not in LOW_PRECEDENCE and operators[index - 1] in LOW_PRECEDENCE:
            text = f"({text})"
        text = f"{text} {operator} {operand}"
    return text


class ChallengeGenerator:
    """
    Produces `Challenge` objects sized for a board of `rod_count` rods.

    Usage:
        generator = ChallengeGenerator(rod_count=13, rng=random.Random(7))
        challenge = generator.generate(ProblemType.MUL)
    """

    def __init__(
        self,
        rod_count: int = DEFAULT_ROD_COUNT,
        *,
        rng: Optional[random.Random] = None,
        difficulty: str = "medium",
        max_attempts: int = MAX_ATTEMPTS,
    ):
        self.rod_count = rod_count
        self.capacity = 10 ** rod_count - 1
        self.rng = rng or random.Random()
        self.difficulty = difficulty
        self.max_attempts = max_attempts
        self.scaler = DifficultyScaler(rod_count)

    # ------------------------------------------------------------------ #
    # Public API
    # ------------------------------------------------------------------ #

    def random_kind(self) -> ProblemType:
        return self.rng.choice(TRAINING_TYPES)

    def generate(
        self,
        kind: ProblemType | str,
        *,
        level: Optional[str] = None,
        recent_results: Optional[List[bool]] = None,
    ) -> Challenge:
        kind = ProblemType(kind)
        plan = self.scaler.plan(level or self.difficulty, recent_results)
        try:
            steps, operators = self._draw_with_retries(kind, plan)
        except GenerationExhausted as exc:
            logger.warning("%s; falling back to canned operands", exc)
            steps, operators = CANNED_OPERANDS[kind]

        challenge = Challenge(
            type=kind,
            question=format_question(steps, operators),
            target_value=evaluate_steps(steps, operators),
            steps=steps,
            operators=operators,
            rule_description=self._rule_description(kind, steps),
        )
        logger.debug("Generated %s challenge %s = %d", kind.value, challenge.question, challenge.target_value)
        return challenge

    # ------------------------------------------------------------------ #
    # Drawing
    # ------------------------------------------------------------------ #

    def _draw_with_retries(self, kind: ProblemType, plan: OperandPlan) -> Draw:
        drawers: Dict[ProblemType, Callable[[OperandPlan], Optional[Draw]]] = {
            ProblemType.ADD: self._draw_addition,
            ProblemType.SUB: self._draw_subtraction,
            ProblemType.MUL: self._draw_multiplication,
            ProblemType.DIV: self._draw_division,
            ProblemType.MIXED: self._draw_mixed,
        }
        drawer = drawers[kind]
        for _ in range(self.max_attempts):
            drawn = drawer(plan)
            if drawn is not None and self._fits_board(*drawn):
                return drawn
        raise GenerationExhausted(
            f"No {kind.value} operands fit a {self.rod_count}-rod board "
            f"after {self.max_attempts} attempts"
        )

    def _fits_board(self, steps: List[int], operators: List[str]) -> bool:
        if any(operand > self.capacity for operand in steps):
            return False
        total = steps[0]
        for operator, operand in zip(operators, steps[1:]):
            total = _apply(operator, total, operand)
            if total is None or not 0 <= total <= self.capacity:
                return False
        return total > 0

    def _operand(self, digits: int) -> int:
        low = 10 ** (digits - 1) if digits > 1 else 1
        return self.rng.randint(low, 10 ** digits - 1)

    def _draw_addition(self, plan: OperandPlan) -> Optional[Draw]:
        steps = [self._operand(plan.digits) for _ in range(plan.terms)]
        return steps, ["+"] * (plan.terms - 1)

    def _draw_subtraction(self, plan: OperandPlan) -> Optional[Draw]:
        # A wider minuend keeps most chains above zero.
        first = self._operand(min(plan.digits + 1, self.rod_count))
        rest = [self._operand(plan.digits) for _ in range(plan.terms - 1)]
        return [first] + rest, ["-"] * len(rest)

    def _draw_multiplication(self, plan: OperandPlan) -> Optional[Draw]:
        multiplicand = self._operand(plan.multiplicand_digits)
        multiplier = self._operand(plan.multiplier_digits)
        if multiplier < 2 or multiplicand < 2:
            return None
        return [multiplicand, multiplier], ["×"]

    def _draw_division(self, plan: OperandPlan) -> Optional[Draw]:
        dividend = self._operand(plan.dividend_digits)
        divisor = self._operand(plan.divisor_digits)
        if divisor < 2 or dividend <= divisor or dividend % divisor:
            return None
        return [dividend, divisor], ["÷"]

    def _draw_mixed(self, plan: OperandPlan) -> Optional[Draw]:
        first_kind, second_kind = self.rng.choice(MIXED_PAIRS)
        first = self._draw_pair(first_kind, plan)
        if first is None:
            return None
        steps, operators = first
        intermediate = evaluate_steps(steps, operators)
        if intermediate is None or intermediate <= 0:
            return None
        operand = self._second_operand(second_kind, intermediate, plan)
        if operand is None:
            return None
        return steps + [operand], operators + [OPERATOR_SYMBOLS[second_kind]]

    def _draw_pair(self, kind: ProblemType, plan: OperandPlan) -> Optional[Draw]:
        if kind is ProblemType.ADD:
            return [self._operand(plan.digits), self._operand(plan.digits)], ["+"]
        if kind is ProblemType.SUB:
            return [self._operand(min(plan.digits + 1, self.rod_count)), self._operand(plan.digits)], ["-"]
        if kind is ProblemType.MUL:
            return self._draw_multiplication(plan)
        return self._draw_division(plan)

    def _second_operand(self, kind: ProblemType, intermediate: int, plan: OperandPlan) -> Optional[int]:
        if kind is ProblemType.ADD:
            return self._operand(plan.digits)
        if kind is ProblemType.SUB:
            operand = self._operand(plan.digits)
            return operand if operand < intermediate else None
        if kind is ProblemType.MUL:
            return self.rng.randint(2, 9)
        divisors = [d for d in range(2, 10) if intermediate % d == 0 and intermediate > d]
        return self.rng.choice(divisors) if divisors else None

    # ------------------------------------------------------------------ #
    # Positioning notes
    # ------------------------------------------------------------------ #

    @staticmethod
    def _rule_description(kind: ProblemType, steps: Sequence[int]) -> Optional[str]:
        if kind is ProblemType.MUL:
            m, n = len(str(steps[0])), len(str(steps[1]))
            digits = len(str(steps[0] * steps[1]))
            return (
                f"Positioning: a {m}-digit number times a {n}-digit number gives "
                f"{m + n} or {m + n - 1} digits; this product has {digits}. With "
                f"forward multiplication the product may start on any rod, and "
                f"trailing zeros on the board are ignored when checking."
            )
        if kind is ProblemType.DIV:
            m, n = len(str(steps[0])), len(str(steps[1]))
            digits = len(str(steps[0] // steps[1]))
            low, high = max(m - n, 1), m - n + 1
            counts = str(high) if low == high else f"{low} or {high}"
            return (
                f"Positioning: a {m}-digit dividend over a {n}-digit divisor gives "
                f"{counts} digits; this quotient has {digits}. The "
                f"quotient may be set from any rod, and trailing zeros on the "
                f"board are ignored when checking."
            )
        return None


def generate_challenge(
    kind: ProblemType | str,
    *,
    rod_count: int = DEFAULT_ROD_COUNT,
    rng: Optional[random.Random] = None,
    difficulty: str = "medium",
) -> Challenge:
    """
    Convenience function for one-off challenges.
    """

    generator = ChallengeGenerator(rod_count, rng=rng, difficulty=difficulty)
    return generator.generate(kind)


if __name__ == "__main__":
    generator = ChallengeGenerator(rng=random.Random(7))
    for kind in ProblemType:
        challenge = generator.generate(kind)
        print(kind.value, challenge.question, "=", challenge.target_value)
