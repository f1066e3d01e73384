"""
difficulty_scaler.py

Calibrates how large the operands of the next challenge should be. Callers
hand in the level they asked for plus whatever recent results they track; the
scaler nudges the level and clips the level's digit counts to what the frame
can actually show, so the generator never has to second-guess the board size.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from core.level_progression import LEVEL_ORDER, get_level_info


@dataclass(frozen=True)
class OperandPlan:
    """Digit budget for every kind of problem at one level on one board."""

    level: str
    terms: int
    digits: int
    multiplicand_digits: int
    multiplier_digits: int
    dividend_digits: int
    divisor_digits: int
    rationale: str = ""


class DifficultyScaler:
    """
    Computes an operand plan anchored to the level table.

    Usage:
        scaler = DifficultyScaler(rod_count=13)
        plan = scaler.plan("medium", recent_results=[True, True, False])
    """

    def __init__(self, rod_count: int):
        if rod_count < 1:
            raise ValueError(f"Invalid rod count: {rod_count}. Must be at least 1.")
        self.rod_count = rod_count

    # --------------------------------------------------------------------- #
    # Public API
    # --------------------------------------------------------------------- #

    def plan(
        self,
        target: str = "medium",
        recent_results: Optional[List[bool]] = None,
    ) -> OperandPlan:
        recent_results = recent_results or []
        level = self.resolve_level(target, recent_results)
        info = get_level_info(level)

        addition = info["addition"]
        multiplication = info["multiplication"]
        division = info["division"]

        digits = self._clip(addition["digits"])
        multiplier_digits = self._clip(multiplication["multiplier_digits"])
        # Leave room for the product: m-digit times n-digit needs up to m+n rods.
        multiplicand_digits = max(
            1, min(multiplication["multiplicand_digits"], self.rod_count - multiplier_digits)
        )
        dividend_digits = self._clip(division["dividend_digits"])
        divisor_digits = min(division["divisor_digits"], dividend_digits)

        return OperandPlan(
            level=level,
            terms=addition["terms"],
            digits=digits,
            multiplicand_digits=multiplicand_digits,
            multiplier_digits=multiplier_digits,
            dividend_digits=dividend_digits,
            divisor_digits=divisor_digits,
            rationale=self._build_rationale(target, recent_results, level),
        )

    def resolve_level(self, target: str, recent_results: List[bool]) -> str:
        base_level = target if target in LEVEL_ORDER else "medium"
        index = LEVEL_ORDER.index(base_level) + self._compute_trend(recent_results)
        return LEVEL_ORDER[min(max(index, 0), len(LEVEL_ORDER) - 1)]

    # --------------------------------------------------------------------- #
    # Internal helpers
    # --------------------------------------------------------------------- #

    def _clip(self, digits: int) -> int:
        return max(1, min(digits, self.rod_count))

    @staticmethod
    def _compute_trend(results: List[bool], window: int = 5) -> int:
        """
        +1 if most recent challenges were solved, -1 if most were abandoned,
        otherwise 0.
        """

        if not results:
            return 0

        recent = results[-window:]
        score = sum(1 if r else -1 for r in recent)
        if score > 0:
            return 1
        if score < 0:
            return -1
        return 0

    @staticmethod
    def _build_rationale(requested: str, results: List[bool], final: str) -> str:
        trend = DifficultyScaler._compute_trend(results)
        trend_label = {1: "improving", 0: "steady", -1: "declining"}[trend]
        return f"Requested {requested}, trend={trend_label}; returning {final}."


if __name__ == "__main__":
    scaler = DifficultyScaler(rod_count=13)
    print(scaler.plan("medium", [True, True, False, True, True]))
