"""
Unit tests for DifficultyScaler.
"""

import pytest

from core.difficulty_scaler import DifficultyScaler
from core.level_progression import LEVEL_PROGRESSION, get_level_info


class TestResolveLevel:
    """Recent results nudge the requested level by one step."""

    def test_no_history_keeps_target(self):
        assert DifficultyScaler(13).resolve_level("medium", []) == "medium"

    def test_improving_moves_up(self):
        assert DifficultyScaler(13).resolve_level("easy", [True, True, False]) == "medium"

    def test_declining_moves_down(self):
        assert DifficultyScaler(13).resolve_level("medium", [False, False, True]) == "easy"

    def test_clamped_at_ends(self):
        scaler = DifficultyScaler(13)
        assert scaler.resolve_level("hard", [True] * 5) == "hard"
        assert scaler.resolve_level("easy", [False] * 5) == "easy"

    def test_only_last_five_count(self):
        results = [False] * 10 + [True, True, True, False, False]
        assert DifficultyScaler(13).resolve_level("medium", results) == "hard"

    def test_unknown_target_falls_back_to_medium(self):
        assert DifficultyScaler(13).resolve_level("impossible", []) == "medium"


class TestPlan:
    """Digit budgets clipped to the board."""

    def test_plan_matches_table_on_large_board(self):
        plan = DifficultyScaler(13).plan("hard")
        hard = LEVEL_PROGRESSION["hard"]
        assert plan.level == "hard"
        assert plan.terms == hard["addition"]["terms"]
        assert plan.digits == hard["addition"]["digits"]
        assert plan.multiplicand_digits == hard["multiplication"]["multiplicand_digits"]
        assert plan.divisor_digits == hard["division"]["divisor_digits"]

    def test_small_board_clips_digits(self):
        plan = DifficultyScaler(2).plan("hard")
        assert plan.digits == 2
        assert plan.multiplier_digits + plan.multiplicand_digits <= 3
        assert plan.dividend_digits == 2
        assert plan.divisor_digits <= plan.dividend_digits

    def test_rationale_mentions_trend(self):
        plan = DifficultyScaler(13).plan("medium", [True])
        assert "improving" in plan.rationale
        assert plan.level == "hard"

    def test_invalid_board(self):
        with pytest.raises(ValueError):
            DifficultyScaler(0)

    def test_unknown_level_info(self):
        assert get_level_info("expert") is None
