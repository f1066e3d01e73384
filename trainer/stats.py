"""
stats.py

Update rules for the learner's running statistics. Each helper returns a new
`UserStats`; persisting it is the store's job.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from schemas.abacus import AccuracyPoint, UserStats

HISTORY_LIMIT = 10


def accuracy_for(correct_answers: int) -> float:
    """Approaches 100 as correct answers pile up; capped at 100."""
    return min(100.0, correct_answers / (correct_answers + 0.5) * 100)


def record_operation(stats: UserStats) -> UserStats:
    return stats.model_copy(update={"total_operations": stats.total_operations + 1})


def record_correct(stats: UserStats, now: Optional[datetime] = None) -> UserStats:
    now = now or datetime.now()
    correct = stats.correct_answers + 1
    point = AccuracyPoint(time=now.strftime("%H:%M"), accuracy=accuracy_for(correct))
    history = [*stats.accuracy_history, point][-HISTORY_LIMIT:]
    return stats.model_copy(update={"correct_answers": correct, "accuracy_history": history})


def cleared_stats() -> UserStats:
    return UserStats(accuracy_history=[AccuracyPoint(time="reset", accuracy=0)])
