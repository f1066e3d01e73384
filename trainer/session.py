"""
session.py

The trainer's explicit state object. One `AbacusSession` owns the board, the
active challenge, the learner's settings and stats, and runs a user action
end to end: the bead move is applied and classified, the total recomputed,
then the challenge judged. Everything it calls in `core`, `generators` and
`validators` is stateless.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Callable, List, Optional

from core.formulas import Formula, classify_rod_change
from core.rods import (
    DEFAULT_ROD_COUNT,
    Board,
    RodModel,
    calculate_total_value,
    create_initial_rods,
    place_bead,
)
from generators.challenge_generator import Challenge, ChallengeGenerator, ProblemType
from schemas.abacus import (
    AppSettings,
    ChallengePayload,
    FormulaPayload,
    RodPayload,
    SessionSnapshot,
    UserStats,
)
from trainer.stats import cleared_stats, record_correct, record_operation
from trainer.stats_store import TrainerStore
from validators.answer_validator import AnswerState, AnswerValidator, ValidationResult

logger = logging.getLogger(__name__)

CORRECT_ANNOUNCEMENT = "回答正确"
RESET_ANNOUNCEMENT = "清盘"


class AppMode(str, Enum):
    FREE = "FREE"
    TRAINING = "TRAINING"
    EXAM = "EXAM"


@dataclass
class MoveOutcome:
    rod: RodModel
    total: int
    formula: Optional[Formula] = None
    validation: Optional[ValidationResult] = None
    announcement: Optional[str] = None


class AbacusSession:
    """
    Usage:
        session = AbacusSession(rod_count=13)
        session.start_challenge(ProblemType.ADD)
        outcome = session.move_beads(12, heaven=1, earth=2)
    """

    def __init__(
        self,
        *,
        rod_count: int = DEFAULT_ROD_COUNT,
        store: Optional[TrainerStore] = None,
        generator: Optional[ChallengeGenerator] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.rod_count = rod_count
        self.store = store
        self.generator = generator or ChallengeGenerator(rod_count)
        self.validator = AnswerValidator()
        self.clock = clock

        self.rods: Board = create_initial_rods(rod_count)
        self.mode = AppMode.FREE
        self.challenge: Optional[Challenge] = None
        self.last_formula: Optional[Formula] = None
        self.active_rod_id: Optional[int] = None
        self.feedback = ""
        self.settings = store.settings if store else AppSettings()
        self.stats = store.stats if store else UserStats()
        self.recent_results: List[bool] = []
        self._last_state: Optional[AnswerState] = None
        self._solved_challenge_id: Optional[str] = None

    @property
    def total(self) -> int:
        return calculate_total_value(self.rods)

    # ------------------------------------------------------------------ #
    # User actions
    # ------------------------------------------------------------------ #

    def move_beads(self, rod_id: int, heaven: int, earth: int) -> MoveOutcome:
        """
        Applies one bead move. Out-of-range counts raise OutOfRangeError and
        leave the board, stats and feedback untouched.
        """

        rods = place_bead(self.rods, rod_id, heaven, earth)
        before, after = self.rods[rod_id], rods[rod_id]
        self.rods = rods
        self.active_rod_id = rod_id

        announcement = None
        formula = classify_rod_change(before, after)
        if formula:
            self.last_formula = formula
            if self.settings.voice_enabled:
                announcement = formula.koujue

        total = self.total
        self._save_stats(record_operation(self.stats))

        validation = self._judge(total)
        if validation is not None and validation.correct and self._last_state is not AnswerState.CORRECT:
            self._on_solved()
            if self.settings.voice_enabled:
                announcement = CORRECT_ANNOUNCEMENT
        if validation is not None:
            self._last_state = validation.state

        return MoveOutcome(
            rod=after,
            total=total,
            formula=formula,
            validation=validation,
            announcement=announcement,
        )

    def reset(self) -> Optional[str]:
        self.rods = create_initial_rods(self.rod_count)
        self.last_formula = None
        self.feedback = ""
        self.active_rod_id = None
        self._last_state = None
        if self.challenge is not None:
            self.challenge.current_step_index = 0
        if self.mode is AppMode.TRAINING and self.settings.voice_enabled:
            return RESET_ANNOUNCEMENT
        return None

    def start_challenge(self, kind: Optional[ProblemType | str] = None) -> Challenge:
        self._retire_challenge()
        kind = ProblemType(kind) if kind else self.generator.random_kind()
        self.challenge = self.generator.generate(kind, recent_results=self.recent_results)
        self.reset()
        if self.mode is not AppMode.EXAM:
            self.mode = AppMode.TRAINING
        logger.info("Started %s challenge: %s", kind.value, self.challenge.question)
        return self.challenge

    def set_mode(self, mode: AppMode | str) -> None:
        """Switching modes drops the active challenge."""
        mode = AppMode(mode)
        if mode is self.mode:
            return
        self._retire_challenge()
        self.mode = mode
        self.feedback = ""

    def toggle_setting(self, key: str) -> AppSettings:
        if key not in AppSettings.model_fields:
            raise ValueError(f"Unknown setting: {key}")
        settings = self.settings.model_copy(update={key: not getattr(self.settings, key)})
        self.settings = settings
        if self.store:
            self.store.persist_settings(settings)
        return settings

    def clear_stats(self) -> UserStats:
        self.recent_results = []
        self._save_stats(cleared_stats())
        return self.stats

    def submit_answer(self, response: str) -> ValidationResult:
        """Typed answer for exam mode; judged exactly against the target."""
        if self.challenge is None:
            raise ValueError("There is no active challenge to answer.")
        result = self.validator.check_typed_answer(self.challenge, response)
        self.feedback = result.message
        if result.correct and self._last_state is not AnswerState.CORRECT:
            self._on_solved()
        self._last_state = result.state
        return result

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            rods=[RodPayload.from_rod(rod) for rod in self.rods],
            total=self.total,
            mode=self.mode.value,
            active_rod_id=self.active_rod_id,
            last_formula=FormulaPayload.from_formula(self.last_formula) if self.last_formula else None,
            challenge=ChallengePayload.from_challenge(self.challenge) if self.challenge else None,
            feedback=self.feedback,
            settings=self.settings,
            stats=self.stats,
        )

    # ------------------------------------------------------------------ #
    # Internal helpers
    # ------------------------------------------------------------------ #

    def _judge(self, total: int) -> Optional[ValidationResult]:
        if self.mode is AppMode.FREE or self.challenge is None:
            return None
        result = self.validator.validate(total, self.challenge)
        self.feedback = result.message
        while self.challenge.next_checkpoint() == total:
            self.challenge.advance()
        return result

    def _on_solved(self) -> None:
        # Stats count every transition into CORRECT; the trend sees each challenge once.
        if self._solved_challenge_id != self.challenge.id:
            self._solved_challenge_id = self.challenge.id
            self.recent_results.append(True)
        self._save_stats(record_correct(self.stats, self.clock()))
        logger.info("Challenge %s solved", self.challenge.id)

    def _retire_challenge(self) -> None:
        """Drops the active challenge; an unsolved one counts as a miss."""
        if self.challenge is not None and self._solved_challenge_id != self.challenge.id:
            self.recent_results.append(False)
            logger.info("Challenge %s left unsolved", self.challenge.id)
        self.challenge = None
        self._last_state = None

    def _save_stats(self, stats: UserStats) -> None:
        self.stats = stats
        if self.store:
            self.store.persist_stats(stats)
