from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field

from core.formulas import Formula
from core.rods import MAX_ROD_VALUE, RodModel
from generators.challenge_generator import Challenge
from validators.answer_validator import ValidationResult


# =============================================================================
# PERSISTED RECORDS
# =============================================================================

class AppSettings(BaseModel):
    """Learner-facing toggles, persisted between sessions."""

    sound_enabled: bool = True
    voice_enabled: bool = True
    show_hints: bool = True
    mental_mode: bool = Field(False, description="Hide the beads and only show the question.")


class AccuracyPoint(BaseModel):
    time: str
    accuracy: float = Field(..., ge=0, le=100)


class UserStats(BaseModel):
    """Running counters plus the short accuracy history drawn as a chart."""

    total_operations: int = Field(0, ge=0)
    correct_answers: int = Field(0, ge=0)
    accuracy_history: List[AccuracyPoint] = Field(
        default_factory=lambda: [AccuracyPoint(time="start", accuracy=0)]
    )


# =============================================================================
# ENGINE OUTPUT
# =============================================================================

class RodPayload(BaseModel):
    id: int
    value: int = Field(..., ge=0, le=MAX_ROD_VALUE)
    active_heaven_count: int
    active_earth_count: int

    @classmethod
    def from_rod(cls, rod: RodModel) -> "RodPayload":
        return cls(
            id=rod.id,
            value=rod.value,
            active_heaven_count=rod.active_heaven_count,
            active_earth_count=rod.active_earth_count,
        )


class FormulaPayload(BaseModel):
    action: str
    koujue: str
    description: str

    @classmethod
    def from_formula(cls, formula: Formula) -> "FormulaPayload":
        return cls(action=formula.action, koujue=formula.koujue, description=formula.description)


class ChallengePayload(BaseModel):
    id: str
    type: Literal["ADD", "SUB", "MUL", "DIV", "MIXED"]
    question: str
    target_value: int
    steps: List[int]
    operators: List[str]
    current_step_index: int = 0
    rule_description: Optional[str] = None

    @classmethod
    def from_challenge(cls, challenge: Challenge) -> "ChallengePayload":
        return cls(
            id=challenge.id,
            type=challenge.type.value,
            question=challenge.question,
            target_value=challenge.target_value,
            steps=list(challenge.steps),
            operators=list(challenge.operators),
            current_step_index=challenge.current_step_index,
            rule_description=challenge.rule_description,
        )


class ValidationPayload(BaseModel):
    state: Literal["CORRECT", "TOO_HIGH", "IN_PROGRESS", "IDLE"]
    message: str
    details: Dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_result(cls, result: ValidationResult) -> "ValidationPayload":
        return cls(state=result.state.value, message=result.message, details=result.details)


class MoveOutcomePayload(BaseModel):
    rod: RodPayload
    total: int
    formula: Optional[FormulaPayload] = None
    validation: Optional[ValidationPayload] = None
    announcement: Optional[str] = None


class SessionSnapshot(BaseModel):
    rods: List[RodPayload]
    total: int
    mode: Literal["FREE", "TRAINING", "EXAM"]
    active_rod_id: Optional[int] = None
    last_formula: Optional[FormulaPayload] = None
    challenge: Optional[ChallengePayload] = None
    feedback: str = ""
    settings: AppSettings
    stats: UserStats


# =============================================================================
# REQUESTS
# =============================================================================

class BeadMoveRequest(BaseModel):
    """Bead counts are range-checked by the rod model, not here."""

    heaven: int
    earth: int


class ChallengeRequest(BaseModel):
    type: Optional[Literal["ADD", "SUB", "MUL", "DIV", "MIXED"]] = None


class ModeRequest(BaseModel):
    mode: Literal["FREE", "TRAINING", "EXAM"]


class AnswerRequest(BaseModel):
    response: str = Field(..., max_length=64)


class ChallengeSampleRequest(BaseModel):
    type: Literal["ADD", "SUB", "MUL", "DIV", "MIXED"] = "ADD"
    count: int = Field(5, ge=1, le=25, description="How many challenges to include.")
    difficulty: Literal["easy", "medium", "hard"] = "medium"
    seed: Optional[int] = None
