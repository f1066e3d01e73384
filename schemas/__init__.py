"""
Pydantic schemas shared between the trainer session, the store, the tool
wrappers and the web API.
"""

from .abacus import (
    AppSettings,
    AccuracyPoint,
    UserStats,
    RodPayload,
    FormulaPayload,
    ChallengePayload,
    ValidationPayload,
    MoveOutcomePayload,
    SessionSnapshot,
    BeadMoveRequest,
    ChallengeRequest,
    ModeRequest,
    AnswerRequest,
    ChallengeSampleRequest,
)

__all__ = [
    "AppSettings",
    "AccuracyPoint",
    "UserStats",
    "RodPayload",
    "FormulaPayload",
    "ChallengePayload",
    "ValidationPayload",
    "MoveOutcomePayload",
    "SessionSnapshot",
    "BeadMoveRequest",
    "ChallengeRequest",
    "ModeRequest",
    "AnswerRequest",
    "ChallengeSampleRequest",
]
