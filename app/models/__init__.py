"""
Models module - internal data structures.

These are plain dataclasses passed between services:
- interview: sessions, transcript entries, score results, gateway results
- eligibility: company rules and evaluation results

API request/response contracts live in app.schemas.
"""

from app.models.interview import (
    Role,
    Phase,
    SessionStatus,
    TranscriptEntry,
    InterviewSession,
    InterviewContext,
    QuestionAnalysis,
    ScoreResult,
    GatewayResult,
    StartOutcome,
    TurnResult,
)
from app.models.eligibility import CompanyRule, EligibilityResult

__all__ = [
    "Role",
    "Phase",
    "SessionStatus",
    "TranscriptEntry",
    "InterviewSession",
    "InterviewContext",
    "QuestionAnalysis",
    "ScoreResult",
    "GatewayResult",
    "StartOutcome",
    "TurnResult",
    "CompanyRule",
    "EligibilityResult",
]
