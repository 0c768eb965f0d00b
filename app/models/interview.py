"""
Mock interview data structures.

A session owns an append-only transcript of interviewer/candidate turns.
Phase and question count are derived from the transcript, never stored.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional


class Role(str, Enum):
    interviewer = "interviewer"
    candidate = "candidate"


class Phase(str, Enum):
    general = "general"
    specialized = "specialized"


class SessionStatus(str, Enum):
    active = "active"
    completed = "completed"


@dataclass
class TranscriptEntry:
    role: Role
    content: str
    timestamp: datetime

    def to_dict(self) -> dict:
        return {
            "role": self.role.value,
            "content": self.content,
            "timestamp": self.timestamp.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "TranscriptEntry":
        timestamp = data.get("timestamp")
        if isinstance(timestamp, str):
            timestamp = datetime.fromisoformat(timestamp)
        return cls(
            role=Role(data["role"]),
            content=data["content"],
            timestamp=timestamp or datetime.now(),
        )


@dataclass
class QuestionAnalysis:
    question: str
    your_answer: str
    ideal_answer: str
    key_tips: List[str] = field(default_factory=list)
    improvement_areas: str = ""

    def to_dict(self) -> dict:
        return {
            "question": self.question,
            "your_answer": self.your_answer,
            "ideal_answer": self.ideal_answer,
            "key_tips": list(self.key_tips),
            "improvement_areas": self.improvement_areas,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "QuestionAnalysis":
        return cls(
            question=data.get("question", ""),
            your_answer=data.get("your_answer", ""),
            ideal_answer=data.get("ideal_answer", ""),
            key_tips=list(data.get("key_tips") or []),
            improvement_areas=data.get("improvement_areas", ""),
        )


@dataclass
class ScoreResult:
    """
    Final evaluation of a transcript.

    source tells where the numbers came from:
    - "gateway": parsed from the LLM reply
    - "safe_default": LLM replied but the reply was unusable
    - "heuristic": LLM unreachable, computed from answer lengths
    """
    communication_score: int
    confidence_score: int
    feedback: List[str]
    question_analysis: List[QuestionAnalysis] = field(default_factory=list)
    source: str = "gateway"
    fallback_reason: Optional[str] = None


@dataclass
class GatewayResult:
    """Outcome of one gateway call: a payload, or the reason there is none."""
    ok: bool
    payload: Any = None
    fallback_reason: Optional[str] = None

    @classmethod
    def success(cls, payload: Any) -> "GatewayResult":
        return cls(ok=True, payload=payload)

    @classmethod
    def failure(cls, reason: str) -> "GatewayResult":
        return cls(ok=False, fallback_reason=reason)


@dataclass
class InterviewContext:
    """
    Everything an interview operation needs to know about the caller.
    Passed explicitly into every controller call.
    """
    user_id: int
    name: str = ""
    branch: Optional[str] = None
    college: Optional[str] = None
    skills: List[str] = field(default_factory=list)

    @classmethod
    def from_profile(cls, profile: Dict[str, Any]) -> "InterviewContext":
        return cls(
            user_id=profile["id"],
            name=profile.get("name") or "",
            branch=profile.get("branch"),
            college=profile.get("college"),
            skills=list(profile.get("skills") or []),
        )

    def gateway_profile(self) -> dict:
        return {
            "branch": self.branch or "",
            "skills": list(self.skills),
            "college": self.college or "",
        }


@dataclass
class InterviewSession:
    id: int
    user_id: int
    transcript: List[TranscriptEntry] = field(default_factory=list)
    status: SessionStatus = SessionStatus.active
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    communication_score: Optional[int] = None
    confidence_score: Optional[int] = None
    feedback: List[str] = field(default_factory=list)
    question_analysis: List[QuestionAnalysis] = field(default_factory=list)
    score_source: Optional[str] = None

    @property
    def interviewer_count(self) -> int:
        return sum(1 for e in self.transcript if e.role == Role.interviewer)

    @property
    def asked_questions(self) -> List[str]:
        return [e.content for e in self.transcript if e.role == Role.interviewer]

    @property
    def candidate_answers(self) -> List[str]:
        return [e.content for e in self.transcript if e.role == Role.candidate]

    @property
    def is_completed(self) -> bool:
        return self.status == SessionStatus.completed

    @property
    def awaiting_answer(self) -> bool:
        """True when the last turn is an unanswered question."""
        return (
            not self.is_completed
            and bool(self.transcript)
            and self.transcript[-1].role == Role.interviewer
        )

    @property
    def current_question(self) -> Optional[str]:
        if self.awaiting_answer:
            return self.transcript[-1].content
        return None

    def phase_for_next_question(self, general_quota: int) -> Phase:
        if self.interviewer_count < general_quota:
            return Phase.general
        return Phase.specialized


@dataclass
class TurnResult:
    """
    Session after one controller step.
    question_source is "gateway" or "fallback" when a question was asked.
    """
    session: InterviewSession
    question_source: Optional[str] = None
    fallback_reason: Optional[str] = None


@dataclass
class StartOutcome:
    """Result of a start request. blocked=True means the daily limit was hit."""
    blocked: bool
    sessions_today: int
    daily_limit: int
    turn: Optional[TurnResult] = None
