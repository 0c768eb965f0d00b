"""
Pydantic Schemas - Request/Response Validation

All API request and response schemas in one file for simplicity.
"""

from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional, List, Union
from datetime import datetime
from enum import Enum

from app.utils.validators import parse_skills


# ============================================================
# ENUMS
# ============================================================

class GatewayAction(str, Enum):
    get_question = "get_question"
    analyze = "analyze"


class TranscriptRole(str, Enum):
    interviewer = "interviewer"
    candidate = "candidate"


# ============================================================
# AUTH SCHEMAS
# ============================================================

class RegisterRequest(BaseModel):
    name: str = Field(..., min_length=2, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=6)
    college: str = Field(..., min_length=1)
    branch: str = Field(..., min_length=1)
    year: int = Field(..., ge=1, le=4)
    cgpa: float = Field(..., ge=0, le=10)
    skills: List[str] = []

    @field_validator("skills", mode="before")
    @classmethod
    def split_skills(cls, v: Union[str, List[str], None]) -> List[str]:
        return parse_skills(v)

    @field_validator("name", "college", "branch")
    @classmethod
    def strip_text(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v

class LoginRequest(BaseModel):
    email: EmailStr
    password: str

class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user_id: int
    name: str


# ============================================================
# PROFILE SCHEMAS
# ============================================================

class ProfileResponse(BaseModel):
    id: int
    email: str
    name: str
    college: Optional[str] = None
    branch: Optional[str] = None
    year: Optional[int] = None
    year_label: Optional[str] = None
    cgpa: Optional[float] = None
    skills: List[str] = []
    completion: int = 0
    created_at: Optional[datetime] = None

class ProfileUpdate(BaseModel):
    college: Optional[str] = Field(None, min_length=1)
    branch: Optional[str] = Field(None, min_length=1)
    year: Optional[int] = Field(None, ge=1, le=4)
    cgpa: Optional[float] = Field(None, ge=0, le=10)
    skills: Optional[List[str]] = None

    @field_validator("skills", mode="before")
    @classmethod
    def split_skills(cls, v: Union[str, List[str], None]) -> Optional[List[str]]:
        if v is None:
            return None
        return parse_skills(v)


# ============================================================
# ELIGIBILITY SCHEMAS
# ============================================================

class CompanyRuleResponse(BaseModel):
    name: str
    min_cgpa: float
    branches: List[str]
    branch_label: str
    preferred_branches: bool = False
    max_backlogs: int = 0

class EligibilityResponse(BaseModel):
    company: str
    eligible: bool
    cgpa: float
    branch: str
    criteria_met: dict
    reasons: List[str]
    note: Optional[str] = None
    summary: str

class EligibilityCheckResponse(BaseModel):
    id: int
    company_name: str
    is_eligible: bool
    reason: Optional[str] = None
    criteria_met: Optional[dict] = None
    checked_at: datetime


# ============================================================
# INTERVIEW SCHEMAS
# ============================================================

class TranscriptEntryResponse(BaseModel):
    role: TranscriptRole
    content: str
    timestamp: datetime

class QuestionAnalysisResponse(BaseModel):
    question: str
    your_answer: str
    ideal_answer: str
    key_tips: List[str] = []
    improvement_areas: str = ""

class InterviewSessionResponse(BaseModel):
    id: int
    status: str
    phase: Optional[str] = None
    question_number: int
    total_questions: int
    current_question: Optional[str] = None
    question_source: Optional[str] = None
    conversation: List[TranscriptEntryResponse] = []
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    communication_score: Optional[int] = None
    confidence_score: Optional[int] = None
    feedback: List[str] = []
    question_analysis: List[QuestionAnalysisResponse] = []
    score_source: Optional[str] = None

class InterviewLimitResponse(BaseModel):
    sessions_today: int
    daily_limit: int
    remaining: int

class InterviewStartResponse(BaseModel):
    blocked: bool
    message: str
    sessions_today: int
    daily_limit: int
    session: Optional[InterviewSessionResponse] = None

class AnswerRequest(BaseModel):
    answer: str

class InterviewHistoryItem(BaseModel):
    id: int
    completed_at: Optional[datetime] = None
    communication_score: Optional[int] = None
    confidence_score: Optional[int] = None
    score_source: Optional[str] = None


# ============================================================
# RESUME SCHEMAS
# ============================================================

class ResumeFeedbackResponse(BaseModel):
    resume_id: int
    file_name: str
    file_url: str
    clarity_score: int
    score_description: str
    strengths: List[str] = []
    missing_sections: List[str] = []
    improvements: List[str] = []
    source: str

class ResumeHistoryItem(BaseModel):
    id: int
    resume_id: int
    file_name: str
    file_url: Optional[str] = None
    clarity_score: int
    source: Optional[str] = None
    analyzed_at: datetime


# ============================================================
# DASHBOARD SCHEMAS
# ============================================================

class ActivityItem(BaseModel):
    type: str
    title: str
    detail: str
    timestamp: datetime

class DashboardResponse(BaseModel):
    name: str
    resume_score: Optional[int] = None
    interviews_completed: int = 0
    companies_checked: int = 0
    profile_completion: int = 0
    recent_activity: List[ActivityItem] = []


# ============================================================
# LLM GATEWAY SCHEMAS (HTTP contract, camelCase replies)
# ============================================================

class GatewayProfile(BaseModel):
    branch: Optional[str] = None
    skills: List[str] = []
    college: Optional[str] = None

class GatewayMessage(BaseModel):
    role: TranscriptRole
    content: str

class MockInterviewRequest(BaseModel):
    action: GatewayAction
    conversation: List[GatewayMessage] = []
    question_number: Optional[int] = Field(None, ge=1)
    is_specialized: bool = False
    user_profile: Optional[GatewayProfile] = None
    asked_questions: List[str] = []

class ResumeReviewRequest(BaseModel):
    file_name: str
    text_content: str = Field(..., min_length=1)

