"""
Mock Interview Service - session controller.

Drives a fixed-length interview:

    Idle --start--> AwaitingQuestion --question--> AwaitingAnswer
         --answer (>= 20 chars)--> AwaitingQuestion ... --> Completed

- The first `general` questions are HR-style; the rest (`specialized`) target
  the candidate's branch and skills.
- Questions come from the LLM gateway; if it fails, a fixed fallback list is
  used, indexed by (questions asked so far) mod (list length).
- Every transcript change is persisted before the call returns.
- After the last question is answered, or on an explicit end, the transcript
  is scored and the session becomes immutable.

All caller state comes in through an InterviewContext; the controller keeps
no per-user state between calls.
"""

import logging
from datetime import datetime, time, timedelta
from typing import Callable, List, Optional, Tuple

from app.core.config import Settings, get_settings
from app.core.exceptions import NotFound, SessionStateError, ValidationFailed
from app.models.interview import (
    InterviewContext,
    InterviewSession,
    Phase,
    Role,
    SessionStatus,
    StartOutcome,
    TranscriptEntry,
    TurnResult,
)
from app.services.interview_gateway import InterviewGateway, get_interview_gateway
from app.services.scoring_service import ScoringEngine
from app.services.store_service import InterviewSessionStore, get_session_store

logger = logging.getLogger(__name__)


FALLBACK_QUESTIONS = [
    "Tell me about yourself and your background.",
    "Why do you want to work in this field?",
    "What are your greatest strengths?",
    "Describe a challenging situation you faced and how you handled it.",
    "Where do you see yourself in 5 years?",
    "What motivates you in your work or studies?",
    "Tell me about a time when you worked in a team.",
    "What is your biggest weakness and how are you working on it?",
]


def fallback_question(interviewer_count: int, questions: List[str] = FALLBACK_QUESTIONS) -> str:
    """Deterministic fallback: same count, same question."""
    return questions[interviewer_count % len(questions)]


def day_bounds(now: datetime) -> Tuple[datetime, datetime]:
    """[start of today, start of tomorrow) on the server clock."""
    start = datetime.combine(now.date(), time.min)
    return start, start + timedelta(days=1)


class InterviewController:

    def __init__(
        self,
        store: InterviewSessionStore,
        gateway: InterviewGateway,
        scorer: ScoringEngine,
        settings: Optional[Settings] = None,
        clock: Callable[[], datetime] = datetime.now
    ):
        settings = settings or get_settings()
        self.store = store
        self.gateway = gateway
        self.scorer = scorer
        self.clock = clock
        self.general_quota = settings.interview_general_questions
        self.total_quota = settings.interview_total_questions
        self.daily_limit = settings.interview_max_sessions_per_day
        self.min_answer_length = settings.interview_min_answer_length

    # ========================================
    # Daily limit
    # ========================================

    def limit_status(self, ctx: InterviewContext) -> dict:
        start, end = day_bounds(self.clock())
        count = self.store.count_started_between(ctx.user_id, start, end)
        return {
            "sessions_today": count,
            "daily_limit": self.daily_limit,
            "remaining": max(0, self.daily_limit - count),
        }

    # ========================================
    # Commands
    # ========================================

    def start(self, ctx: InterviewContext) -> StartOutcome:
        """Open a session and ask the first question, unless today's limit is used up."""
        now = self.clock()
        day_start, day_end = day_bounds(now)
        session, count = self.store.create_if_under_limit(
            user_id=ctx.user_id,
            limit=self.daily_limit,
            day_start=day_start,
            day_end=day_end,
            started_at=now,
        )

        if session is None:
            logger.info("Interview start blocked for user=%s (%d/%d today)",
                        ctx.user_id, count, self.daily_limit)
            return StartOutcome(blocked=True, sessions_today=count, daily_limit=self.daily_limit)

        logger.info("Interview session %s started for user=%s", session.id, ctx.user_id)
        turn = self._ask_question(ctx, session)
        return StartOutcome(
            blocked=False,
            sessions_today=count + 1,
            daily_limit=self.daily_limit,
            turn=turn,
        )

    def submit_answer(self, ctx: InterviewContext, session_id: int, answer: str) -> TurnResult:
        answer = (answer or "").strip()
        if len(answer) < self.min_answer_length:
            raise ValidationFailed(
                f"Please provide a more detailed answer (at least {self.min_answer_length} characters)"
            )

        session = self.get_session(ctx, session_id)
        if session.is_completed:
            raise SessionStateError("Interview is already completed")
        if not session.awaiting_answer:
            raise SessionStateError("No question is waiting for an answer")

        session.transcript.append(TranscriptEntry(Role.candidate, answer, self.clock()))
        self.store.save_transcript(session)

        if session.interviewer_count >= self.total_quota:
            return TurnResult(session=self._complete(session))
        return self._ask_question(ctx, session)

    def end(self, ctx: InterviewContext, session_id: int) -> InterviewSession:
        """Force completion now, scoring whatever transcript exists."""
        session = self.get_session(ctx, session_id)
        if session.is_completed:
            raise SessionStateError("Interview is already completed")
        return self._complete(session)

    def resume(self, ctx: InterviewContext, session_id: int) -> TurnResult:
        """
        Continue a session after a reload.

        If the last durable turn is an answer (or nothing), ask the next
        question, or finish when the quota is already reached.
        """
        session = self.get_session(ctx, session_id)
        if session.is_completed or session.awaiting_answer:
            return TurnResult(session=session)
        if session.interviewer_count >= self.total_quota:
            return TurnResult(session=self._complete(session))
        return self._ask_question(ctx, session)

    # ========================================
    # Queries
    # ========================================

    def get_session(self, ctx: InterviewContext, session_id: int) -> InterviewSession:
        session = self.store.get(session_id, ctx.user_id)
        if session is None:
            raise NotFound("Interview session not found")
        return session

    def history(self, ctx: InterviewContext, limit: int = 5) -> List[InterviewSession]:
        return self.store.list_completed(ctx.user_id, limit=limit)

    # ========================================
    # Transitions
    # ========================================

    def _ask_question(self, ctx: InterviewContext, session: InterviewSession) -> TurnResult:
        count = session.interviewer_count
        phase = session.phase_for_next_question(self.general_quota)
        is_specialized = phase == Phase.specialized

        result = self.gateway.request_question(
            conversation=[e.to_dict() for e in session.transcript],
            question_number=count + 1,
            is_specialized=is_specialized,
            user_profile=ctx.gateway_profile() if is_specialized else None,
            asked_questions=session.asked_questions,
        )

        if result.ok:
            question, source = result.payload, "gateway"
        else:
            question, source = fallback_question(count), "fallback"
            logger.warning("Session %s question %d using fallback: %s",
                           session.id, count + 1, result.fallback_reason)

        session.transcript.append(TranscriptEntry(Role.interviewer, question, self.clock()))
        self.store.save_transcript(session)
        return TurnResult(session=session, question_source=source,
                          fallback_reason=result.fallback_reason)

    def _complete(self, session: InterviewSession) -> InterviewSession:
        score = self.scorer.score(session.transcript)

        session.status = SessionStatus.completed
        session.completed_at = self.clock()
        session.communication_score = score.communication_score
        session.confidence_score = score.confidence_score
        session.feedback = list(score.feedback)
        session.question_analysis = list(score.question_analysis)
        session.score_source = score.source

        self.store.complete(session)
        logger.info("Interview session %s completed (score source=%s)", session.id, score.source)
        return session


def get_interview_controller() -> InterviewController:
    gateway = get_interview_gateway()
    return InterviewController(
        store=get_session_store(),
        gateway=gateway,
        scorer=ScoringEngine(gateway),
    )
