"""
Mock Interview Routes

GET /interview/limit - Sessions started today vs daily limit
POST /interview/start - Start a session (or blocked by the daily limit)
GET /interview/history - Last 5 completed sessions
GET /interview/{session_id} - Session state (reload)
POST /interview/{session_id}/answer - Answer the pending question
POST /interview/{session_id}/resume - Continue a session after a reload
POST /interview/{session_id}/end - End now and score
"""

from typing import List, Optional

from fastapi import APIRouter, Depends

from app.core.auth import get_interview_context
from app.core.config import get_settings
from app.models.interview import InterviewContext, InterviewSession, Phase, TurnResult
from app.services.interview_service import InterviewController, get_interview_controller
from app.schemas.schemas import (
    AnswerRequest,
    InterviewHistoryItem,
    InterviewLimitResponse,
    InterviewSessionResponse,
    InterviewStartResponse,
)

router = APIRouter(prefix="/interview", tags=["Mock Interview"])


def session_response(session: InterviewSession, turn: Optional[TurnResult] = None) -> InterviewSessionResponse:
    """Session plus the derived phase/question number the client shows."""
    settings = get_settings()
    count = session.interviewer_count

    phase = None
    if session.awaiting_answer:
        phase = Phase.general if count <= settings.interview_general_questions else Phase.specialized

    return InterviewSessionResponse(
        id=session.id,
        status=session.status.value,
        phase=phase.value if phase else None,
        question_number=count,
        total_questions=settings.interview_total_questions,
        current_question=session.current_question,
        question_source=turn.question_source if turn else None,
        conversation=[e.to_dict() for e in session.transcript],
        started_at=session.started_at,
        completed_at=session.completed_at,
        communication_score=session.communication_score,
        confidence_score=session.confidence_score,
        feedback=session.feedback,
        question_analysis=[q.to_dict() for q in session.question_analysis],
        score_source=session.score_source,
    )


@router.get("/limit", response_model=InterviewLimitResponse)
async def get_limit(
    ctx: InterviewContext = Depends(get_interview_context),
    controller: InterviewController = Depends(get_interview_controller)
):
    return controller.limit_status(ctx)


@router.post("/start", response_model=InterviewStartResponse)
async def start_interview(
    ctx: InterviewContext = Depends(get_interview_context),
    controller: InterviewController = Depends(get_interview_controller)
):
    """
    Start a mock interview and get the first question.

    Hitting the daily limit is not an error: the response has blocked=true.
    """
    outcome = controller.start(ctx)

    if outcome.blocked:
        return InterviewStartResponse(
            blocked=True,
            message=(
                f"You've reached your daily limit of {outcome.daily_limit} interviews. "
                "Please try again tomorrow."
            ),
            sessions_today=outcome.sessions_today,
            daily_limit=outcome.daily_limit,
        )

    return InterviewStartResponse(
        blocked=False,
        message="Interview started",
        sessions_today=outcome.sessions_today,
        daily_limit=outcome.daily_limit,
        session=session_response(outcome.turn.session, outcome.turn),
    )


@router.get("/history", response_model=List[InterviewHistoryItem])
async def get_history(
    ctx: InterviewContext = Depends(get_interview_context),
    controller: InterviewController = Depends(get_interview_controller)
):
    return [
        InterviewHistoryItem(
            id=s.id,
            completed_at=s.completed_at,
            communication_score=s.communication_score,
            confidence_score=s.confidence_score,
            score_source=s.score_source,
        )
        for s in controller.history(ctx)
    ]


@router.get("/{session_id}", response_model=InterviewSessionResponse)
async def get_session(
    session_id: int,
    ctx: InterviewContext = Depends(get_interview_context),
    controller: InterviewController = Depends(get_interview_controller)
):
    return session_response(controller.get_session(ctx, session_id))


@router.post("/{session_id}/answer", response_model=InterviewSessionResponse)
async def submit_answer(
    session_id: int,
    request: AnswerRequest,
    ctx: InterviewContext = Depends(get_interview_context),
    controller: InterviewController = Depends(get_interview_controller)
):
    """
    Answer the pending question.

    Returns the session with the next question, or with the final scores
    once the last question has been answered.
    """
    turn = controller.submit_answer(ctx, session_id, request.answer)
    return session_response(turn.session, turn)


@router.post("/{session_id}/resume", response_model=InterviewSessionResponse)
async def resume_interview(
    session_id: int,
    ctx: InterviewContext = Depends(get_interview_context),
    controller: InterviewController = Depends(get_interview_controller)
):
    turn = controller.resume(ctx, session_id)
    return session_response(turn.session, turn)


@router.post("/{session_id}/end", response_model=InterviewSessionResponse)
async def end_interview(
    session_id: int,
    ctx: InterviewContext = Depends(get_interview_context),
    controller: InterviewController = Depends(get_interview_controller)
):
    """End the interview now and score what was answered."""
    return session_response(controller.end(ctx, session_id))
