"""
LLM Gateway Routes (HTTP contract for external clients)

POST /gateway/mock-interview - action=get_question -> {question}
                               action=analyze -> {communicationScore, confidenceScore, feedback, questionAnalysis}
POST /gateway/analyze-resume - {clarity_score, strengths, missing_sections, improvements}

A failed LLM call is a non-2xx reply. A reply that cannot be parsed is not
a failure: the fixed safe analysis or review is returned with 200.
"""

from fastapi import APIRouter, Depends

from app.core.auth import get_current_user
from app.services.interview_gateway import InterviewGateway, get_interview_gateway
from app.services.resume_service import parse_review_reply
from app.services.scoring_service import parse_analysis_reply, score_result_to_payload
from app.schemas.schemas import GatewayAction, MockInterviewRequest, ResumeReviewRequest

router = APIRouter(prefix="/gateway", tags=["LLM Gateway"])


@router.post("/mock-interview")
async def mock_interview(
    request: MockInterviewRequest,
    user: dict = Depends(get_current_user),
    gateway: InterviewGateway = Depends(get_interview_gateway)
):
    conversation = [m.model_dump(mode="json") for m in request.conversation]

    if request.action == GatewayAction.get_question:
        asked = request.asked_questions or None
        question = gateway.generate_question(
            conversation=conversation,
            question_number=request.question_number or 1,
            is_specialized=request.is_specialized,
            user_profile=request.user_profile.model_dump() if request.user_profile else None,
            asked_questions=asked,
        )
        return {"question": question}

    raw = gateway.analyze_transcript(conversation)
    return score_result_to_payload(parse_analysis_reply(raw))


@router.post("/analyze-resume")
async def analyze_resume(
    request: ResumeReviewRequest,
    user: dict = Depends(get_current_user),
    gateway: InterviewGateway = Depends(get_interview_gateway)
):
    raw = gateway.review_resume(request.file_name, request.text_content)
    review, _ = parse_review_reply(raw)
    return review
