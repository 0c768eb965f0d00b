"""
Resume Routes

POST /resumes/analyze - Upload a resume (PDF/DOCX/TXT) and get AI feedback
GET /resumes/history - Last 5 analyses
GET /resumes/files/{file_id} - Download a stored resume file
"""

import logging
from typing import List

from fastapi import APIRouter, HTTPException, Depends, UploadFile, File
from fastapi.responses import Response

from app.core.auth import get_current_user
from app.services.mongo_service import ResumeFileService, get_resume_file_service
from app.services.resume_service import ResumeFeedbackService, get_resume_feedback_service
from app.utils.file_upload import extract_text_from_file
from app.schemas.schemas import ResumeFeedbackResponse, ResumeHistoryItem

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/resumes", tags=["Resumes"])


@router.post("/analyze", response_model=ResumeFeedbackResponse)
async def analyze_resume(
    file: UploadFile = File(..., description="Resume file (PDF, DOCX, or TXT)"),
    user: dict = Depends(get_current_user),
    service: ResumeFeedbackService = Depends(get_resume_feedback_service)
):
    """
    Upload a resume and get AI feedback.

    Supported formats: PDF, DOCX, TXT (max 5MB)

    Process:
    1. Extract text from file
    2. Store the file (GridFS) and its text (MongoDB)
    3. AI reviews the text; falls back to a default review if unavailable
    4. Store the review in PostgreSQL
    """
    upload = await extract_text_from_file(file)
    return service.analyze(user["id"], upload)


@router.get("/history", response_model=List[ResumeHistoryItem])
async def get_history(
    user: dict = Depends(get_current_user),
    service: ResumeFeedbackService = Depends(get_resume_feedback_service)
):
    return service.history(user["id"])


@router.get("/files/{file_id}")
async def download_file(
    file_id: str,
    files: ResumeFileService = Depends(get_resume_file_service)
):
    """Public link to a stored resume file."""
    stored = files.download(file_id)
    if not stored:
        raise HTTPException(status_code=404, detail="File not found")

    filename = stored["filename"].rsplit("/", 1)[-1]
    return Response(
        content=stored["content"],
        media_type=stored["content_type"],
        headers={"Content-Disposition": f'inline; filename="{filename}"'}
    )
