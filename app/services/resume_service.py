"""
Resume Feedback Service - upload, store and review resumes.

PIPELINE:
1. Ask the LLM for a review (clarity score, strengths, gaps, improvements)
2. Store the file in GridFS (public URL)
3. Record the resume in PostgreSQL
4. Store the extracted text in MongoDB
5. Store the review in PostgreSQL

The review never fails the upload: an unparseable reply becomes a fixed safe
review, and an unreachable LLM becomes a mock review.
"""

import logging
import random
from datetime import datetime, timezone
from typing import List, Optional, Tuple

from app.services.interview_gateway import InterviewGateway, get_interview_gateway
from app.services.llm_client import extract_json
from app.services.mongo_service import (
    ResumeFileService,
    ResumeTextService,
    get_resume_file_service,
    get_resume_text_service,
)
from app.services.scoring_service import clamp_score
from app.services.store_service import ResumeStore, get_resume_store
from app.utils.file_upload import ExtractedFile

logger = logging.getLogger(__name__)


SAFE_REVIEW = {
    "clarity_score": 75,
    "strengths": ["Clear structure", "Good formatting", "Relevant content"],
    "missing_sections": ["Project links", "Certifications"],
    "improvements": [
        "Add quantifiable achievements",
        "Include more technical details",
        "Improve action verbs",
        "Add professional summary",
    ],
}

MOCK_REVIEW_LISTS = {
    "strengths": [
        "Clear professional experience section",
        "Well-formatted contact information",
        "Good use of action verbs in descriptions",
    ],
    "missing_sections": [
        "Project links or GitHub profile",
        "Certifications section could be more detailed",
    ],
    "improvements": [
        "Add quantifiable achievements with numbers and metrics",
        "Include more technical skills relevant to target role",
        "Consider adding a brief professional summary at the top",
        "Ensure consistent formatting throughout the document",
    ],
}


# ============================================================
# JSON VALIDATION HELPERS
# ============================================================

def _clean_list(value) -> List[str]:
    if not isinstance(value, list):
        return []
    return [str(v).strip() for v in value if v is not None and str(v).strip()]


def validate_resume_review(data: dict) -> dict:
    """
    Validate and sanitize an LLM resume review.
    clarity_score and a strengths list are required.
    """
    if data.get("clarity_score") is None or not isinstance(data.get("strengths"), list):
        raise ValueError("Invalid analysis format")

    try:
        clarity = clamp_score(data["clarity_score"])
    except (TypeError, ValueError) as e:
        raise ValueError(f"clarity_score is not a number: {e}") from e

    return {
        "clarity_score": clarity,
        "strengths": _clean_list(data.get("strengths")),
        "missing_sections": _clean_list(data.get("missing_sections")),
        "improvements": _clean_list(data.get("improvements")),
    }


def safe_review() -> dict:
    return {key: (list(value) if isinstance(value, list) else value)
            for key, value in SAFE_REVIEW.items()}


def mock_review(rng: Optional[random.Random] = None) -> dict:
    """Stand-in review when the LLM is unreachable; clarity in [65, 94]."""
    rng = rng or random.Random()
    review = {"clarity_score": rng.randint(65, 94)}
    review.update({key: list(value) for key, value in MOCK_REVIEW_LISTS.items()})
    return review


def parse_review_reply(text: str) -> Tuple[dict, str]:
    """LLM reply -> (review, source) where source is gateway or safe_default."""
    try:
        return validate_resume_review(extract_json(text)), "gateway"
    except ValueError as e:
        logger.warning("Unusable resume review, using safe default: %s", e)
        return safe_review(), "safe_default"


def score_description(score: int) -> str:
    if score >= 80:
        return "Excellent! Your resume is clear and well-structured."
    if score >= 60:
        return "Good resume with some room for improvement."
    return "Your resume needs significant improvements."


# ============================================================
# RESUME FEEDBACK SERVICE
# ============================================================

class ResumeFeedbackService:

    def __init__(
        self,
        gateway: InterviewGateway,
        resume_store: ResumeStore,
        text_service: ResumeTextService,
        file_service: ResumeFileService,
        rng: Optional[random.Random] = None
    ):
        self.gateway = gateway
        self.resume_store = resume_store
        self.text_service = text_service
        self.file_service = file_service
        self.rng = rng or random.Random()

    def review(self, file_name: str, resume_text: str) -> Tuple[dict, str]:
        """Review text with the LLM, degrading to safe/mock reviews."""
        result = self.gateway.request_resume_review(file_name, resume_text)
        if not result.ok:
            return mock_review(self.rng), "mock"
        return parse_review_reply(result.payload)

    def analyze(self, user_id: int, upload: ExtractedFile) -> dict:
        """
        Full pipeline for one uploaded resume.

        The review runs before anything is written. If a store step fails,
        whatever was already written for this upload is removed and the
        error propagates; the caller reports it.
        """
        # Step 1: Review
        feedback, source = self.review(upload.filename, upload.text)

        path = f"{user_id}/{int(datetime.now(timezone.utc).timestamp() * 1000)}_{upload.filename}"
        file_id = resume_id = text_id = None
        try:
            # Step 2: File to blob storage
            file_id = self.file_service.upload(path, upload.content, upload.content_type, user_id)
            file_url = self.file_service.public_url(file_id)

            # Step 3: Resume row
            resume_id = self.resume_store.create_resume(
                user_id=user_id,
                file_name=upload.filename,
                file_path=path,
                file_size=len(upload.content),
                file_url=file_url,
            )

            # Step 4: Extracted text
            text_id = self.text_service.insert(
                user_id=user_id,
                resume_id=resume_id,
                resume_text=upload.text,
                filename=upload.filename,
            )
            self.resume_store.set_text_id(resume_id, text_id)

            # Step 5: Feedback row
            self.resume_store.insert_feedback(user_id, resume_id, feedback, source)
        except Exception:
            logger.exception("Resume upload failed for user=%s, removing partial writes", user_id)
            self._discard(file_id, resume_id, text_id)
            raise

        logger.info("Resume %s analyzed for user=%s (source=%s, clarity=%s)",
                    resume_id, user_id, source, feedback["clarity_score"])

        return {
            "resume_id": resume_id,
            "file_name": upload.filename,
            "file_url": file_url,
            "source": source,
            "score_description": score_description(feedback["clarity_score"]),
            **feedback,
        }

    def _discard(self, file_id: Optional[str], resume_id: Optional[int], text_id: Optional[str]) -> None:
        cleanups = [
            (text_id, self.text_service.delete),
            (resume_id, self.resume_store.delete_resume),
            (file_id, self.file_service.delete),
        ]
        for key, delete in cleanups:
            if key is None:
                continue
            try:
                delete(key)
            except Exception:
                logger.exception("Could not remove %s after failed upload", key)

    def history(self, user_id: int, limit: int = 5) -> List[dict]:
        return self.resume_store.list_feedback(user_id, limit=limit)


# ============================================================
# CONVENIENCE FUNCTIONS
# ============================================================

def get_resume_feedback_service() -> ResumeFeedbackService:
    return ResumeFeedbackService(
        gateway=get_interview_gateway(),
        resume_store=get_resume_store(),
        text_service=get_resume_text_service(),
        file_service=get_resume_file_service(),
    )
