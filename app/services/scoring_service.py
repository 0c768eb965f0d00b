"""
Interview Scoring Service

Turns a finished transcript into a bounded evaluation. Three paths:

1. gateway      - LLM reply parsed and validated
2. safe_default - LLM replied, but nothing usable could be parsed from it
3. heuristic    - LLM unreachable; score from mean candidate answer length

Whatever the path, scores are integers in [0, 100] and feedback is non-empty.
"""

import logging
import math
import random
from typing import List, Optional

from app.models.interview import (
    GatewayResult,
    QuestionAnalysis,
    Role,
    ScoreResult,
    TranscriptEntry,
)
from app.services.interview_gateway import InterviewGateway
from app.services.llm_client import extract_json

logger = logging.getLogger(__name__)


SAFE_ANALYSIS = {
    "communication_score": 75,
    "confidence_score": 72,
    "feedback": [
        "Good attempt at answering questions",
        "Try to provide more specific examples",
        "Work on structuring answers using STAR method",
        "Practice speaking more confidently",
        "Consider adding quantifiable achievements",
    ],
}


# ============================================================
# JSON VALIDATION HELPERS
# ============================================================

def _pick(data: dict, *keys):
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return None


def clamp_score(value) -> int:
    """Coerce to int and clamp to [0, 100]. Raises ValueError on non-numbers."""
    if isinstance(value, bool):
        raise ValueError("Score must be a number")
    value = float(value)
    if not math.isfinite(value):
        raise ValueError("Score must be finite")
    return max(0, min(100, int(round(value))))


def _str_list(value) -> List[str]:
    if not isinstance(value, list):
        return []
    return [str(v).strip() for v in value if v is not None and str(v).strip()]


def validate_analysis(data: dict) -> ScoreResult:
    """
    Validate an analysis object from the LLM.

    Accepts camelCase (gateway contract) or snake_case keys. Raises
    ValueError when a required field is missing or malformed.
    """
    communication = _pick(data, "communicationScore", "communication_score")
    confidence = _pick(data, "confidenceScore", "confidence_score")
    if communication is None or confidence is None:
        raise ValueError("Analysis is missing a score")

    try:
        communication = clamp_score(communication)
        confidence = clamp_score(confidence)
    except (TypeError, ValueError) as e:
        raise ValueError(f"Analysis score is not a number: {e}") from e

    feedback = _str_list(data.get("feedback"))
    if not feedback:
        raise ValueError("Analysis has no feedback")

    analysis = []
    items = _pick(data, "questionAnalysis", "question_analysis") or []
    if isinstance(items, list):
        for item in items:
            if not isinstance(item, dict):
                continue
            question = str(item.get("question", "")).strip()
            if not question:
                continue
            analysis.append(QuestionAnalysis(
                question=question,
                your_answer=str(_pick(item, "yourAnswer", "your_answer") or "").strip(),
                ideal_answer=str(_pick(item, "idealAnswer", "ideal_answer") or "").strip(),
                key_tips=_str_list(_pick(item, "keyTips", "key_tips")),
                improvement_areas=str(_pick(item, "improvementAreas", "improvement_areas") or "").strip(),
            ))

    return ScoreResult(
        communication_score=communication,
        confidence_score=confidence,
        feedback=feedback,
        question_analysis=analysis,
        source="gateway",
    )


def safe_analysis(reason: Optional[str] = None) -> ScoreResult:
    """Fixed neutral analysis used when the LLM reply cannot be used."""
    return ScoreResult(
        communication_score=SAFE_ANALYSIS["communication_score"],
        confidence_score=SAFE_ANALYSIS["confidence_score"],
        feedback=list(SAFE_ANALYSIS["feedback"]),
        question_analysis=[],
        source="safe_default",
        fallback_reason=reason,
    )


def parse_analysis_reply(text: str) -> ScoreResult:
    """LLM reply text -> ScoreResult, degrading to the safe analysis."""
    try:
        return validate_analysis(extract_json(text))
    except ValueError as e:
        logger.warning("Unusable analysis reply, using safe default: %s", e)
        return safe_analysis(str(e))


def heuristic_score(answers: List[str], rng: Optional[random.Random] = None,
                    reason: Optional[str] = None) -> ScoreResult:
    """
    Rule-based scoring from answer length, used when the LLM is unreachable.

    communication = 50 (+20 if mean > 100, +15 if > 200, +10 if > 300)
                    + randint(0, 9), capped at 95
    confidence    = communication + randint(-5, 4), clamped to [50, 95]
    """
    rng = rng or random.Random()
    avg_length = sum(len(a) for a in answers) / len(answers) if answers else 0.0

    communication = 50
    if avg_length > 100:
        communication += 20
    if avg_length > 200:
        communication += 15
    if avg_length > 300:
        communication += 10
    communication += rng.randint(0, 9)
    communication = min(95, communication)

    confidence = communication + rng.randint(0, 9) - 5
    confidence = max(50, min(95, confidence))

    feedback = [
        f"You answered {len(answers)} questions with an average response length "
        f"of {round(avg_length)} characters.",
        "Your answers were detailed and thorough." if avg_length > 200
        else "Try to provide more detailed answers with specific examples.",
        "Use the STAR method (Situation, Task, Action, Result) for behavioral questions.",
        "Practice speaking confidently and maintain eye contact in real interviews.",
        "Consider adding more quantifiable achievements in your responses.",
    ]

    return ScoreResult(
        communication_score=communication,
        confidence_score=confidence,
        feedback=feedback,
        question_analysis=[],
        source="heuristic",
        fallback_reason=reason,
    )


def score_result_to_payload(result: ScoreResult) -> dict:
    """ScoreResult in the gateway's camelCase wire shape."""
    return {
        "communicationScore": result.communication_score,
        "confidenceScore": result.confidence_score,
        "feedback": list(result.feedback),
        "questionAnalysis": [
            {
                "question": q.question,
                "yourAnswer": q.your_answer,
                "idealAnswer": q.ideal_answer,
                "keyTips": list(q.key_tips),
                "improvementAreas": q.improvement_areas,
            }
            for q in result.question_analysis
        ],
    }


class ScoringEngine:

    def __init__(self, gateway: InterviewGateway, rng: Optional[random.Random] = None):
        self.gateway = gateway
        self.rng = rng or random.Random()

    def score(self, transcript: List[TranscriptEntry]) -> ScoreResult:
        answers = [e.content for e in transcript if e.role == Role.candidate]
        try:
            result: GatewayResult = self.gateway.request_analysis([e.to_dict() for e in transcript])
            if not result.ok:
                return heuristic_score(answers, self.rng, reason=result.fallback_reason)
            return parse_analysis_reply(result.payload)
        except Exception as e:
            logger.exception("Scoring failed, using heuristic")
            return heuristic_score(answers, self.rng, reason=str(e))
