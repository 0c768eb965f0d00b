"""
LLM Gateway - prompt assembly for the mock interview and resume review.

Two ways in:
- request_* methods return a GatewayResult and never raise; the interview
  controller, scoring engine and resume service use these.
- generate_question / analyze_transcript / review_resume raise GatewayError;
  the HTTP gateway routes use these and turn errors into non-2xx replies.
"""

import logging
from typing import List, Optional

from app.core.config import get_settings
from app.core.exceptions import GatewayError
from app.models.interview import GatewayResult
from app.services.llm_client import LLMClient, get_llm_client

logger = logging.getLogger(__name__)

ROLE_LABELS = {"interviewer": "Interviewer", "candidate": "Candidate"}

QUESTION_SYSTEM_PROMPT = (
    "You are a professional campus placement interviewer. "
    "Return ONLY the question text, no additional formatting or explanations."
)

ANALYSIS_SYSTEM_PROMPT = (
    "You are an interview coach evaluating a mock interview. Return ONLY valid JSON."
)

RESUME_SYSTEM_PROMPT = (
    "You are an expert resume reviewer for Indian college students preparing for "
    "campus placements. Return ONLY valid JSON."
)


def format_conversation(conversation: List[dict], short_labels: bool = False) -> str:
    lines = []
    for entry in conversation:
        role = entry.get("role")
        if short_labels:
            label = "Q" if role == "interviewer" else "A"
        else:
            label = ROLE_LABELS.get(role, "Candidate")
        lines.append(f"{label}: {entry.get('content', '')}")
    return ("\n\n" if short_labels else "\n").join(lines)


def _clean_question(text: str) -> str:
    text = text.strip()
    if len(text) >= 2 and text[0] == text[-1] and text[0] in "\"'":
        text = text[1:-1].strip()
    return text


class InterviewGateway:

    def __init__(self, llm: Optional[LLMClient] = None, general_quota: Optional[int] = None,
                 specialized_quota: Optional[int] = None):
        settings = get_settings()
        self.llm = llm or get_llm_client()
        self.general_quota = general_quota or settings.interview_general_questions
        self.specialized_quota = specialized_quota or settings.interview_specialized_questions

    # ========================================
    # Question generation
    # ========================================

    def build_question_prompt(
        self,
        conversation: List[dict],
        question_number: int,
        is_specialized: bool,
        user_profile: Optional[dict] = None,
        asked_questions: Optional[List[str]] = None
    ) -> str:
        history = format_conversation(conversation) or "(no conversation yet)"
        asked = asked_questions or []
        asked_block = "\n".join(f"- {q}" for q in asked) if asked else "- (none yet)"

        if is_specialized and user_profile:
            skills = user_profile.get("skills") or []
            skills_list = ", ".join(skills) if skills else "general programming"
            branch = user_profile.get("branch") or "engineering"
            college = user_profile.get("college") or "their college"
            first = self.general_quota + 1
            last = self.general_quota + self.specialized_quota
            return f"""You are conducting a TECHNICAL interview for a {branch} student from {college} preparing for campus placements.

This is SPECIALIZED question {question_number - self.general_quota} of {self.specialized_quota} (questions {first}-{last} are technical).

Student's Skills: {skills_list}

Previous conversation:
{history}

Questions already asked (NEVER repeat or rephrase any of these):
{asked_block}

Generate ONE specific TECHNICAL question about:
- Their coding skills or techniques mentioned ({skills_list})
- Problem-solving approach in their field ({branch})
- Technical projects or implementations
- Algorithms, data structures, or domain-specific knowledge

The question should be specific to {branch} and {skills_list}, test practical knowledge,
reference their previous answers if possible, and suit an entry-level candidate.

Return ONLY the question text."""

        return f"""You are conducting a professional HR interview for an Indian college student preparing for campus placements.

This is question {question_number} of {self.general_quota} (general HR questions).

Previous conversation:
{history}

Questions already asked (NEVER repeat or rephrase any of these):
{asked_block}

Generate ONE appropriate HR interview question. It should be professional, relevant for
entry-level positions, common in Indian campus placements, progressive (start easy, get
more specific) and NOT a technical coding question (those come later).

Return ONLY the question text."""

    def generate_question(
        self,
        conversation: List[dict],
        question_number: int,
        is_specialized: bool = False,
        user_profile: Optional[dict] = None,
        asked_questions: Optional[List[str]] = None
    ) -> str:
        if asked_questions is None:
            asked_questions = [e["content"] for e in conversation if e.get("role") == "interviewer"]

        prompt = self.build_question_prompt(
            conversation, question_number, is_specialized, user_profile, asked_questions
        )
        raw = self.llm._call_api(QUESTION_SYSTEM_PROMPT, prompt, max_tokens=200, temperature=0.8)
        question = _clean_question(raw)

        if not question:
            raise GatewayError("LLM returned an empty question")
        asked_lower = {q.strip().lower() for q in asked_questions}
        if question.lower() in asked_lower:
            raise GatewayError("LLM repeated a previous question")
        return question

    def request_question(self, **kwargs) -> GatewayResult:
        try:
            return GatewayResult.success(self.generate_question(**kwargs))
        except GatewayError as e:
            logger.warning("Question generation fell back: %s", e.message)
            return GatewayResult.failure(e.message)

    # ========================================
    # Transcript analysis
    # ========================================

    def build_analysis_prompt(self, conversation: List[dict]) -> str:
        return f"""Analyze this mock HR interview for an Indian college student:

{format_conversation(conversation, short_labels=True)}

Provide detailed feedback in JSON format:
{{
  "communicationScore": <integer 0-100>,
  "confidenceScore": <integer 0-100>,
  "feedback": [<array of 4-5 specific feedback points>],
  "questionAnalysis": [
    {{
      "question": "<the question asked>",
      "yourAnswer": "<summary of candidate's answer>",
      "idealAnswer": "<what a strong answer should include>",
      "keyTips": [<array of 3-4 specific tips for this question>],
      "improvementAreas": "<what could be improved>"
    }}
  ]
}}

Evaluate answer completeness and relevance, communication clarity, use of examples
(STAR method), professional tone and specific accomplishments. Be encouraging but give
constructive, actionable feedback.

Return ONLY valid JSON."""

    def analyze_transcript(self, conversation: List[dict]) -> str:
        """Raw LLM reply for the transcript; parsing is the scoring engine's job."""
        prompt = self.build_analysis_prompt(conversation)
        return self.llm._call_api(
            ANALYSIS_SYSTEM_PROMPT, prompt, max_tokens=2048, temperature=0.7, json_mode=True
        )

    def request_analysis(self, conversation: List[dict]) -> GatewayResult:
        try:
            return GatewayResult.success(self.analyze_transcript(conversation))
        except GatewayError as e:
            logger.warning("Transcript analysis unavailable: %s", e.message)
            return GatewayResult.failure(e.message)

    # ========================================
    # Resume review
    # ========================================

    def build_resume_prompt(self, file_name: str, text_content: str) -> str:
        return f"""Analyze the following resume and provide feedback in JSON format.

Resume: {file_name}
Content: {text_content or 'Resume content not provided'}

IMPORTANT GUIDELINES:
1. Do NOT claim to be an ATS system
2. Do NOT guarantee job placement or ATS approval
3. Provide honest, educational feedback only
4. Focus on clarity, structure, and content quality

Output format:
{{
  "clarity_score": <integer 0-100>,
  "strengths": [<array of 3-5 strength points>],
  "missing_sections": [<array of 2-4 missing or weak sections>],
  "improvements": [<array of 4-6 specific improvement suggestions>]
}}

Return ONLY valid JSON, no additional text."""

    def review_resume(self, file_name: str, text_content: str) -> str:
        prompt = self.build_resume_prompt(file_name, text_content)
        return self.llm._call_api(
            RESUME_SYSTEM_PROMPT, prompt, max_tokens=1024, temperature=0.7, json_mode=True
        )

    def request_resume_review(self, file_name: str, text_content: str) -> GatewayResult:
        try:
            return GatewayResult.success(self.review_resume(file_name, text_content))
        except GatewayError as e:
            logger.warning("Resume review unavailable: %s", e.message)
            return GatewayResult.failure(e.message)


def get_interview_gateway() -> InterviewGateway:
    return InterviewGateway()
