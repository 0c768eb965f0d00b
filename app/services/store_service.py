"""
PostgreSQL Store Service - CRUD for the relational tables.

Tables (see scripts/schema.sql):
1. profiles            - account + student profile (one row per user)
2. interview_sessions  - mock interview transcript, status and scores
3. company_checks      - eligibility check history
4. resumes             - uploaded resume metadata (file lives in GridFS)
5. resume_feedback     - AI review of a resume

JSON-shaped columns (transcript, feedback lists, criteria) are JSONB; values
are passed as JSON strings and CAST on the way in.
"""

import json
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import text

from app.db.postgres import execute_raw_sql, get_db_session
from app.models.interview import (
    InterviewSession,
    QuestionAnalysis,
    SessionStatus,
    TranscriptEntry,
)


PROFILE_COLUMNS = "id, email, name, college, branch, year, cgpa, skills, created_at"


def _profile_row(row) -> Optional[dict]:
    if row is None:
        return None
    profile = dict(row)
    if profile.get("cgpa") is not None:
        profile["cgpa"] = float(profile["cgpa"])
    profile["skills"] = list(profile.get("skills") or [])
    return profile


# ============================================================
# PROFILES
# ============================================================

class ProfileStore:
    """Accounts and student profiles."""

    def get_by_id(self, user_id: int) -> Optional[dict]:
        with get_db_session() as db:
            row = db.execute(
                text(f"SELECT {PROFILE_COLUMNS} FROM profiles WHERE id = :id"),
                {"id": user_id}
            ).mappings().fetchone()
        return _profile_row(row)

    def get_credentials(self, email: str) -> Optional[dict]:
        """Profile plus password_hash, for login."""
        with get_db_session() as db:
            row = db.execute(
                text(f"SELECT {PROFILE_COLUMNS}, password_hash FROM profiles WHERE email = :email"),
                {"email": email}
            ).mappings().fetchone()
        return _profile_row(row)

    def email_exists(self, email: str) -> bool:
        with get_db_session() as db:
            row = db.execute(
                text("SELECT 1 FROM profiles WHERE email = :email"),
                {"email": email}
            ).fetchone()
        return row is not None

    def create(self, email: str, password_hash: str, name: str, college: str,
               branch: str, year: int, cgpa: float, skills: List[str]) -> dict:
        with get_db_session() as db:
            row = db.execute(
                text(f"""
                    INSERT INTO profiles (email, password_hash, name, college, branch, year, cgpa, skills)
                    VALUES (:email, :password_hash, :name, :college, :branch, :year, :cgpa, :skills)
                    RETURNING {PROFILE_COLUMNS}
                """),
                {
                    "email": email, "password_hash": password_hash, "name": name,
                    "college": college, "branch": branch, "year": year,
                    "cgpa": cgpa, "skills": skills
                }
            ).mappings().fetchone()
        return _profile_row(row)

    def update(self, user_id: int, fields: Dict[str, Any]) -> Optional[dict]:
        """Update only the provided columns."""
        updates = [f"{name} = :{name}" for name in fields]
        params = dict(fields, id=user_id)
        with get_db_session() as db:
            row = db.execute(
                text(f"""
                    UPDATE profiles SET {', '.join(updates)}, updated_at = CURRENT_TIMESTAMP
                    WHERE id = :id
                    RETURNING {PROFILE_COLUMNS}
                """),
                params
            ).mappings().fetchone()
        return _profile_row(row)


# ============================================================
# INTERVIEW SESSIONS
# ============================================================

SESSION_COLUMNS = """
    id, user_id, conversation, status, started_at, completed_at,
    communication_score, confidence_score, feedback, question_analysis, score_source
"""


def _session_row(row) -> Optional[InterviewSession]:
    if row is None:
        return None
    return InterviewSession(
        id=row["id"],
        user_id=row["user_id"],
        transcript=[TranscriptEntry.from_dict(e) for e in (row["conversation"] or [])],
        status=SessionStatus(row["status"]),
        started_at=row["started_at"],
        completed_at=row["completed_at"],
        communication_score=row["communication_score"],
        confidence_score=row["confidence_score"],
        feedback=list(row["feedback"] or []),
        question_analysis=[QuestionAnalysis.from_dict(q) for q in (row["question_analysis"] or [])],
        score_source=row["score_source"],
    )


class InterviewSessionStore:
    """Persistence for interview sessions. Every transcript change is written through."""

    def count_started_between(self, user_id: int, start: datetime, end: datetime) -> int:
        with get_db_session() as db:
            row = db.execute(
                text("""
                    SELECT COUNT(*) FROM interview_sessions
                    WHERE user_id = :user_id AND started_at >= :start AND started_at < :end
                """),
                {"user_id": user_id, "start": start, "end": end}
            ).fetchone()
        return int(row[0])

    def create_if_under_limit(
        self,
        user_id: int,
        limit: int,
        day_start: datetime,
        day_end: datetime,
        started_at: datetime
    ) -> Tuple[Optional[InterviewSession], int]:
        """
        Count today's sessions and insert a new one in a single transaction.

        The user's profile row is locked first, so two devices starting at
        the same moment serialize here and the limit holds.

        Returns (session or None if blocked, sessions started today before this one).
        """
        with get_db_session() as db:
            db.execute(
                text("SELECT id FROM profiles WHERE id = :user_id FOR UPDATE"),
                {"user_id": user_id}
            )
            count = int(db.execute(
                text("""
                    SELECT COUNT(*) FROM interview_sessions
                    WHERE user_id = :user_id AND started_at >= :start AND started_at < :end
                """),
                {"user_id": user_id, "start": day_start, "end": day_end}
            ).fetchone()[0])

            if count >= limit:
                return None, count

            row = db.execute(
                text(f"""
                    INSERT INTO interview_sessions (user_id, conversation, status, started_at)
                    VALUES (:user_id, CAST('[]' AS JSONB), 'active', :started_at)
                    RETURNING {SESSION_COLUMNS}
                """),
                {"user_id": user_id, "started_at": started_at}
            ).mappings().fetchone()

        return _session_row(row), count

    def get(self, session_id: int, user_id: int) -> Optional[InterviewSession]:
        with get_db_session() as db:
            row = db.execute(
                text(f"""
                    SELECT {SESSION_COLUMNS} FROM interview_sessions
                    WHERE id = :id AND user_id = :user_id
                """),
                {"id": session_id, "user_id": user_id}
            ).mappings().fetchone()
        return _session_row(row)

    def save_transcript(self, session: InterviewSession) -> None:
        with get_db_session() as db:
            db.execute(
                text("""
                    UPDATE interview_sessions
                    SET conversation = CAST(:conversation AS JSONB)
                    WHERE id = :id AND status = 'active'
                """),
                {
                    "id": session.id,
                    "conversation": json.dumps([e.to_dict() for e in session.transcript])
                }
            )

    def complete(self, session: InterviewSession) -> None:
        """Write the final transcript, scores and status in one statement."""
        with get_db_session() as db:
            db.execute(
                text("""
                    UPDATE interview_sessions
                    SET conversation = CAST(:conversation AS JSONB),
                        status = 'completed',
                        completed_at = :completed_at,
                        communication_score = :communication_score,
                        confidence_score = :confidence_score,
                        feedback = CAST(:feedback AS JSONB),
                        question_analysis = CAST(:question_analysis AS JSONB),
                        score_source = :score_source
                    WHERE id = :id AND status = 'active'
                """),
                {
                    "id": session.id,
                    "conversation": json.dumps([e.to_dict() for e in session.transcript]),
                    "completed_at": session.completed_at,
                    "communication_score": session.communication_score,
                    "confidence_score": session.confidence_score,
                    "feedback": json.dumps(session.feedback),
                    "question_analysis": json.dumps([q.to_dict() for q in session.question_analysis]),
                    "score_source": session.score_source,
                }
            )

    def list_completed(self, user_id: int, limit: int = 5) -> List[InterviewSession]:
        with get_db_session() as db:
            rows = db.execute(
                text(f"""
                    SELECT {SESSION_COLUMNS} FROM interview_sessions
                    WHERE user_id = :user_id AND status = 'completed'
                    ORDER BY completed_at DESC
                    LIMIT :limit
                """),
                {"user_id": user_id, "limit": limit}
            ).mappings().fetchall()
        return [_session_row(r) for r in rows]

    def count_completed(self, user_id: int) -> int:
        with get_db_session() as db:
            row = db.execute(
                text("""
                    SELECT COUNT(*) FROM interview_sessions
                    WHERE user_id = :user_id AND status = 'completed'
                """),
                {"user_id": user_id}
            ).fetchone()
        return int(row[0])


# ============================================================
# COMPANY CHECKS
# ============================================================

class CompanyCheckStore:

    def insert(self, user_id: int, company_name: str, is_eligible: bool,
               reason: str, criteria_met: Dict[str, bool]) -> int:
        with get_db_session() as db:
            row = db.execute(
                text("""
                    INSERT INTO company_checks (user_id, company_name, is_eligible, reason, criteria_met)
                    VALUES (:user_id, :company_name, :is_eligible, :reason, CAST(:criteria_met AS JSONB))
                    RETURNING id
                """),
                {
                    "user_id": user_id, "company_name": company_name,
                    "is_eligible": is_eligible, "reason": reason,
                    "criteria_met": json.dumps(criteria_met)
                }
            ).fetchone()
        return row[0]

    def list_recent(self, user_id: int, limit: int = 10) -> List[dict]:
        return execute_raw_sql("""
            SELECT id, company_name, is_eligible, reason, criteria_met, checked_at
            FROM company_checks WHERE user_id = :user_id
            ORDER BY checked_at DESC LIMIT :limit
        """, {"user_id": user_id, "limit": limit})

    def count(self, user_id: int) -> int:
        with get_db_session() as db:
            row = db.execute(
                text("SELECT COUNT(*) FROM company_checks WHERE user_id = :user_id"),
                {"user_id": user_id}
            ).fetchone()
        return int(row[0])


# ============================================================
# RESUMES + FEEDBACK
# ============================================================

class ResumeStore:

    def create_resume(self, user_id: int, file_name: str, file_path: str,
                      file_size: int, file_url: str) -> int:
        with get_db_session() as db:
            row = db.execute(
                text("""
                    INSERT INTO resumes (user_id, file_name, file_path, file_size, file_url)
                    VALUES (:user_id, :file_name, :file_path, :file_size, :file_url)
                    RETURNING id
                """),
                {
                    "user_id": user_id, "file_name": file_name, "file_path": file_path,
                    "file_size": file_size, "file_url": file_url
                }
            ).fetchone()
        return row[0]

    def delete_resume(self, resume_id: int) -> None:
        with get_db_session() as db:
            db.execute(text("DELETE FROM resumes WHERE id = :id"), {"id": resume_id})

    def set_text_id(self, resume_id: int, text_mongo_id: str) -> None:
        with get_db_session() as db:
            db.execute(
                text("UPDATE resumes SET text_mongo_id = :mongo_id WHERE id = :id"),
                {"mongo_id": text_mongo_id, "id": resume_id}
            )

    def insert_feedback(self, user_id: int, resume_id: int, feedback: dict, source: str) -> int:
        with get_db_session() as db:
            row = db.execute(
                text("""
                    INSERT INTO resume_feedback
                        (user_id, resume_id, clarity_score, strengths, missing_sections, improvements, source)
                    VALUES (:user_id, :resume_id, :clarity_score, CAST(:strengths AS JSONB),
                            CAST(:missing_sections AS JSONB), CAST(:improvements AS JSONB), :source)
                    RETURNING id
                """),
                {
                    "user_id": user_id, "resume_id": resume_id,
                    "clarity_score": feedback["clarity_score"],
                    "strengths": json.dumps(feedback["strengths"]),
                    "missing_sections": json.dumps(feedback["missing_sections"]),
                    "improvements": json.dumps(feedback["improvements"]),
                    "source": source
                }
            ).fetchone()
        return row[0]

    def list_feedback(self, user_id: int, limit: int = 5) -> List[dict]:
        return execute_raw_sql("""
            SELECT f.id, f.resume_id, f.clarity_score, f.source, f.analyzed_at, r.file_name, r.file_url
            FROM resume_feedback f JOIN resumes r ON f.resume_id = r.id
            WHERE f.user_id = :user_id
            ORDER BY f.analyzed_at DESC LIMIT :limit
        """, {"user_id": user_id, "limit": limit})


# ============================================================
# CONVENIENCE FUNCTIONS (FastAPI dependencies)
# ============================================================

def get_profile_store() -> ProfileStore:
    return ProfileStore()


def get_session_store() -> InterviewSessionStore:
    return InterviewSessionStore()


def get_check_store() -> CompanyCheckStore:
    return CompanyCheckStore()


def get_resume_store() -> ResumeStore:
    return ResumeStore()
