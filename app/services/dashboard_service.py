"""
Dashboard Service - aggregate view of a student's preparation.

Pulls the latest numbers from each feature and merges a short activity feed.
"""

from typing import List

from app.services.store_service import (
    CompanyCheckStore,
    InterviewSessionStore,
    ResumeStore,
    get_check_store,
    get_resume_store,
    get_session_store,
)
from app.utils.validators import profile_completion

ACTIVITY_PER_SOURCE = 3
ACTIVITY_LIMIT = 5


class DashboardService:

    def __init__(self, resume_store: ResumeStore, session_store: InterviewSessionStore,
                 check_store: CompanyCheckStore):
        self.resume_store = resume_store
        self.session_store = session_store
        self.check_store = check_store

    def recent_activity(self, user_id: int) -> List[dict]:
        """Newest first, merged across resumes, interviews and checks."""
        activity = []

        for r in self.resume_store.list_feedback(user_id, limit=ACTIVITY_PER_SOURCE):
            activity.append({
                "type": "resume",
                "title": "Resume analyzed",
                "detail": f"{r['file_name']} scored {r['clarity_score']}/100",
                "timestamp": r["analyzed_at"],
            })

        for s in self.session_store.list_completed(user_id, limit=ACTIVITY_PER_SOURCE):
            activity.append({
                "type": "interview",
                "title": "Mock interview completed",
                "detail": (
                    f"Communication {s.communication_score}/100, "
                    f"confidence {s.confidence_score}/100"
                ),
                "timestamp": s.completed_at,
            })

        for c in self.check_store.list_recent(user_id, limit=ACTIVITY_PER_SOURCE):
            activity.append({
                "type": "eligibility",
                "title": f"Checked {c['company_name']}",
                "detail": "Eligible" if c["is_eligible"] else "Not eligible",
                "timestamp": c["checked_at"],
            })

        activity = [a for a in activity if a["timestamp"] is not None]
        activity.sort(key=lambda a: a["timestamp"], reverse=True)
        return activity[:ACTIVITY_LIMIT]

    def summary(self, profile: dict) -> dict:
        user_id = profile["id"]
        latest = self.resume_store.list_feedback(user_id, limit=1)

        return {
            "name": profile.get("name") or "",
            "resume_score": latest[0]["clarity_score"] if latest else None,
            "interviews_completed": self.session_store.count_completed(user_id),
            "companies_checked": self.check_store.count(user_id),
            "profile_completion": profile_completion(profile),
            "recent_activity": self.recent_activity(user_id),
        }


def get_dashboard_service() -> DashboardService:
    return DashboardService(
        resume_store=get_resume_store(),
        session_store=get_session_store(),
        check_store=get_check_store(),
    )
