import random
from datetime import datetime

import pytest
from fastapi.testclient import TestClient

from app.core.auth import create_access_token, hash_password
from app.core.config import Settings
from app.main import app
from app.models.interview import InterviewContext
from app.services.dashboard_service import DashboardService, get_dashboard_service
from app.services.eligibility_service import EligibilityService, get_eligibility_service
from app.services.interview_gateway import InterviewGateway, get_interview_gateway
from app.services.interview_service import InterviewController, get_interview_controller
from app.services.mongo_service import get_resume_file_service
from app.services.resume_service import ResumeFeedbackService, get_resume_feedback_service
from app.services.scoring_service import ScoringEngine
from app.services.store_service import get_profile_store
from tests.fakes import (
    FakeCheckStore,
    FakeLLMClient,
    FakeProfileStore,
    FakeResumeFileService,
    FakeResumeStore,
    FakeResumeTextService,
    FakeSessionStore,
)


class Clock:
    """Settable clock for the controller."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def settings():
    return Settings(_env_file=None)


@pytest.fixture
def clock():
    return Clock(datetime(2024, 3, 14, 10, 0))


@pytest.fixture
def llm():
    return FakeLLMClient()


@pytest.fixture
def gateway(llm, settings):
    return InterviewGateway(
        llm=llm,
        general_quota=settings.interview_general_questions,
        specialized_quota=settings.interview_specialized_questions,
    )


@pytest.fixture
def session_store():
    return FakeSessionStore()


@pytest.fixture
def controller(session_store, gateway, settings, clock):
    return InterviewController(
        store=session_store,
        gateway=gateway,
        scorer=ScoringEngine(gateway, rng=random.Random(7)),
        settings=settings,
        clock=clock,
    )


@pytest.fixture
def ctx():
    return InterviewContext(
        user_id=1,
        name="Asha Rao",
        branch="Computer Science",
        college="RV College",
        skills=["Python", "SQL"],
    )


# ============================================================
# API
# ============================================================

@pytest.fixture
def profile_store():
    return FakeProfileStore()


@pytest.fixture
def check_store():
    return FakeCheckStore()


@pytest.fixture
def resume_store():
    return FakeResumeStore()


@pytest.fixture
def file_service():
    return FakeResumeFileService()


@pytest.fixture
def text_service():
    return FakeResumeTextService()


@pytest.fixture
def client(profile_store, check_store, resume_store, file_service, text_service,
           session_store, gateway, controller):
    """TestClient with every store and the LLM replaced by fakes."""
    app.dependency_overrides[get_profile_store] = lambda: profile_store
    app.dependency_overrides[get_eligibility_service] = lambda: EligibilityService(check_store)
    app.dependency_overrides[get_interview_gateway] = lambda: gateway
    app.dependency_overrides[get_interview_controller] = lambda: controller
    app.dependency_overrides[get_resume_file_service] = lambda: file_service
    app.dependency_overrides[get_resume_feedback_service] = lambda: ResumeFeedbackService(
        gateway=gateway,
        resume_store=resume_store,
        text_service=text_service,
        file_service=file_service,
        rng=random.Random(3),
    )
    app.dependency_overrides[get_dashboard_service] = lambda: DashboardService(
        resume_store=resume_store,
        session_store=session_store,
        check_store=check_store,
    )
    # Not used as a context manager, so the Mongo startup hook does not run
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def student(profile_store):
    return profile_store.create(
        email="asha@example.com",
        password_hash=hash_password("secret123"),
        name="Asha Rao",
        college="RV College",
        branch="Computer Science",
        year=3,
        cgpa=8.2,
        skills=["Python", "SQL"],
    )


@pytest.fixture
def auth_headers(student):
    token = create_access_token({"sub": str(student["id"])})
    return {"Authorization": f"Bearer {token}"}
