import json
import random

import pytest

from app.services.interview_gateway import InterviewGateway
from app.services.resume_service import (
    ResumeFeedbackService,
    mock_review,
    parse_review_reply,
    score_description,
    validate_resume_review,
)
from app.utils.file_upload import ExtractedFile, extract_from_txt, get_file_extension
from tests.fakes import (
    FakeLLMClient,
    FakeResumeFileService,
    FakeResumeStore,
    FakeResumeTextService,
)

RESUME_TEXT = "Asha Rao\nB.E. Computer Science\nProjects: Library system in Django"


def make_service(replies):
    store = FakeResumeStore()
    texts = FakeResumeTextService()
    files = FakeResumeFileService()
    service = ResumeFeedbackService(
        gateway=InterviewGateway(llm=FakeLLMClient(replies), general_quota=5, specialized_quota=4),
        resume_store=store,
        text_service=texts,
        file_service=files,
        rng=random.Random(0),
    )
    return service, store, texts, files


def upload():
    return ExtractedFile(RESUME_TEXT, "asha.txt", RESUME_TEXT.encode(), "text/plain")


def test_analyze_with_gateway_review():
    reply = json.dumps({
        "clarity_score": 83,
        "strengths": ["Clear projects section"],
        "missing_sections": ["Certifications"],
        "improvements": ["Quantify impact"],
    })
    service, store, texts, files = make_service([reply])

    result = service.analyze(7, upload())

    assert result["source"] == "gateway"
    assert result["clarity_score"] == 83
    assert result["score_description"].startswith("Excellent")
    assert "/api/resumes/files/" in result["file_url"]
    assert store.resumes[result["resume_id"]]["text_mongo_id"] is not None
    assert texts.docs[0]["resume_text"] == RESUME_TEXT
    assert len(files.files) == 1
    assert store.feedback[0]["source"] == "gateway"


def test_analyze_unparseable_reply_uses_safe_review():
    service, store, _, _ = make_service(["Your resume looks great!"])
    result = service.analyze(7, upload())
    assert result["source"] == "safe_default"
    assert result["clarity_score"] == 75
    assert result["strengths"] == ["Clear structure", "Good formatting", "Relevant content"]
    assert store.feedback[0]["clarity_score"] == 75


def test_analyze_gateway_down_uses_mock_review():
    service, store, _, _ = make_service([])
    result = service.analyze(7, upload())
    assert result["source"] == "mock"
    assert 65 <= result["clarity_score"] <= 94
    assert result["improvements"]
    assert len(store.feedback) == 1


def test_history_newest_first():
    service, _, _, _ = make_service([])
    service.analyze(7, upload())
    service.analyze(7, upload())
    history = service.history(7)
    assert [h["resume_id"] for h in history] == [2, 1]
    assert history[0]["file_name"] == "asha.txt"


@pytest.mark.parametrize("seed", range(10))
def test_mock_review_range(seed):
    assert 65 <= mock_review(random.Random(seed))["clarity_score"] <= 94


def test_validate_resume_review_clamps_and_cleans():
    review = validate_resume_review({
        "clarity_score": 120,
        "strengths": ["Good", ""],
        "improvements": "not a list",
    })
    assert review == {
        "clarity_score": 100,
        "strengths": ["Good"],
        "missing_sections": [],
        "improvements": [],
    }


@pytest.mark.parametrize("data", [{"strengths": []}, {"clarity_score": 70}, {"clarity_score": "x", "strengths": []}])
def test_validate_resume_review_rejects(data):
    with pytest.raises(ValueError):
        validate_resume_review(data)


def test_parse_review_reply_fenced():
    reply = '```json\n{"clarity_score": 61, "strengths": ["ok"]}\n```'
    review, source = parse_review_reply(reply)
    assert source == "gateway"
    assert review["clarity_score"] == 61


@pytest.mark.parametrize("score, word", [(80, "Excellent"), (79, "Good"), (60, "Good"), (59, "needs")])
def test_score_description(score, word):
    assert word in score_description(score)


def test_file_helpers():
    assert get_file_extension("CV.Final.PDF") == ".pdf"
    assert get_file_extension("resume") == ""
    assert extract_from_txt("café".encode("utf-8")) == "café"
    assert extract_from_txt("café".encode("cp1252")) == "café"


def test_analyze_overflowing_score_uses_safe_review():
    service, store, _, _ = make_service(['{"clarity_score": 1e999, "strengths": ["a"]}'])
    result = service.analyze(7, upload())
    assert result["source"] == "safe_default"
    assert result["clarity_score"] == 75
    assert len(store.feedback) == 1


class BrokenFeedbackStore(FakeResumeStore):

    def insert_feedback(self, user_id, resume_id, feedback, source) -> int:
        raise RuntimeError("resume_feedback insert failed")


def test_analyze_store_failure_removes_partial_writes():
    store = BrokenFeedbackStore()
    texts = FakeResumeTextService()
    files = FakeResumeFileService()
    service = ResumeFeedbackService(
        gateway=InterviewGateway(llm=FakeLLMClient([]), general_quota=5, specialized_quota=4),
        resume_store=store,
        text_service=texts,
        file_service=files,
        rng=random.Random(0),
    )

    with pytest.raises(RuntimeError):
        service.analyze(7, upload())

    assert store.resumes == {}
    assert texts.docs == []
    assert files.files == {}


def test_analyze_review_error_writes_nothing():
    service, store, _, files = make_service([RuntimeError("boom")])

    with pytest.raises(RuntimeError):
        service.analyze(7, upload())

    assert store.resumes == {}
    assert files.files == {}
