import json
from datetime import datetime, timedelta

import pytest

from app.core.exceptions import NotFound, SessionStateError, ValidationFailed
from app.models.interview import Role, SessionStatus, TranscriptEntry
from app.services.interview_service import FALLBACK_QUESTIONS, day_bounds, fallback_question

LONG_ANSWER = "I built a library management system in Python with a team of three students."


def answer_all(controller, ctx, session_id, answer=LONG_ANSWER):
    turn = None
    for _ in range(9):
        turn = controller.submit_answer(ctx, session_id, answer)
        if turn.session.is_completed:
            break
    return turn


# ============================================================
# Fallback questions
# ============================================================

@pytest.mark.parametrize("count", range(20))
def test_fallback_question_is_count_mod_length(count):
    assert fallback_question(count) == FALLBACK_QUESTIONS[count % len(FALLBACK_QUESTIONS)]


def test_day_bounds():
    start, end = day_bounds(datetime(2024, 3, 14, 23, 59))
    assert start == datetime(2024, 3, 14)
    assert end == datetime(2024, 3, 15)


# ============================================================
# Start / daily limit
# ============================================================

def test_start_asks_first_question(controller, ctx, session_store):
    outcome = controller.start(ctx)

    assert not outcome.blocked
    assert outcome.sessions_today == 1
    session = outcome.turn.session
    assert session.interviewer_count == 1
    assert session.awaiting_answer
    # LLM unavailable: first fallback question
    assert outcome.turn.question_source == "fallback"
    assert session.current_question == FALLBACK_QUESTIONS[0]
    assert session_store.sessions[session.id].interviewer_count == 1


def test_fourth_start_same_day_is_blocked(controller, ctx, session_store):
    for _ in range(3):
        assert not controller.start(ctx).blocked

    outcome = controller.start(ctx)
    assert outcome.blocked
    assert outcome.turn is None
    assert outcome.sessions_today == 3
    assert len(session_store.sessions) == 3
    assert controller.limit_status(ctx) == {"sessions_today": 3, "daily_limit": 3, "remaining": 0}


def test_limit_resets_next_day(controller, ctx, clock):
    for _ in range(3):
        controller.start(ctx)
    clock.now = clock.now + timedelta(days=1)

    assert not controller.start(ctx).blocked
    assert controller.limit_status(ctx)["remaining"] == 2


def test_limit_is_per_user(controller, ctx):
    for _ in range(3):
        controller.start(ctx)
    ctx.user_id = 2
    assert not controller.start(ctx).blocked


# ============================================================
# Answers
# ============================================================

@pytest.mark.parametrize("answer", ["", "   ", "too short", " " * 10 + "x" * 19 + " " * 10])
def test_short_answer_does_not_advance(controller, ctx, session_store, answer):
    session = controller.start(ctx).turn.session
    saves = session_store.saves

    with pytest.raises(ValidationFailed):
        controller.submit_answer(ctx, session.id, answer)

    stored = session_store.sessions[session.id]
    assert len(stored.transcript) == 1
    assert stored.transcript[-1].role == Role.interviewer
    assert session_store.saves == saves


def test_answer_is_trimmed_and_next_question_asked(controller, ctx, session_store):
    session = controller.start(ctx).turn.session

    turn = controller.submit_answer(ctx, session.id, "   " + LONG_ANSWER + "  ")

    stored = session_store.sessions[session.id]
    assert [e.role for e in stored.transcript] == [Role.interviewer, Role.candidate, Role.interviewer]
    assert stored.transcript[1].content == LONG_ANSWER
    assert turn.session.current_question == FALLBACK_QUESTIONS[1]


def test_full_interview_asks_exactly_nine_questions(controller, ctx, session_store):
    session = controller.start(ctx).turn.session

    turn = answer_all(controller, ctx, session.id)

    done = turn.session
    assert done.is_completed
    assert done.interviewer_count == 9
    assert len(done.candidate_answers) == 9
    assert done.completed_at is not None
    assert 0 <= done.communication_score <= 100
    assert 0 <= done.confidence_score <= 100
    assert done.feedback
    assert done.score_source == "heuristic"
    # Ninth fallback wraps around the list
    assert done.asked_questions[8] == FALLBACK_QUESTIONS[8 % len(FALLBACK_QUESTIONS)]
    assert session_store.sessions[session.id].status == SessionStatus.completed


def test_completed_session_is_immutable(controller, ctx):
    session = controller.start(ctx).turn.session
    answer_all(controller, ctx, session.id)

    with pytest.raises(SessionStateError):
        controller.submit_answer(ctx, session.id, LONG_ANSWER)
    with pytest.raises(SessionStateError):
        controller.end(ctx, session.id)
    assert controller.get_session(ctx, session.id).interviewer_count == 9


def test_unknown_session(controller, ctx):
    with pytest.raises(NotFound):
        controller.submit_answer(ctx, 999, LONG_ANSWER)


def test_other_users_session_is_not_visible(controller, ctx):
    session = controller.start(ctx).turn.session
    ctx.user_id = 42
    with pytest.raises(NotFound):
        controller.get_session(ctx, session.id)


# ============================================================
# Gateway questions
# ============================================================

def test_gateway_questions_and_phases(controller, ctx, llm):
    questions = [f"Gateway question number {i}?" for i in range(1, 10)]
    analysis = json.dumps({
        "communicationScore": 84,
        "confidenceScore": 79,
        "feedback": ["Well structured answers"],
        "questionAnalysis": [],
    })
    llm.replies = questions + [analysis]

    outcome = controller.start(ctx)
    assert outcome.turn.question_source == "gateway"
    turn = answer_all(controller, ctx, outcome.turn.session.id)

    assert turn.session.asked_questions == questions
    assert turn.session.score_source == "gateway"
    assert turn.session.communication_score == 84

    prompts = [c["user_content"] for c in llm.calls[:9]]
    assert all("HR interview" in p for p in prompts[:5])
    assert all("TECHNICAL" in p for p in prompts[5:])
    assert "Python, SQL" in prompts[5]
    assert "Computer Science" in prompts[5]
    # Every prompt lists what was already asked
    assert questions[0] in prompts[1]
    assert llm.calls[9]["json_mode"]


def test_repeated_gateway_question_falls_back(controller, ctx, llm):
    llm.replies = ["What are your hobbies?", "What are your hobbies?"]
    session = controller.start(ctx).turn.session

    turn = controller.submit_answer(ctx, session.id, LONG_ANSWER)

    assert turn.question_source == "fallback"
    assert turn.fallback_reason
    assert turn.session.current_question == FALLBACK_QUESTIONS[1]


# ============================================================
# End / resume / history
# ============================================================

def test_end_early_scores_partial_transcript(controller, ctx, session_store):
    session = controller.start(ctx).turn.session
    controller.submit_answer(ctx, session.id, LONG_ANSWER)

    done = controller.end(ctx, session.id)

    assert done.is_completed
    assert done.interviewer_count == 2
    assert done.feedback
    assert session_store.sessions[session.id].status == SessionStatus.completed


def test_end_right_after_start(controller, ctx):
    session = controller.start(ctx).turn.session
    done = controller.end(ctx, session.id)
    assert done.is_completed
    assert 50 <= done.communication_score <= 59


def test_resume_asks_question_when_answer_was_last(controller, ctx, session_store, clock):
    session = controller.start(ctx).turn.session
    stored = session_store.sessions[session.id]
    stored.transcript.append(TranscriptEntry(Role.candidate, LONG_ANSWER, clock.now))

    turn = controller.resume(ctx, session.id)

    assert turn.session.awaiting_answer
    assert turn.session.interviewer_count == 2


def test_resume_with_pending_question_changes_nothing(controller, ctx, session_store):
    session = controller.start(ctx).turn.session
    saves = session_store.saves

    turn = controller.resume(ctx, session.id)

    assert turn.session.current_question == FALLBACK_QUESTIONS[0]
    assert turn.question_source is None
    assert session_store.saves == saves


def test_history_lists_completed_sessions(controller, ctx):
    first = controller.start(ctx).turn.session
    controller.end(ctx, first.id)
    controller.start(ctx)

    history = controller.history(ctx)
    assert [s.id for s in history] == [first.id]
