"""Mock interview rules and the interview service."""

from __future__ import annotations

import asyncio
import random

import pytest

from voice_coach.domain.errors import SttFailed
from voice_coach.domain.interview import (
    QUESTION_BANK,
    QUESTIONS_PER_INTERVIEW,
    InterviewCompleted,
    InterviewNotFound,
    current_question,
    pick_questions,
    record_answer,
    score_to_grade,
)
from voice_coach.domain.models import (
    InterviewAnswer,
    InterviewCategory,
    InterviewRecord,
    SessionKind,
)
from voice_coach.services.interview import InterviewService

from conftest import (
    FakeInterviewStore,
    FakeProfileRepository,
    FakeSessionStore,
    FakeTipGenerator,
    FakeTranscriber,
    TranscriptionError,
    build_pipeline,
)


def _interview(questions: int = 2) -> InterviewRecord:
    return InterviewRecord(
        id="iv-1",
        user_id="user-1",
        category=InterviewCategory.HR,
        questions=list(QUESTION_BANK[InterviewCategory.HR][:questions]),
    )


def _answer(question_id: str, score: int) -> InterviewAnswer:
    return InterviewAnswer(
        question_id=question_id,
        session_id=f"s-{question_id}",
        score=score,
        transcript="I am ready",
    )


@pytest.mark.parametrize("category", list(InterviewCategory))
def test_pick_questions_are_distinct_and_from_the_category(category):
    questions = pick_questions(category, rng=random.Random(7))

    assert len(questions) == QUESTIONS_PER_INTERVIEW
    assert len({question.id for question in questions}) == QUESTIONS_PER_INTERVIEW
    assert all(question.category is category for question in questions)


def test_each_bank_has_thirty_questions():
    assert {len(bank) for bank in QUESTION_BANK.values()} == {30}


def test_answers_advance_and_last_one_completes():
    interview = _interview()

    first = record_answer(interview, _answer("hr-01", 80))

    assert first.current_question_index == 1
    assert not first.completed
    assert first.overall_score is None
    assert current_question(first).id == "hr-02"

    second = record_answer(first, _answer("hr-02", 85))

    assert second.completed
    assert second.overall_score == 83
    assert current_question(second) is None
    assert [answer.score for answer in second.answers] == [80, 85]
    assert interview.answers == []


def test_completed_interview_rejects_answers():
    done = record_answer(_interview(questions=1), _answer("hr-01", 70))

    with pytest.raises(InterviewCompleted):
        record_answer(done, _answer("hr-01", 70))


@pytest.mark.parametrize(
    ("score", "grade"),
    [(100, "A"), (90, "A"), (89, "B"), (75, "B"), (60, "C"), (59, "D"), (None, "D")],
)
def test_score_to_grade(score, grade):
    assert score_to_grade(score) == grade


def _service(**overrides):
    store = overrides.pop("store", FakeInterviewStore())
    profiles = overrides.pop("profiles", FakeProfileRepository(native_language="tamil"))
    tips = overrides.pop("tips", FakeTipGenerator())
    sessions = FakeSessionStore()
    pipeline = build_pipeline(
        session_store=sessions,
        tip_generator=tips,
        transcriber=overrides.pop("transcriber", None),
    )
    service = InterviewService(store, pipeline, profiles, rng=random.Random(3))
    return service, store, sessions, tips


def test_full_interview_is_scored_and_completed():
    service, store, sessions, _ = _service()

    async def body():
        interview = await service.start("user-1", InterviewCategory.TECHNICAL)
        outcomes = []
        for question in interview.questions:
            outcomes.append(
                await service.answer(
                    "user-1",
                    interview.id,
                    question_id=question.id,
                    audio=b"m4a",
                    duration_seconds=2.0,
                )
            )
        return interview, outcomes

    interview, outcomes = asyncio.run(body())

    final = outcomes[-1].interview
    assert final.completed
    assert final.current_question_index == QUESTIONS_PER_INTERVIEW
    assert [answer.question_id for answer in final.answers] == [
        question.id for question in interview.questions
    ]
    assert final.overall_score == outcomes[0].result.overall_score
    assert store.interviews[interview.id].completed
    assert all(not outcome.interview.completed for outcome in outcomes[:-1])
    assert len(sessions.inserted) == QUESTIONS_PER_INTERVIEW
    assert all(record.session_kind is SessionKind.PRACTICE for record in sessions.inserted)
    assert all(record.prompt_text is None for record in sessions.inserted)


def test_answer_uses_profile_language():
    service, _, _, tips = _service()

    async def body():
        interview = await service.start("user-1", InterviewCategory.HR)
        await service.answer(
            "user-1",
            interview.id,
            question_id=interview.questions[0].id,
            audio=b"m4a",
            duration_seconds=2.0,
        )

    asyncio.run(body())

    assert tips.contexts[0].native_language == "tamil"


def test_answer_falls_back_to_default_language_when_lookup_fails():
    service, _, _, tips = _service(profiles=FakeProfileRepository(fail=True))

    async def body():
        interview = await service.start("user-1", InterviewCategory.HR)
        await service.answer(
            "user-1",
            interview.id,
            question_id=interview.questions[0].id,
            audio=b"m4a",
            duration_seconds=2.0,
        )

    asyncio.run(body())

    assert tips.contexts[0].native_language == "hindi"


def test_other_users_interview_is_not_found():
    service, _, _, _ = _service()

    async def body():
        interview = await service.start("user-1", InterviewCategory.HR)
        await service.get("user-2", interview.id)

    with pytest.raises(InterviewNotFound):
        asyncio.run(body())


def test_answering_a_completed_interview_is_rejected():
    store = FakeInterviewStore()
    service, _, _, _ = _service(store=store)
    done = record_answer(_interview(questions=1), _answer("hr-01", 70))
    store.interviews[done.id] = done

    with pytest.raises(InterviewCompleted):
        asyncio.run(
            service.answer(
                "user-1", done.id, question_id="hr-01", audio=b"m4a", duration_seconds=1.0
            )
        )
    assert store.saves == 0


def test_failed_analysis_does_not_advance_the_interview():
    service, store, _, _ = _service(
        transcriber=FakeTranscriber(error=TranscriptionError("noise"))
    )

    interview = asyncio.run(service.start("user-1", InterviewCategory.SITUATIONAL))

    with pytest.raises(SttFailed):
        asyncio.run(
            service.answer(
                "user-1",
                interview.id,
                question_id=interview.questions[0].id,
                audio=b"m4a",
                duration_seconds=2.0,
            )
        )
    assert store.saves == 0
    assert store.interviews[interview.id].current_question_index == 0
