"""Response schemas for mock interviews."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from voice_coach.domain.interview import score_to_grade
from voice_coach.domain.models import (
    AnalysisResult,
    InterviewAnswer,
    InterviewCategory,
    InterviewQuestion,
    InterviewRecord,
)


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class StartInterviewRequest(BaseModel):
    category: InterviewCategory


class QuestionView(_CamelModel):
    id: str
    text: str
    number: int
    total: int

    @classmethod
    def at(cls, interview: InterviewRecord, index: int) -> Optional["QuestionView"]:
        if index >= len(interview.questions):
            return None
        question = interview.questions[index]
        return cls(
            id=question.id,
            text=question.text,
            number=index + 1,
            total=len(interview.questions),
        )


class StartInterviewData(_CamelModel):
    interview_id: str
    first_question: Optional[QuestionView]


class StartInterviewResponse(BaseModel):
    success: bool = True
    data: StartInterviewData


class AnswerResultView(_CamelModel):
    session_id: str
    wpm: float
    accuracy_score: Optional[int]
    filler_count: int
    tips: list[str]

    @classmethod
    def from_result(cls, result: AnalysisResult) -> "AnswerResultView":
        return cls(
            session_id=result.session_id,
            wpm=result.wpm,
            accuracy_score=result.accuracy_score,
            filler_count=result.filler_count,
            tips=result.tips,
        )


class InterviewAnswerData(_CamelModel):
    answer_result: AnswerResultView
    next_question: Optional[QuestionView]
    is_complete: bool
    overall_score: Optional[int] = None


class InterviewAnswerResponse(BaseModel):
    success: bool = True
    data: InterviewAnswerData


class AnswerView(_CamelModel):
    question_id: str
    session_id: str
    score: int
    transcript: str


class InterviewReportView(BaseModel):
    """Interview row keyed like the ``interview_sessions`` table, plus a grade."""

    id: str
    user_id: str
    category: InterviewCategory
    questions: list[InterviewQuestion]
    answers: list[AnswerView]
    current_question_index: int
    overall_score: Optional[int]
    completed: bool
    created_at: Optional[datetime] = None
    grade: str

    @classmethod
    def from_record(cls, interview: InterviewRecord) -> "InterviewReportView":
        return cls(
            id=interview.id,
            user_id=interview.user_id,
            category=interview.category,
            questions=interview.questions,
            answers=[_answer_view(answer) for answer in interview.answers],
            current_question_index=interview.current_question_index,
            overall_score=interview.overall_score,
            completed=interview.completed,
            created_at=interview.created_at,
            grade=score_to_grade(interview.overall_score),
        )


def _answer_view(answer: InterviewAnswer) -> AnswerView:
    return AnswerView(**answer.model_dump())


class InterviewReportResponse(BaseModel):
    success: bool = True
    data: InterviewReportView
