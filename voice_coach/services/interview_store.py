"""SQLAlchemy-backed mock interview storage."""

from __future__ import annotations

from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from voice_coach.application.interfaces import InterviewStore
from voice_coach.domain.models import InterviewRecord
from voice_coach.models import InterviewSession


def _to_record(row: InterviewSession) -> InterviewRecord:
    return InterviewRecord(
        id=row.id,
        user_id=row.user_id,
        category=row.category,
        questions=row.questions or [],
        answers=row.answers or [],
        current_question_index=row.current_question_index or 0,
        overall_score=row.overall_score,
        completed=bool(row.completed),
        created_at=row.created_at,
    )


def _dump(items) -> list[dict]:
    return [item.model_dump(mode="json") for item in items]


class SqlAlchemyInterviewStore(InterviewStore):
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def create(self, interview: InterviewRecord) -> InterviewRecord:
        row = InterviewSession(
            user_id=interview.user_id,
            category=interview.category.value,
            questions=_dump(interview.questions),
            answers=_dump(interview.answers),
            current_question_index=interview.current_question_index,
            overall_score=interview.overall_score,
            completed=interview.completed,
        )
        async with self._session_factory() as session:
            session.add(row)
            await session.commit()
            await session.refresh(row)
            return _to_record(row)

    async def get(self, interview_id: str, user_id: str) -> Optional[InterviewRecord]:
        async with self._session_factory() as session:
            row = await session.scalar(
                select(InterviewSession).where(
                    InterviewSession.id == interview_id,
                    InterviewSession.user_id == user_id,
                )
            )
            return _to_record(row) if row is not None else None

    async def save_progress(self, interview: InterviewRecord) -> InterviewRecord:
        async with self._session_factory() as session:
            row = await session.get(InterviewSession, interview.id)
            if row is None:
                raise LookupError(f"Interview {interview.id} does not exist")
            row.answers = _dump(interview.answers)
            row.current_question_index = interview.current_question_index
            row.completed = interview.completed
            row.overall_score = interview.overall_score
            await session.commit()
            await session.refresh(row)
            return _to_record(row)


__all__ = ["SqlAlchemyInterviewStore"]
