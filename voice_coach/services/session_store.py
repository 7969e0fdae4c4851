"""SQLAlchemy-backed session history."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Sequence

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from voice_coach.application.interfaces import SessionStore
from voice_coach.domain.models import SessionFilter, SessionPage, SessionRecord
from voice_coach.models import PracticeSession

logger = logging.getLogger(__name__)

_UPDATABLE_FIELDS = frozenset(
    {
        "transcript",
        "wpm",
        "accuracy_score",
        "filler_count",
        "filler_words_found",
        "tips",
        "audio_url",
        "duration_seconds",
        "overall_score",
        "prompt_text",
    }
)


def _to_record(row: PracticeSession) -> SessionRecord:
    return SessionRecord(
        id=row.id,
        user_id=row.user_id,
        session_kind=row.session_kind,
        prompt_text=row.prompt_text,
        transcript=row.transcript,
        wpm=row.wpm,
        accuracy_score=row.accuracy_score,
        filler_count=row.filler_count or 0,
        filler_words_found=list(row.filler_words_found or []),
        tips=list(row.tips or []),
        audio_url=row.audio_url,
        duration_seconds=row.duration_seconds,
        overall_score=row.overall_score,
        created_at=row.created_at,
    )


def _to_row(record: SessionRecord) -> PracticeSession:
    row = PracticeSession(
        user_id=record.user_id,
        session_kind=record.session_kind.value,
        prompt_text=record.prompt_text,
        transcript=record.transcript,
        wpm=record.wpm,
        accuracy_score=record.accuracy_score,
        filler_count=record.filler_count,
        filler_words_found=list(record.filler_words_found),
        tips=list(record.tips),
        audio_url=record.audio_url,
        duration_seconds=record.duration_seconds,
        overall_score=record.overall_score,
    )
    if record.id:
        row.id = record.id
    if record.created_at:
        row.created_at = record.created_at
    return row


class SqlAlchemySessionStore(SessionStore):
    """Each call runs in its own short-lived session."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def insert(self, record: SessionRecord) -> SessionRecord:
        row = _to_row(record)
        async with self._session_factory() as session:
            session.add(row)
            await session.commit()
            await session.refresh(row)
            return _to_record(row)

    async def insert_many(self, records: Sequence[SessionRecord]) -> list[SessionRecord]:
        rows = [_to_row(record) for record in records]
        if not rows:
            return []

        async with self._session_factory() as session:
            async with session.begin():
                session.add_all(rows)
            for row in rows:
                await session.refresh(row)
            return [_to_record(row) for row in rows]

    async def update(
        self, session_id: str, fields: Mapping[str, Any]
    ) -> Optional[SessionRecord]:
        unknown = set(fields) - _UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update session fields: {sorted(unknown)}")

        async with self._session_factory() as session:
            row = await session.get(PracticeSession, session_id)
            if row is None:
                return None
            for name, value in fields.items():
                setattr(row, name, value)
            await session.commit()
            await session.refresh(row)
            return _to_record(row)

    async def select(self, query: SessionFilter) -> SessionPage:
        conditions = [PracticeSession.user_id == query.user_id]
        if query.session_kind is not None:
            conditions.append(PracticeSession.session_kind == query.session_kind.value)

        async with self._session_factory() as session:
            total = await session.scalar(
                select(func.count()).select_from(PracticeSession).where(*conditions)
            )
            result = await session.execute(
                select(PracticeSession)
                .where(*conditions)
                .order_by(PracticeSession.created_at.desc())
                .limit(query.limit)
                .offset(query.offset)
            )
            rows = result.scalars().all()

        return SessionPage(sessions=[_to_record(row) for row in rows], total=total or 0)


__all__ = ["SqlAlchemySessionStore"]
