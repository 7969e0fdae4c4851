"""Persistence stage (Stage 06)."""

from __future__ import annotations

import logging

from voice_coach.application.interfaces import SessionStore
from voice_coach.domain.errors import PersistenceFailed
from voice_coach.domain.models import SessionRecord

logger = logging.getLogger(__name__)


async def save_session(store: SessionStore, record: SessionRecord) -> SessionRecord:
    """Insert exactly once; no retry and no partial-success path."""

    try:
        saved = await store.insert(record)
    except Exception as exc:
        logger.exception("Failed to save session for user=%s", record.user_id)
        raise PersistenceFailed("Failed to save session") from exc

    if not saved.id:
        raise PersistenceFailed("Session store returned a record without an id")
    return saved


__all__ = ["save_session"]
