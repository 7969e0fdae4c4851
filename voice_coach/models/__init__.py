"""SQLAlchemy models for the voice coach backend."""

from .base import Base
from .dialect_profile import DialectProfile  # noqa: F401
from .interview_session import InterviewSession  # noqa: F401
from .profile import Profile  # noqa: F401
from .session import PracticeSession  # noqa: F401

__all__ = [
    "Base",
    "DialectProfile",
    "InterviewSession",
    "PracticeSession",
    "Profile",
]
