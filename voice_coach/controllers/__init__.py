"""FastAPI routers acting as controllers."""

from . import drills, interview, onboarding, profile, sessions

__all__ = ["drills", "interview", "onboarding", "profile", "sessions"]
