"""JWT helpers for bearer tokens issued by the auth provider."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from jose import JWTError, jwt
from pydantic import BaseModel, ValidationError

from voice_coach.config.settings import settings


class AuthenticationError(Exception):
    """Raised when a JWT cannot be decoded or is otherwise invalid."""


class TokenPayload(BaseModel):
    """Claims the backend relies on; ``sub`` is the user id."""

    sub: str
    exp: datetime
    iat: datetime | None = None
    email: str | None = None


def create_access_token(
    subject: str,
    expires_delta: Optional[timedelta] = None,
    extra_claims: dict[str, Any] | None = None,
) -> str:
    """Sign a token the same way the auth provider does. Used by tooling and tests."""

    now = datetime.now(timezone.utc)
    to_encode: dict[str, Any] = {
        "sub": subject,
        "exp": now + (expires_delta or timedelta(hours=1)),
        "iat": now,
    }
    if settings.security.jwt_audience:
        to_encode["aud"] = settings.security.jwt_audience
    to_encode.update(extra_claims or {})

    return jwt.encode(
        to_encode,
        settings.security.jwt_secret_key.get_secret_value(),
        algorithm=settings.security.jwt_algorithm,
    )


def decode_access_token(token: str) -> TokenPayload:
    """Decode and validate a JWT access token, returning its payload."""

    audience = settings.security.jwt_audience
    try:
        payload = jwt.decode(
            token,
            settings.security.jwt_secret_key.get_secret_value(),
            algorithms=[settings.security.jwt_algorithm],
            audience=audience,
            options={"verify_aud": audience is not None},
        )
        return TokenPayload.model_validate(payload)
    except (JWTError, ValidationError) as exc:
        raise AuthenticationError("Invalid authentication token") from exc


__all__ = [
    "AuthenticationError",
    "TokenPayload",
    "create_access_token",
    "decode_access_token",
]
