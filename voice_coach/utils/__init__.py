"""Utility helpers for the voice coach backend."""

from .security import AuthenticationError, create_access_token, decode_access_token

__all__ = [
    "AuthenticationError",
    "create_access_token",
    "decode_access_token",
]
