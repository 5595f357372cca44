"""Shared FastAPI dependencies for API routes."""

from __future__ import annotations

from fastapi import Depends, Header, HTTPException, status

from taskhub.db.session import get_db  # re-export
from taskhub.services.auth import get_caller_id_from_token

__all__ = [
    "get_db",
    "get_caller_id",
    "require_caller",
]


def get_caller_id(authorization: str | None = Header(None)) -> str | None:
    """Return the caller id from an ``Authorization: Bearer <token>`` header, or None."""
    if not authorization or not authorization.startswith("Bearer "):
        return None
    token = authorization[len("Bearer ") :].strip()
    if not token:
        return None
    return get_caller_id_from_token(token)


def require_caller(caller_id: str | None = Depends(get_caller_id)) -> str:
    """Dependency that requires authentication. Returns 401 when no valid token is present."""
    if caller_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )
    return caller_id
