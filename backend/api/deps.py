"""Shared API dependencies.

Resolves the client session used to scope search history, preferences
and battle rosters.
"""

from __future__ import annotations

from typing import Optional

from fastapi import Depends, Header

from app.exceptions import SessionRequiredError


def get_optional_session_id(
    x_session_id: Optional[str] = Header(None, max_length=128),
) -> Optional[str]:
    """Client session from the ``X-Session-ID`` header, if any."""
    return x_session_id or None


def get_session_id(
    session_id: Optional[str] = Depends(get_optional_session_id),
) -> str:
    """Client session, required for stateful endpoints."""
    if not session_id:
        raise SessionRequiredError()
    return session_id
