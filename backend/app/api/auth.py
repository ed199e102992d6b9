"""Minimal auth dependency.

Stub implementation that extracts the owner id from a bearer token or uses
a test default. Session and token validation live in the auth service.
"""

import re
from typing import Annotated

from fastapi import Header, HTTPException, status

from backend.app.api.context import RequestContext

DEFAULT_OWNER_ID = "user_default"

_OWNER_ID_PATTERN = re.compile(r"^[A-Za-z0-9_.-]{1,64}$")


async def get_current_context(
    authorization: Annotated[str | None, Header()] = None,
) -> RequestContext:
    """Extract request context from authorization header.

    Either:
    - Parses a "Bearer <owner_id>" header
    - Returns the test default owner if no header

    Args:
        authorization: Authorization header (e.g., "Bearer <owner_id>")

    Returns:
        RequestContext with owner_id

    Raises:
        HTTPException: If authorization is invalid
    """
    if not authorization:
        return RequestContext(owner_id=DEFAULT_OWNER_ID)

    if not authorization.startswith("Bearer "):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authorization header format",
            headers={"WWW-Authenticate": "Bearer"},
        )

    token = authorization[7:].strip()  # Strip "Bearer "

    if not _OWNER_ID_PATTERN.match(token):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid bearer token (expected owner id)",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return RequestContext(owner_id=token)
