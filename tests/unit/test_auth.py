"""Unit tests for auth module."""

import pytest
from fastapi import HTTPException

from backend.app.api.auth import DEFAULT_OWNER_ID, get_current_context


@pytest.mark.asyncio
async def test_get_current_context_no_header_uses_default() -> None:
    """Test that missing auth header uses the test default owner."""
    ctx = await get_current_context(authorization=None)

    assert ctx.owner_id == DEFAULT_OWNER_ID


@pytest.mark.asyncio
async def test_get_current_context_valid_token() -> None:
    """Test valid owner token."""
    ctx = await get_current_context(authorization="Bearer user_42")

    assert ctx.owner_id == "user_42"


@pytest.mark.asyncio
async def test_get_current_context_invalid_bearer_format() -> None:
    """Test invalid bearer format raises 401."""
    with pytest.raises(HTTPException) as exc_info:
        await get_current_context(authorization="NotBearer token")

    assert exc_info.value.status_code == 401
    assert "Invalid authorization header format" in exc_info.value.detail


@pytest.mark.asyncio
@pytest.mark.parametrize("token", ["", "has spaces", "semi;colon", "x" * 65])
async def test_get_current_context_invalid_owner_token(token: str) -> None:
    """Test malformed owner ids raise 401."""
    with pytest.raises(HTTPException) as exc_info:
        await get_current_context(authorization=f"Bearer {token}")

    assert exc_info.value.status_code == 401
    assert exc_info.value.headers == {"WWW-Authenticate": "Bearer"}
