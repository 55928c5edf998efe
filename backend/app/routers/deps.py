"""Shared dependencies: caller identity and job authorisation"""
import secrets
from typing import Optional
from fastapi import Header, HTTPException

from app.core.config import settings


async def require_user_id(
    x_user_id: Optional[str] = Header(default=None),
) -> int:
    """Caller's user id, set by the upstream auth gateway. 401 if absent."""
    if not x_user_id:
        raise HTTPException(status_code=401, detail="Authentication required")
    try:
        user_id = int(x_user_id)
    except ValueError:
        raise HTTPException(status_code=401, detail="Authentication required")
    if user_id <= 0:
        raise HTTPException(status_code=401, detail="Authentication required")
    return user_id


async def require_cron_secret(
    x_cron_secret: Optional[str] = Header(default=None),
) -> None:
    """Job trigger guard. Disabled (always 401) while CRON_SECRET is unset."""
    expected = settings.CRON_SECRET
    if not expected or not x_cron_secret or not secrets.compare_digest(x_cron_secret, expected):
        raise HTTPException(status_code=401, detail="Unauthorized")
