"""
Shared route dependencies.

Caller identity comes from the auth layer in front of the API as the X-User-Id header
(or ?user_id=), default 'default'. The user row is created on first use.
"""
from fastapi import Depends, Header, Query
from sqlalchemy.orm import Session

from prepbuddy.config import settings
from prepbuddy.core.constants import DEFAULT_USER_ID
from prepbuddy.db.session import get_db
from prepbuddy.services.ai.registry import provider_chain
from prepbuddy.services.ai.relay import ChatRelay
from prepbuddy.services.user_service import ensure_user


def get_user_id(
    x_user_id: str | None = Header(None, alias="X-User-Id"),
    user_id: str | None = Query(None),
) -> str:
    return (x_user_id or user_id or DEFAULT_USER_ID).strip() or DEFAULT_USER_ID


def get_current_user_id(
    db: Session = Depends(get_db),
    user_id: str = Depends(get_user_id),
    x_user_email: str | None = Header(None, alias="X-User-Email"),
) -> str:
    """get_user_id, plus the users row (email from X-User-Email when given)."""
    ensure_user(db, user_id, x_user_email)
    return user_id


def get_relay() -> ChatRelay:
    return ChatRelay(provider_chain(), word_delay=settings.fallback_word_delay_seconds)
