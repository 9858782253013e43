"""User profile: created empty on first read, then display_name/bio/avatar_url updates."""
from datetime import datetime, timezone
from typing import Any

from sqlalchemy.orm import Session

from prepbuddy.models.user_profile import UserProfile

PROFILE_FIELDS = ("display_name", "bio", "avatar_url")


def profile_to_dict(p: UserProfile) -> dict[str, Any]:
    return {
        "user_id": p.user_id,
        "display_name": p.display_name,
        "bio": p.bio,
        "avatar_url": p.avatar_url,
        "created_at": p.created_at.isoformat() if p.created_at else None,
        "updated_at": p.updated_at.isoformat() if p.updated_at else None,
    }


def get_profile(db: Session, user_id: str) -> UserProfile:
    row = db.query(UserProfile).filter(UserProfile.user_id == user_id).first()
    if row:
        return row
    row = UserProfile(user_id=user_id)
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


def update_profile(db: Session, user_id: str, updates: dict[str, Any]) -> UserProfile:
    """Apply only the keys present in `updates` (None clears a field)."""
    row = get_profile(db, user_id)
    for key in PROFILE_FIELDS:
        if key in updates:
            value = updates[key]
            row_value = value.strip() if isinstance(value, str) else value
            setattr(row, key, row_value or None)
    row.updated_at = datetime.now(timezone.utc)
    db.commit()
    db.refresh(row)
    return row
