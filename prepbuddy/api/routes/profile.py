"""Profile: display name, bio and avatar, plus tracker stats for the profile page."""
from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.orm import Session

from prepbuddy.api.deps import get_current_user_id
from prepbuddy.db.session import get_db
from prepbuddy.services.profile_service import get_profile, profile_to_dict, update_profile
from prepbuddy.services.tracker.progress import summary

router = APIRouter()


class ProfileUpdateRequest(BaseModel):
    display_name: str | None = None
    bio: str | None = None
    avatar_url: str | None = None


@router.get("")
def read_profile(
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
) -> dict[str, Any]:
    return profile_to_dict(get_profile(db, user_id))


@router.patch("")
def patch_profile(
    body: ProfileUpdateRequest,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
) -> dict[str, Any]:
    """Only fields present in the body change; an explicit null clears one."""
    return profile_to_dict(update_profile(db, user_id, body.model_dump(exclude_unset=True)))


@router.get("/stats")
def profile_stats(
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
) -> dict[str, Any]:
    s = summary(db, user_id)
    return {
        "total_tasks": s["total_tasks"],
        "completed_tasks": s["completed_tasks"],
        "current_day": s["current_day"],
        "streak": s["streak"],
        "completion_rate": s["completion_rate"],
    }
