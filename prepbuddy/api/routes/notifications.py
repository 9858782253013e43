"""
Email notifications: daily reminder or progress update, sent on request.
Body: { type: daily_reminder | progress_update, email, currentDay, completionRate?, streak? }.
"""
import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from prepbuddy.services import email_notify

router = APIRouter()
logger = logging.getLogger(__name__)

NOTIFICATION_TYPES = ("daily_reminder", "progress_update")


class NotificationRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    type: str | None = None
    email: str | None = None
    current_day: int = Field(1, alias="currentDay")
    completion_rate: int = Field(0, alias="completionRate")
    streak: int = 0


@router.post("")
def send_notification(body: NotificationRequest):
    """Send one email. success is False when SMTP is not configured or the send failed."""
    if not (body.email or "").strip():
        return JSONResponse(status_code=400, content={"error": "Email is required"})
    if body.type not in NOTIFICATION_TYPES:
        return JSONResponse(status_code=400, content={"error": "Invalid notification type"})
    if body.type == "daily_reminder":
        sent = email_notify.send_daily_reminder(body.email, body.current_day)
    else:
        sent = email_notify.send_progress_update(body.email, body.current_day, body.completion_rate, body.streak)
    logger.info("Notification %s to %s: sent=%s", body.type, body.email, sent)
    return {"success": sent}
