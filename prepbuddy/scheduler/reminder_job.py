"""
Daily reminder: once a day, email every user who has daily reminders on (and an email address)
a reminder for their current program day.
"""
import logging
from typing import Callable

from sqlalchemy.orm import Session

from prepbuddy.db.session import SessionLocal
from prepbuddy.models.progress import Progress
from prepbuddy.models.user import User
from prepbuddy.models.user_settings import UserSettings
from prepbuddy.services import email_notify

logger = logging.getLogger(__name__)


def _recipients(db: Session) -> list[tuple[str, str, int]]:
    """(user_id, email, current_day) for everyone opted in. Users with no settings row default to on."""
    rows = (
        db.query(User, UserSettings, Progress)
        .outerjoin(UserSettings, UserSettings.user_id == User.id)
        .outerjoin(Progress, Progress.user_id == User.id)
        .filter(User.email != "")
        .all()
    )
    out = []
    for user, prefs, progress in rows:
        if prefs is not None and not prefs.daily_reminders:
            continue
        out.append((user.id, user.email, progress.current_day if progress else 1))
    return out


def run_daily_reminder_job(session_factory: Callable[[], Session] = SessionLocal) -> int:
    """Send the reminders. Returns how many were sent."""
    db = session_factory()
    try:
        recipients = _recipients(db)
    finally:
        db.close()
    sent = 0
    for user_id, email, day in recipients:
        if email_notify.send_daily_reminder(email, day):
            sent += 1
        else:
            logger.debug("Daily reminder not sent to user %s", user_id)
    logger.info("Daily reminder job: %s/%s sent", sent, len(recipients))
    return sent
