"""
Day and streak bookkeeping.

The Progress row is read and written inside the caller's DB session, so every streak change
reads the persisted value first (no stale client copy). One row per user, created on first read.
"""
import logging
from datetime import datetime, timezone

from sqlalchemy.orm import Session

from prepbuddy.core.errors import ConfirmationRequired, ValidationError
from prepbuddy.core.numbers import percent
from prepbuddy.models.progress import Progress
from prepbuddy.models.task import Task
from prepbuddy.models.user import User
from prepbuddy.services import email_notify
from prepbuddy.services.tracker.notification_settings import get_settings

logger = logging.getLogger(__name__)


def get_progress(db: Session, user_id: str) -> Progress:
    row = db.query(Progress).filter(Progress.user_id == user_id).first()
    if row:
        return row
    row = Progress(user_id=user_id, current_day=1, streak=0, last_completed=datetime.now(timezone.utc))
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


def update_streak(db: Session, user_id: str, completed: bool) -> int:
    """completed: streak + 1; otherwise reset to 0. Returns the new streak."""
    row = get_progress(db, user_id)
    row.streak = (row.streak or 0) + 1 if completed else 0
    row.last_completed = datetime.now(timezone.utc)
    db.commit()
    return row.streak


def completion_rate(db: Session, user_id: str) -> int:
    """round(100 * completed / total) across all of the user's tasks; 0 with no tasks."""
    total = db.query(Task).filter(Task.user_id == user_id).count()
    done = db.query(Task).filter(Task.user_id == user_id, Task.completed.is_(True)).count()
    return percent(done, total)


def summary(db: Session, user_id: str) -> dict:
    row = get_progress(db, user_id)
    total = db.query(Task).filter(Task.user_id == user_id).count()
    done = db.query(Task).filter(Task.user_id == user_id, Task.completed.is_(True)).count()
    return {
        "current_day": row.current_day,
        "streak": row.streak,
        "completion_rate": percent(done, total),
        "total_tasks": total,
        "completed_tasks": done,
        "last_completed": row.last_completed.isoformat() if row.last_completed else None,
    }


def set_current_day(db: Session, user_id: str, day: int) -> Progress:
    if day < 1:
        raise ValidationError("Day must be at least 1")
    row = get_progress(db, user_id)
    row.current_day = day
    db.commit()
    db.refresh(row)
    return row


def decrement_day(db: Session, user_id: str) -> Progress:
    """Go back one day; stays on day 1."""
    row = get_progress(db, user_id)
    if row.current_day > 1:
        row.current_day -= 1
        db.commit()
        db.refresh(row)
    return row


def advance_day(db: Session, user_id: str, confirm: bool = False) -> dict:
    """
    Move to the next day.

    - Current day has tasks, not all complete: needs confirm=True (else ConfirmationRequired); streak resets to 0.
    - Current day has tasks, all complete: streak + 1, and a progress email when email notifications are on.
    - No tasks on the current day: streak untouched.
    Then current_day + 1, and a reminder for the new day when daily reminders are on.
    Emails need an address on the user row; sending never fails the advance.
    """
    row = get_progress(db, user_id)
    day = row.current_day
    day_tasks = db.query(Task).filter(Task.user_id == user_id, Task.day == day).all()
    all_completed = bool(day_tasks) and all(t.completed for t in day_tasks)

    if day_tasks and not all_completed and not confirm:
        raise ConfirmationRequired(
            f"Not all tasks for day {day} are completed. Confirm to move to the next day."
        )

    prefs = get_settings(db, user_id)
    user = db.query(User).filter(User.id == user_id).first()
    email = (user.email or "").strip() if user else ""

    progress_email_sent = False
    if day_tasks and not all_completed:
        update_streak(db, user_id, False)
    elif day_tasks:
        streak = update_streak(db, user_id, True)
        if prefs.email_notifications and email:
            progress_email_sent = email_notify.send_progress_update(
                email, day, completion_rate(db, user_id), streak
            )

    row.current_day = day + 1
    db.commit()
    db.refresh(row)
    logger.info("User %s advanced to day %s (streak=%s)", user_id, row.current_day, row.streak)

    reminder_sent = False
    if prefs.daily_reminders and email:
        reminder_sent = email_notify.send_daily_reminder(email, row.current_day)

    return {
        "current_day": row.current_day,
        "streak": row.streak,
        "progress_email_sent": progress_email_sent,
        "reminder_sent": reminder_sent,
    }


def reset_progress(db: Session, user_id: str) -> Progress:
    """Delete every task, back to day 1 with streak 0."""
    db.query(Task).filter(Task.user_id == user_id).delete(synchronize_session=False)
    row = get_progress(db, user_id)
    row.current_day = 1
    row.streak = 0
    row.last_completed = datetime.now(timezone.utc)
    db.commit()
    db.refresh(row)
    logger.info("Reset progress for user %s", user_id)
    return row
