"""Per-user notification preferences, created with both switches on at first read."""
from sqlalchemy.orm import Session

from prepbuddy.models.user_settings import UserSettings


def settings_to_dict(s: UserSettings) -> dict:
    return {
        "email_notifications": bool(s.email_notifications),
        "daily_reminders": bool(s.daily_reminders),
    }


def get_settings(db: Session, user_id: str) -> UserSettings:
    row = db.query(UserSettings).filter(UserSettings.user_id == user_id).first()
    if row:
        return row
    row = UserSettings(user_id=user_id, email_notifications=True, daily_reminders=True)
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


def update_settings(
    db: Session,
    user_id: str,
    *,
    email_notifications: bool | None = None,
    daily_reminders: bool | None = None,
) -> UserSettings:
    row = get_settings(db, user_id)
    if email_notifications is not None:
        row.email_notifications = email_notifications
    if daily_reminders is not None:
        row.daily_reminders = daily_reminders
    db.commit()
    db.refresh(row)
    return row
