"""Notification preferences (email progress updates, daily reminders)."""
from sqlalchemy import Boolean, Column, ForeignKey, Integer, String

from prepbuddy.db.base import Base


class UserSettings(Base):
    __tablename__ = "user_settings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(64), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True, index=True)
    email_notifications = Column(Boolean, nullable=False, default=True)
    daily_reminders = Column(Boolean, nullable=False, default=True)
