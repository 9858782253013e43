"""Per-user progress: current program day and streak of fully-completed days."""
from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.sql import func

from prepbuddy.db.base import Base


class Progress(Base):
    __tablename__ = "progress"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(64), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True, index=True)
    current_day = Column(Integer, nullable=False, default=1)
    streak = Column(Integer, nullable=False, default=0)
    last_completed = Column(DateTime(timezone=True), server_default=func.now(), nullable=True)
