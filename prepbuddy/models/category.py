"""Task category (DSA, Aptitude, ...). color is a CSS utility class kept for the frontend."""
from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.sql import func

from prepbuddy.db.base import Base


class Category(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(64), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(128), nullable=False)
    color = Column(String(64), nullable=False, server_default="bg-blue-500")
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
