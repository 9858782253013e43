"""User row: the caller's id comes from the auth layer in front of the API (X-User-Id)."""
from sqlalchemy import Column, DateTime, String
from sqlalchemy.sql import func

from prepbuddy.db.base import Base


class User(Base):
    __tablename__ = "users"

    id = Column(String(64), primary_key=True)
    email = Column(String(256), nullable=False, server_default="")
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
