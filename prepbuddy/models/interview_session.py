"""
Mock interview session: questions asked, responses given and the overall score.
questions/responses/code_submissions/performance_metrics are JSON blobs shaped by the frontend.
"""
from sqlalchemy import JSON, Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.sql import func

from prepbuddy.db.base import Base


class InterviewSession(Base):
    __tablename__ = "interview_sessions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(64), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    category = Column(String(64), nullable=False)
    difficulty = Column(String(16), nullable=False)
    interview_type = Column(String(32), nullable=False, server_default="standard")
    platform_focus = Column(String(32), nullable=False, server_default="general")
    questions = Column(JSON, nullable=False, default=list)
    responses = Column(JSON, nullable=False, default=list)
    overall_score = Column(Integer, nullable=True)
    hints_used = Column(Integer, nullable=False, default=0)
    code_submissions = Column(JSON, nullable=False, default=list)
    performance_metrics = Column(JSON, nullable=False, default=dict)
    started_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    completed_at = Column(DateTime(timezone=True), nullable=True, index=True)
