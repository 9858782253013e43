"""Chat history: one row per answered non-streaming message."""
import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from prepbuddy.core.errors import PersistenceError
from prepbuddy.models.chat_history import ChatHistory

logger = logging.getLogger(__name__)


def save_chat_message(db: Session, user_id: str, user_message: str, ai_response: str) -> ChatHistory:
    """Insert one exchange. Raises PersistenceError if the write fails (the session is rolled back)."""
    row = ChatHistory(user_id=user_id, user_message=user_message, ai_response=ai_response)
    try:
        db.add(row)
        db.commit()
        db.refresh(row)
    except SQLAlchemyError as e:
        db.rollback()
        raise PersistenceError(f"Could not save chat history for {user_id}") from e
    return row


def list_chat_history(db: Session, user_id: str, limit: int = 50) -> list[dict]:
    """Most recent exchanges first."""
    rows = (
        db.query(ChatHistory)
        .filter(ChatHistory.user_id == user_id)
        .order_by(ChatHistory.created_at.desc(), ChatHistory.id.desc())
        .limit(limit)
        .all()
    )
    return [
        {
            "id": r.id,
            "user_message": r.user_message,
            "ai_response": r.ai_response,
            "created_at": r.created_at.isoformat() if r.created_at else None,
        }
        for r in rows
    ]
