"""Users are created on first use; the id comes from the caller (X-User-Id)."""
from sqlalchemy.orm import Session

from prepbuddy.models.user import User


def ensure_user(db: Session, user_id: str, email: str | None = None) -> User:
    """Get or create the user row. A non-empty email overwrites the stored one."""
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        user = User(id=user_id, email=(email or "").strip())
        db.add(user)
        db.commit()
        db.refresh(user)
        return user
    if email and email.strip() and user.email != email.strip():
        user.email = email.strip()
        db.commit()
    return user
