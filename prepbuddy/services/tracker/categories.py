"""Task categories. New users get DEFAULT_CATEGORIES on first listing."""
import logging

from sqlalchemy.orm import Session

from prepbuddy.core.errors import NotFoundError, ValidationError
from prepbuddy.models.category import Category

logger = logging.getLogger(__name__)

DEFAULT_CATEGORIES: list[tuple[str, str]] = [
    ("DSA", "bg-blue-500"),
    ("Aptitude", "bg-green-500"),
    ("CS Fundamentals", "bg-purple-500"),
    ("Resume", "bg-yellow-500"),
    ("Projects", "bg-pink-500"),
    ("Mock Interviews", "bg-red-500"),
]


def category_to_dict(c: Category) -> dict:
    return {"id": c.id, "name": c.name, "color": c.color}


def list_categories(db: Session, user_id: str) -> list[Category]:
    """Categories in creation order; seeds the defaults when the user has none."""
    rows = (
        db.query(Category)
        .filter(Category.user_id == user_id)
        .order_by(Category.created_at.asc(), Category.id.asc())
        .all()
    )
    if rows:
        return rows
    for name, color in DEFAULT_CATEGORIES:
        db.add(Category(user_id=user_id, name=name, color=color))
    db.commit()
    logger.info("Seeded %s default categories for user %s", len(DEFAULT_CATEGORIES), user_id)
    return (
        db.query(Category)
        .filter(Category.user_id == user_id)
        .order_by(Category.created_at.asc(), Category.id.asc())
        .all()
    )


def get_category(db: Session, user_id: str, category_id: int) -> Category:
    """The caller's category. Raises NotFoundError for unknown ids or another user's row."""
    row = db.query(Category).filter(Category.id == category_id, Category.user_id == user_id).first()
    if not row:
        raise NotFoundError(f"Category {category_id} not found")
    return row


def add_category(db: Session, user_id: str, name: str, color: str | None = None) -> Category:
    name = (name or "").strip()
    if not name:
        raise ValidationError("Category name is required")
    row = Category(user_id=user_id, name=name, color=(color or "").strip() or "bg-blue-500")
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


def update_category(
    db: Session,
    user_id: str,
    category_id: int,
    *,
    name: str | None = None,
    color: str | None = None,
) -> Category:
    row = get_category(db, user_id, category_id)
    if name is not None:
        if not name.strip():
            raise ValidationError("Category name is required")
        row.name = name.strip()
    if color is not None and color.strip():
        row.color = color.strip()
    db.commit()
    db.refresh(row)
    return row


def delete_category(db: Session, user_id: str, category_id: int) -> None:
    """Delete the category. Its tasks stay, uncategorized."""
    row = get_category(db, user_id, category_id)
    db.delete(row)
    db.commit()
