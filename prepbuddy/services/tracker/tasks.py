"""Tracker tasks: CRUD plus toggle, which may extend the streak."""
import logging

from sqlalchemy.orm import Session

from prepbuddy.core.errors import NotFoundError, ValidationError
from prepbuddy.models.task import Task
from prepbuddy.services.tracker.categories import get_category
from prepbuddy.services.tracker.progress import get_progress, update_streak

logger = logging.getLogger(__name__)


def task_to_dict(t: Task) -> dict:
    return {
        "id": t.id,
        "title": t.title,
        "description": t.description,
        "category_id": t.category_id,
        "day": t.day,
        "completed": bool(t.completed),
        "created_at": t.created_at.isoformat() if t.created_at else None,
    }


def list_tasks(db: Session, user_id: str, day: int | None = None) -> list[Task]:
    q = db.query(Task).filter(Task.user_id == user_id)
    if day is not None:
        q = q.filter(Task.day == day)
    return q.order_by(Task.created_at.asc(), Task.id.asc()).all()


def _get(db: Session, user_id: str, task_id: int) -> Task:
    row = db.query(Task).filter(Task.id == task_id, Task.user_id == user_id).first()
    if not row:
        raise NotFoundError(f"Task {task_id} not found")
    return row


def add_task(
    db: Session,
    user_id: str,
    *,
    title: str,
    day: int,
    description: str | None = None,
    category_id: int | None = None,
    completed: bool = False,
) -> Task:
    """Insert a task. Adding one already completed counts toward the streak."""
    title = (title or "").strip()
    if not title:
        raise ValidationError("Task title is required")
    if day < 1:
        raise ValidationError("Day must be at least 1")
    if category_id is not None:
        get_category(db, user_id, category_id)
    row = Task(
        user_id=user_id,
        title=title,
        description=description,
        category_id=category_id,
        day=day,
        completed=completed,
    )
    db.add(row)
    db.commit()
    db.refresh(row)
    if completed:
        update_streak(db, user_id, True)
    return row


def update_task(db: Session, user_id: str, task_id: int, **fields) -> Task:
    """Update any of title, description, category_id, day, completed. None values are ignored."""
    row = _get(db, user_id, task_id)
    changes = {
        key: fields[key]
        for key in ("title", "description", "category_id", "day", "completed")
        if fields.get(key) is not None
    }
    if "title" in changes:
        changes["title"] = changes["title"].strip()
        if not changes["title"]:
            raise ValidationError("Task title is required")
    if changes.get("day", 1) < 1:
        raise ValidationError("Day must be at least 1")
    if "category_id" in changes:
        get_category(db, user_id, changes["category_id"])
    for key, value in changes.items():
        setattr(row, key, value)
    db.commit()
    db.refresh(row)
    return row


def delete_task(db: Session, user_id: str, task_id: int) -> None:
    row = _get(db, user_id, task_id)
    db.delete(row)
    db.commit()


def toggle_complete(db: Session, user_id: str, task_id: int) -> Task:
    """
    Flip completed. If the task is on the current day and that day is now fully complete,
    the streak goes up by one.
    """
    row = _get(db, user_id, task_id)
    row.completed = not row.completed
    db.commit()
    db.refresh(row)

    progress = get_progress(db, user_id)
    if row.day == progress.current_day:
        day_tasks = list_tasks(db, user_id, day=row.day)
        if day_tasks and all(t.completed for t in day_tasks):
            streak = update_streak(db, user_id, True)
            logger.info("Day %s complete for user %s; streak now %s", row.day, user_id, streak)
    return row
