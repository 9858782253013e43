"""
Tracker API: tasks, categories, day/streak progress, notification settings and the month calendar.

User identified by X-User-Id header or ?user_id= (default 'default').
"""
import logging
from datetime import date
from typing import Any, NoReturn

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel
from sqlalchemy.orm import Session

from prepbuddy.api.deps import get_current_user_id
from prepbuddy.core.errors import PrepBuddyError, service_error_to_http
from prepbuddy.db.session import get_db
from prepbuddy.models.progress import Progress
from prepbuddy.services.tracker import calendar_view, categories, notification_settings, progress, tasks

router = APIRouter()
logger = logging.getLogger(__name__)


def _handle(exc: PrepBuddyError) -> NoReturn:
    raise service_error_to_http(exc) from exc


def _progress_dict(row: Progress) -> dict[str, Any]:
    return {
        "current_day": row.current_day,
        "streak": row.streak,
        "last_completed": row.last_completed.isoformat() if row.last_completed else None,
    }


# --- Tasks ---


class CreateTaskRequest(BaseModel):
    title: str
    day: int | None = None  # defaults to the current day
    description: str | None = None
    category_id: int | None = None
    completed: bool = False


class UpdateTaskRequest(BaseModel):
    title: str | None = None
    description: str | None = None
    category_id: int | None = None
    day: int | None = None
    completed: bool | None = None


@router.get("/tasks")
def get_tasks(
    day: int | None = Query(None, ge=1),
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
) -> dict[str, Any]:
    return {"tasks": [tasks.task_to_dict(t) for t in tasks.list_tasks(db, user_id, day=day)]}


@router.post("/tasks")
def create_task(
    body: CreateTaskRequest,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
) -> dict[str, Any]:
    day = body.day if body.day is not None else progress.get_progress(db, user_id).current_day
    try:
        row = tasks.add_task(
            db,
            user_id,
            title=body.title,
            day=day,
            description=body.description,
            category_id=body.category_id,
            completed=body.completed,
        )
    except PrepBuddyError as e:
        _handle(e)
    return tasks.task_to_dict(row)


@router.patch("/tasks/{task_id}")
def patch_task(
    task_id: int,
    body: UpdateTaskRequest,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
) -> dict[str, Any]:
    try:
        row = tasks.update_task(db, user_id, task_id, **body.model_dump(exclude_none=True))
    except PrepBuddyError as e:
        _handle(e)
    return tasks.task_to_dict(row)


@router.post("/tasks/{task_id}/toggle")
def toggle_task(
    task_id: int,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
) -> dict[str, Any]:
    """Flip completed; returns the task and the (possibly extended) streak."""
    try:
        row = tasks.toggle_complete(db, user_id, task_id)
    except PrepBuddyError as e:
        _handle(e)
    return {"task": tasks.task_to_dict(row), "streak": progress.get_progress(db, user_id).streak}


@router.delete("/tasks/{task_id}")
def remove_task(
    task_id: int,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
) -> dict[str, Any]:
    try:
        tasks.delete_task(db, user_id, task_id)
    except PrepBuddyError as e:
        _handle(e)
    return {"deleted": True, "id": task_id}


# --- Categories ---


class CategoryRequest(BaseModel):
    name: str | None = None
    color: str | None = None


@router.get("/categories")
def get_categories(
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
) -> dict[str, Any]:
    """The user's categories; the defaults are created the first time."""
    return {"categories": [categories.category_to_dict(c) for c in categories.list_categories(db, user_id)]}


@router.post("/categories")
def create_category(
    body: CategoryRequest,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
) -> dict[str, Any]:
    try:
        row = categories.add_category(db, user_id, body.name or "", body.color)
    except PrepBuddyError as e:
        _handle(e)
    return categories.category_to_dict(row)


@router.patch("/categories/{category_id}")
def patch_category(
    category_id: int,
    body: CategoryRequest,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
) -> dict[str, Any]:
    try:
        row = categories.update_category(db, user_id, category_id, name=body.name, color=body.color)
    except PrepBuddyError as e:
        _handle(e)
    return categories.category_to_dict(row)


@router.delete("/categories/{category_id}")
def remove_category(
    category_id: int,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
) -> dict[str, Any]:
    try:
        categories.delete_category(db, user_id, category_id)
    except PrepBuddyError as e:
        _handle(e)
    return {"deleted": True, "id": category_id}


# --- Progress ---


class SetDayRequest(BaseModel):
    day: int


class AdvanceRequest(BaseModel):
    confirm: bool = False


@router.get("/progress")
def get_progress_summary(
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
) -> dict[str, Any]:
    return progress.summary(db, user_id)


@router.put("/progress/day")
def put_current_day(
    body: SetDayRequest,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
) -> dict[str, Any]:
    try:
        row = progress.set_current_day(db, user_id, body.day)
    except PrepBuddyError as e:
        _handle(e)
    return _progress_dict(row)


@router.post("/progress/advance")
def post_advance_day(
    body: AdvanceRequest | None = None,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
) -> dict[str, Any]:
    """
    Next day. 409 when the current day has unfinished tasks and confirm is not true;
    with confirm the streak resets.
    """
    try:
        return progress.advance_day(db, user_id, confirm=bool(body and body.confirm))
    except PrepBuddyError as e:
        _handle(e)


@router.post("/progress/decrement")
def post_decrement_day(
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
) -> dict[str, Any]:
    return _progress_dict(progress.decrement_day(db, user_id))


@router.post("/progress/reset")
def post_reset_progress(
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
) -> dict[str, Any]:
    """Deletes every task; day 1, streak 0."""
    return _progress_dict(progress.reset_progress(db, user_id))


# --- Notification settings ---


class SettingsRequest(BaseModel):
    email_notifications: bool | None = None
    daily_reminders: bool | None = None


@router.get("/settings")
def get_notification_settings(
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
) -> dict[str, bool]:
    return notification_settings.settings_to_dict(notification_settings.get_settings(db, user_id))


@router.put("/settings")
def put_notification_settings(
    body: SettingsRequest,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
) -> dict[str, bool]:
    row = notification_settings.update_settings(
        db,
        user_id,
        email_notifications=body.email_notifications,
        daily_reminders=body.daily_reminders,
    )
    return notification_settings.settings_to_dict(row)


# --- Calendar ---


@router.get("/calendar")
def get_calendar(
    year: int | None = Query(None, ge=1900, le=9998),
    month: int | None = Query(None),
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
) -> dict[str, Any]:
    """Month grid (42 cells, Sunday first). Defaults to the current month."""
    today = date.today()
    try:
        return calendar_view.month_view(db, user_id, year or today.year, month or today.month, today=today)
    except PrepBuddyError as e:
        _handle(e)
