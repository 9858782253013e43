"""
Month calendar: a 6 x 7 grid (Sunday first) of dates with per-date task counts.
Tasks are placed on the date they were created.

status per date: "complete" (all done), "partial" (some done), "incomplete" (none done), "empty" (no tasks).
"""
import calendar
from collections import defaultdict
from datetime import date, datetime, timedelta, timezone

from sqlalchemy.orm import Session

from prepbuddy.core.constants import CALENDAR_GRID_CELLS
from prepbuddy.core.errors import ValidationError
from prepbuddy.models.task import Task


def grid_dates(year: int, month: int) -> list[tuple[date, bool]]:
    """CALENDAR_GRID_CELLS (date, is_current_month) pairs: trailing days of the previous month, the month, then the next."""
    if not 1 <= month <= 12:
        raise ValidationError("Month must be 1-12")
    first = date(year, month, 1)
    lead = (first.weekday() + 1) % 7  # Monday=0 -> Sunday-first offset
    start = first - timedelta(days=lead)
    return [
        (d, d.month == month and d.year == year)
        for d in (start + timedelta(days=i) for i in range(CALENDAR_GRID_CELLS))
    ]


def day_status(total: int, completed: int) -> str:
    if total == 0:
        return "empty"
    if completed == total:
        return "complete"
    if completed > 0:
        return "partial"
    return "incomplete"


def _created_date(t: Task) -> date | None:
    if not isinstance(t.created_at, datetime):
        return None
    return t.created_at.date()


def month_view(db: Session, user_id: str, year: int, month: int, today: date | None = None) -> dict:
    cells = grid_dates(year, month)
    first, last = cells[0][0], cells[-1][0]
    counts: dict[date, list[int]] = defaultdict(lambda: [0, 0])
    for t in db.query(Task).filter(Task.user_id == user_id).all():
        d = _created_date(t)
        if d is None or d < first or d > last:
            continue
        counts[d][0] += 1
        if t.completed:
            counts[d][1] += 1
    today = today or datetime.now(timezone.utc).date()
    days = []
    for d, in_month in cells:
        total, done = counts.get(d, (0, 0))
        days.append(
            {
                "date": d.isoformat(),
                "is_current_month": in_month,
                "is_today": d == today,
                "total": total,
                "completed": done,
                "status": day_status(total, done),
            }
        )
    return {
        "year": year,
        "month": month,
        "label": f"{calendar.month_name[month]} {year}",
        "days": days,
    }
