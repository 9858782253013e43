"""Tests for the month calendar grid."""
from datetime import date, datetime

import pytest

from prepbuddy.core.errors import ValidationError
from prepbuddy.models.task import Task
from prepbuddy.services.tracker.calendar_view import day_status, grid_dates, month_view


def test_grid_is_42_cells_starting_sunday():
    cells = grid_dates(2024, 2)  # Feb 1 2024 is a Thursday
    assert len(cells) == 42
    assert cells[0] == (date(2024, 1, 28), False)
    assert cells[4] == (date(2024, 2, 1), True)
    assert all(d.weekday() == 6 for d, _ in cells[::7])
    assert sum(1 for _, in_month in cells if in_month) == 29


def test_month_starting_on_sunday_has_no_leading_days():
    cells = grid_dates(2024, 9)
    assert cells[0] == (date(2024, 9, 1), True)


def test_bad_month():
    with pytest.raises(ValidationError):
        grid_dates(2024, 13)


@pytest.mark.parametrize(
    "total, completed, status",
    [(0, 0, "empty"), (3, 3, "complete"), (3, 1, "partial"), (2, 0, "incomplete")],
)
def test_day_status(total, completed, status):
    assert day_status(total, completed) == status


def test_month_view_counts_tasks_by_created_date(db):
    db.add_all(
        [
            Task(user_id="u", title="a", day=1, completed=True, created_at=datetime(2024, 3, 5, 9)),
            Task(user_id="u", title="b", day=1, completed=False, created_at=datetime(2024, 3, 5, 18)),
            Task(user_id="u", title="c", day=2, completed=True, created_at=datetime(2024, 3, 6, 9)),
            Task(user_id="other", title="d", day=1, completed=True, created_at=datetime(2024, 3, 6, 9)),
        ]
    )
    db.commit()

    view = month_view(db, "u", 2024, 3, today=date(2024, 3, 6))
    by_date = {d["date"]: d for d in view["days"]}

    assert view["label"] == "March 2024"
    assert by_date["2024-03-05"]["status"] == "partial"
    assert (by_date["2024-03-05"]["total"], by_date["2024-03-05"]["completed"]) == (2, 1)
    assert by_date["2024-03-06"]["status"] == "complete"
    assert by_date["2024-03-06"]["is_today"] is True
    assert by_date["2024-03-07"]["status"] == "empty"


@pytest.mark.asyncio
async def test_calendar_endpoint(client):
    resp = await client.get("/tracker/calendar", params={"year": 2024, "month": 2})
    assert resp.status_code == 200
    assert len(resp.json()["days"]) == 42
    resp = await client.get("/tracker/calendar", params={"year": 2024, "month": 0})
    assert resp.status_code == 400
