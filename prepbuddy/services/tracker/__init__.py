"""
Task/progress tracker: tasks and categories per program day, the current day and the streak
of fully-completed days, notification preferences and the month calendar.
"""
from prepbuddy.services.tracker.calendar_view import month_view
from prepbuddy.services.tracker.categories import list_categories
from prepbuddy.services.tracker.progress import advance_day, completion_rate, get_progress, summary
from prepbuddy.services.tracker.tasks import add_task, list_tasks, toggle_complete

__all__ = [
    "add_task",
    "advance_day",
    "completion_rate",
    "get_progress",
    "list_categories",
    "list_tasks",
    "month_view",
    "summary",
    "toggle_complete",
]
