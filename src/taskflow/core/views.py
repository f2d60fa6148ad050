"""Pure view derivation - Today, Upcoming, Lists and Statistics.

Every function here is side-effect free. Callers recompute views after each
store mutation or filter change.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from enum import Enum

from .tasks import Category, Task


class View(Enum):
    """Top-level screens."""

    TODAY = "today"
    UPCOMING = "upcoming"
    LISTS = "lists"
    STATS = "stats"


@dataclass
class FilterState:
    """Transient filter state. Not persisted."""

    active_view: View = View.TODAY
    active_category: Category | None = None

    def switch_view(self, view: View) -> None:
        self.active_view = view

    def select_category(self, category: Category | None) -> Category | None:
        """Toggle the category filter. Selecting the active category clears it."""
        if category is None or category == self.active_category:
            self.active_category = None
        else:
            self.active_category = category
        return self.active_category


def _as_day(as_of: date | datetime | None) -> date:
    if as_of is None:
        return date.today()
    if isinstance(as_of, datetime):
        return as_of.date()
    return as_of


def filter_today(tasks: list[Task], as_of: date | datetime | None = None) -> list[Task]:
    """Tasks due on the same calendar day as `as_of`, any time of day."""
    today = _as_day(as_of)
    return [t for t in tasks if t.due_day == today]


def filter_upcoming(tasks: list[Task], as_of: date | datetime | None = None) -> list[Task]:
    """Tasks due strictly after today. Today and overdue are excluded."""
    today = _as_day(as_of)
    return [t for t in tasks if t.due_day > today]


def filter_by_category(tasks: list[Task], category: Category | None) -> list[Task]:
    """Narrow to one category. None leaves the list unchanged."""
    if category is None:
        return list(tasks)
    return [t for t in tasks if t.category == category]


def visible_tasks(
    tasks: list[Task],
    state: FilterState,
    as_of: date | datetime | None = None,
) -> list[Task]:
    """
    Tasks shown by the active view.

    The category filter only applies to Today and Upcoming; Lists and Stats
    always work on the whole collection.
    """
    if state.active_view == View.TODAY:
        selected = filter_today(tasks, as_of)
    elif state.active_view == View.UPCOMING:
        selected = filter_upcoming(tasks, as_of)
    else:
        return list(tasks)
    return filter_by_category(selected, state.active_category)


def partition_completed(tasks: list[Task]) -> tuple[list[Task], list[Task]]:
    """
    Split into (incomplete, completed), each in store order.

    Incomplete tasks are displayed first.
    """
    incomplete = [t for t in tasks if not t.completed]
    completed = [t for t in tasks if t.completed]
    return incomplete, completed


def category_counts(tasks: list[Task]) -> dict[Category, int]:
    """Open (incomplete) task count per category; every category is present."""
    counts = {category: 0 for category in Category}
    for t in tasks:
        if not t.completed:
            counts[t.category] += 1
    return counts


# ============== Statistics ==============


@dataclass
class CategoryStats:
    """Completion figures for one category."""

    completed: int
    total: int

    @property
    def rate(self) -> float:
        return completion_rate(self.completed, self.total)


@dataclass
class Stats:
    """Aggregate completion statistics. Rates keep fractional precision."""

    total: int
    completed: int
    completion_rate: float
    weekly_total: int
    weekly_completed: int
    weekly_rate: float
    by_category: dict[Category, CategoryStats] = field(default_factory=dict)


def completion_rate(completed: int, total: int) -> float:
    """Percentage of completed tasks, 0.0 for an empty set."""
    if total == 0:
        return 0.0
    return completed / total * 100


def format_rate(rate: float) -> str:
    """Round to a whole percentage for display."""
    return f"{round(rate)}%"


def week_start(as_of: date | datetime | None = None) -> datetime:
    """Midnight of the most recent Sunday (today if today is Sunday)."""
    today = _as_day(as_of)
    # date.weekday() is Monday=0; shift so Sunday=0
    days_since_sunday = (today.weekday() + 1) % 7
    return datetime.combine(today - timedelta(days=days_since_sunday), time.min)


def compute_stats(tasks: list[Task], as_of: date | datetime | None = None) -> Stats:
    """Overall, this-week and per-category completion statistics."""
    total = len(tasks)
    completed = sum(1 for t in tasks if t.completed)

    start = week_start(as_of)
    weekly = [t for t in tasks if t.created_at >= start]
    weekly_completed = sum(1 for t in weekly if t.completed)

    by_category = {}
    for category in Category:
        in_category = [t for t in tasks if t.category == category]
        by_category[category] = CategoryStats(
            completed=sum(1 for t in in_category if t.completed),
            total=len(in_category),
        )

    return Stats(
        total=total,
        completed=completed,
        completion_rate=completion_rate(completed, total),
        weekly_total=len(weekly),
        weekly_completed=weekly_completed,
        weekly_rate=completion_rate(weekly_completed, len(weekly)),
        by_category=by_category,
    )


def format_due_date(due: date | datetime, as_of: date | datetime | None = None) -> str:
    """Human label for a due date: Today, Tomorrow, or e.g. 'Jan 5'."""
    today = _as_day(as_of)
    day = _as_day(due)
    if day == today:
        return "Today"
    if day == today + timedelta(days=1):
        return "Tomorrow"
    return f"{day.strftime('%b')} {day.day}"
