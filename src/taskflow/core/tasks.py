"""Pure task domain logic - no I/O dependencies."""

import json
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum


class Priority(Enum):
    """Task priority."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Category(Enum):
    """Fixed task categories (closed set)."""

    WORK = "Work"
    PERSONAL = "Personal"
    SHOPPING = "Shopping"


@dataclass
class Task:
    """A to-do item. Only `completed` ever changes after creation."""

    id: str
    title: str
    priority: Priority
    category: Category
    due_date: datetime
    created_at: datetime
    completed: bool = False

    @property
    def due_day(self) -> date:
        """Due date truncated to the calendar day."""
        return self.due_date.date()

    def to_dict(self) -> dict:
        """Serialize to the persisted JSON shape."""
        return {
            "id": self.id,
            "title": self.title,
            "completed": self.completed,
            "priority": self.priority.value,
            "category": self.category.value,
            "dueDate": self.due_date.isoformat(),
            "createdAt": self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Task":
        """
        Create Task from its persisted JSON shape.

        Raises ValueError or KeyError on malformed fields; nothing is coerced.
        """
        if not isinstance(data, dict):
            raise ValueError(f"task entry is not an object: {data!r}")
        title = data["title"]
        if not isinstance(title, str) or not title.strip():
            raise ValueError(f"invalid title: {title!r}")
        completed = data.get("completed", False)
        if not isinstance(completed, bool):
            raise ValueError(f"invalid completed flag: {completed!r}")
        return cls(
            id=str(data["id"]),
            title=title,
            completed=completed,
            priority=Priority(data.get("priority", "medium")),
            category=Category(data["category"]),
            due_date=_parse_timestamp(data["dueDate"]),
            created_at=_parse_timestamp(data["createdAt"]),
        )


def _parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 timestamp into a naive local datetime."""
    if not isinstance(value, str):
        raise ValueError(f"timestamp is not a string: {value!r}")
    # JavaScript-style UTC suffix; fromisoformat only accepts it on 3.11+
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def encode_tasks(tasks: list[Task]) -> str:
    """Serialize the whole collection for the key-value store."""
    return json.dumps([t.to_dict() for t in tasks])


def decode_tasks(raw: str) -> list[Task]:
    """
    Parse a persisted collection.

    Raises ValueError (json.JSONDecodeError included) or KeyError on corrupt data,
    including two entries sharing an id.
    """
    data = json.loads(raw)
    if not isinstance(data, list):
        raise ValueError("persisted task collection is not a list")
    tasks = [Task.from_dict(item) for item in data]
    seen: set[str] = set()
    for task in tasks:
        if task.id in seen:
            raise ValueError(f"duplicate task id: {task.id}")
        seen.add(task.id)
    return tasks


def bootstrap_tasks(now: datetime | None = None) -> list[Task]:
    """First-run example tasks: one per category, mixed priority and completion."""
    now = now or datetime.now()
    return [
        Task(
            id="1",
            title="Review Q1 project proposals",
            priority=Priority.HIGH,
            category=Category.WORK,
            due_date=now,
            created_at=now,
        ),
        Task(
            id="2",
            title="Buy groceries for the week",
            priority=Priority.MEDIUM,
            category=Category.SHOPPING,
            due_date=now,
            created_at=now,
        ),
        Task(
            id="3",
            title="Call mom to check in",
            priority=Priority.LOW,
            category=Category.PERSONAL,
            due_date=now,
            created_at=now,
            completed=True,
        ),
    ]
