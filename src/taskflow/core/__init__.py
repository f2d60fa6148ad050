"""Functional core - pure business logic with no I/O."""

from .errors import NotFoundError, SoftApiError, TaskFlowError, TransportError, ValidationError
from .tasks import Category, Priority, Task, bootstrap_tasks, decode_tasks, encode_tasks
from .views import (
    FilterState,
    Stats,
    View,
    category_counts,
    compute_stats,
    filter_today,
    filter_upcoming,
    partition_completed,
    visible_tasks,
)
from .chat import SUGGESTIONS, ChatTurn, Role, parse_envelope

__all__ = [
    # Errors
    "TaskFlowError",
    "ValidationError",
    "NotFoundError",
    "TransportError",
    "SoftApiError",
    # Tasks
    "Task",
    "Priority",
    "Category",
    "bootstrap_tasks",
    "encode_tasks",
    "decode_tasks",
    # Views
    "View",
    "FilterState",
    "Stats",
    "filter_today",
    "filter_upcoming",
    "visible_tasks",
    "partition_completed",
    "category_counts",
    "compute_stats",
    # Chat
    "ChatTurn",
    "Role",
    "SUGGESTIONS",
    "parse_envelope",
]
