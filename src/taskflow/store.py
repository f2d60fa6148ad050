"""Task store - the owned, observable task collection."""

import logging
import time
from datetime import datetime
from typing import Callable

from .core.errors import NotFoundError, ValidationError
from .core.tasks import Category, Priority, Task, bootstrap_tasks, decode_tasks, encode_tasks
from .ports import KeyValueStore

logger = logging.getLogger(__name__)

STORAGE_KEY = "taskflow_tasks"


class TaskStore:
    """
    In-memory ordered task collection backed by a KeyValueStore.

    Every successful mutation writes the whole collection back and notifies
    subscribers. Writes are best-effort: a failed write is logged, never raised.
    """

    def __init__(
        self,
        storage: KeyValueStore,
        key: str = STORAGE_KEY,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.storage = storage
        self.key = key
        self._clock = clock
        self._tasks: list[Task] = []
        self._last_id = 0
        self._subscribers: list[Callable[["TaskStore"], None]] = []

    # ============== Persistence ==============

    def load(self) -> list[Task]:
        """
        Load the persisted collection, seeding example tasks on first run.

        Loading never writes back; the seed set is only persisted once the
        user changes something.
        """
        tasks: list[Task] = []
        try:
            raw = self.storage.read(self.key)
        except Exception as e:
            logger.warning(f"Failed to read tasks from storage: {e}")
            raw = None

        if raw:
            try:
                tasks = decode_tasks(raw)
            except (ValueError, KeyError, TypeError) as e:
                logger.warning(f"Ignoring corrupt task collection: {e}")
                tasks = []

        if not tasks:
            logger.info("No saved tasks, seeding example tasks")
            tasks = bootstrap_tasks(self._clock())

        self._tasks = tasks
        self._last_id = max((int(t.id) for t in tasks if t.id.isdigit()), default=0)
        return self.all()

    def _persist(self) -> None:
        try:
            self.storage.write(self.key, encode_tasks(self._tasks))
        except Exception as e:
            logger.warning(f"Failed to save tasks: {e}")

    # ============== Observers ==============

    def subscribe(self, callback: Callable[["TaskStore"], None]) -> Callable[[], None]:
        """Register a change callback. Returns an unsubscribe function."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _changed(self) -> None:
        self._persist()
        for callback in list(self._subscribers):
            callback(self)

    # ============== Queries ==============

    def all(self) -> list[Task]:
        """All tasks in insertion order."""
        return list(self._tasks)

    def get(self, task_id: str) -> Task:
        for task in self._tasks:
            if task.id == task_id:
                return task
        raise NotFoundError(f"No task with id {task_id}")

    # ============== Mutations ==============

    def _next_id(self) -> str:
        """Millisecond clock token, bumped so ids never collide or repeat."""
        token = max(time.time_ns() // 1_000_000, self._last_id + 1)
        self._last_id = token
        return str(token)

    def add(
        self,
        title: str,
        priority: Priority = Priority.MEDIUM,
        category: Category = Category.PERSONAL,
        due_date: datetime | None = None,
    ) -> Task:
        """Create a new open task. Raises ValidationError for a blank title."""
        title = (title or "").strip()
        if not title:
            raise ValidationError("Task title cannot be empty")

        now = self._clock()
        task = Task(
            id=self._next_id(),
            title=title,
            priority=priority,
            category=category,
            due_date=due_date or now,
            created_at=now,
        )
        self._tasks.append(task)
        logger.debug(f"Added task {task.id}: {task.title}")
        self._changed()
        return task

    def toggle(self, task_id: str) -> Task:
        """Flip a task's completed flag."""
        task = self.get(task_id)
        task.completed = not task.completed
        logger.debug(f"Toggled task {task.id} -> completed={task.completed}")
        self._changed()
        return task

    def remove(self, task_id: str) -> Task:
        """Delete a task for good."""
        task = self.get(task_id)
        self._tasks.remove(task)
        logger.debug(f"Removed task {task.id}")
        self._changed()
        return task
