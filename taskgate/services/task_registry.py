"""In-memory task registry.

The registry owns an insertion-ordered list of task records behind a single
re-entrant lock. Every public operation runs inside that lock, so concurrent
callers always observe a consistent collection. Records handed out to callers
are copies; mutations are applied to the stored element.

Identifiers come from a high-water-mark counter rather than from the current
maximum id, so deleting the newest task never lets its id be handed out again.
"""

from __future__ import annotations

import threading
from dataclasses import asdict, dataclass, replace
from typing import Any, Iterable

from taskgate.core.errors import NotFoundAppError, ValidationAppError
from taskgate.utils.safe_counter import SafeCounter


@dataclass
class Task:
    """A uniquely identified task record."""

    id: int
    name: str
    done: bool = False

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


SEED_TASKS: tuple[Task, ...] = (
    Task(id=1, name="GIT", done=True),
    Task(id=2, name="Computer Networks", done=True),
    Task(id=3, name="Databases fundamentals", done=True),
    Task(id=4, name="Go databases", done=True),
    Task(id=5, name="Go testing", done=False),
)


class TaskRegistry:
    """Thread-safe CRUD store for tasks with strictly increasing ids.

    Args:
        seed: Initial records, restored on ``reset()``. Ids must be unique.
            When empty, the first created task gets id 1.
    """

    def __init__(self, seed: Iterable[Task] | None = None) -> None:
        self._seed = tuple(replace(task) for task in (seed or ()))
        seed_ids = [task.id for task in self._seed]
        if len(set(seed_ids)) != len(seed_ids):
            raise ValueError("seed task ids must be unique")

        self._lock = threading.RLock()
        self._tasks: list[Task] = [replace(task) for task in self._seed]
        self._ids = SafeCounter(start=max(seed_ids, default=0))

    def __len__(self) -> int:
        with self._lock:
            return len(self._tasks)

    def __repr__(self) -> str:  # pragma: no cover - representation only
        return f"TaskRegistry(size={len(self)}, last_id={self._ids.value()})"

    def list_tasks(self) -> list[Task]:
        """Return copies of all tasks in insertion order."""

        with self._lock:
            return [replace(task) for task in self._tasks]

    def get(self, task_id: int) -> Task:
        """Return a copy of the task with ``task_id``.

        Raises:
            NotFoundAppError: If no task has that id.
        """

        with self._lock:
            return replace(self._tasks[self._index_of_locked(task_id)])

    def create(self, name: Any, done: Any = False) -> Task:
        """Append a new task and return it.

        Args:
            name: Task name; must be a non-blank string.
            done: Completion flag; must be a bool.

        Returns:
            Copy of the stored task, including its newly allocated id.

        Raises:
            ValidationAppError: If name is missing/blank or done is not a bool.
        """

        if name is None:
            raise ValidationAppError(
                code="missing_field",
                message="Field 'name' is required.",
                details={"field": "name"},
            )
        if not isinstance(name, str) or not name.strip():
            raise ValidationAppError(
                code="invalid_field",
                message="Field 'name' must be a non-empty string.",
                details={"field": "name"},
            )
        if not isinstance(done, bool):
            raise ValidationAppError(
                code="invalid_field",
                message="Field 'done' must be a boolean.",
                details={"field": "done"},
            )

        with self._lock:
            task = Task(id=self._ids.increment(), name=name, done=done)
            self._tasks.append(task)
            return replace(task)

    def mark_done(self, task_id: int) -> Task:
        """Set ``done`` on the stored task and return a copy of it.

        Raises:
            NotFoundAppError: If no task has that id.
        """

        with self._lock:
            task = self._tasks[self._index_of_locked(task_id)]
            task.done = True
            return replace(task)

    def delete(self, task_id: int) -> int:
        """Remove the task with ``task_id`` and return the id.

        Raises:
            NotFoundAppError: If no task has that id.
        """

        with self._lock:
            del self._tasks[self._index_of_locked(task_id)]
            return task_id

    def reset(self) -> None:
        """Drop all tasks and restore the seed records.

        Id allocation is not rewound: the counter started at the highest seed
        id and only grows, so tasks created after a reset never reuse an id
        handed out before it.
        """

        with self._lock:
            self._tasks = [replace(task) for task in self._seed]

    def _index_of_locked(self, task_id: int) -> int:
        for index, task in enumerate(self._tasks):
            if task.id == task_id:
                return index

        raise NotFoundAppError(
            code="task_not_found",
            message=f"Task {task_id} not found.",
            details={"task_id": task_id},
        )
