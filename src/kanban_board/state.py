"""In-memory board state."""

from __future__ import annotations

from typing import TYPE_CHECKING

from kanban_board.exceptions import DuplicateId, NotFound
from kanban_board.models import Stage, Task

if TYPE_CHECKING:
    from collections.abc import Iterable


class BoardState:
    """
    Canonical in-memory set of tasks, partitioned by stage.

    Tasks are kept in insertion order. A status change replaces the task
    in its existing slot, so a card keeps its relative position when it
    returns to a column. No I/O happens here.
    """

    def __init__(self) -> None:
        self._tasks: dict[str, Task] = {}

    def all(self) -> list[Task]:
        """Snapshot of every task in insertion order."""
        return list(self._tasks.values())

    def by_stage(self, stage: Stage) -> list[Task]:
        """Tasks in ``stage``, in insertion order."""
        return [task for task in self._tasks.values() if task.status is stage]

    def counts(self) -> dict[Stage, int]:
        """Number of tasks per stage, every stage present."""
        totals = dict.fromkeys(Stage, 0)
        for task in self._tasks.values():
            totals[task.status] += 1
        return totals

    def get(self, task_id: str) -> Task | None:
        return self._tasks.get(task_id)

    def insert(self, task: Task) -> None:
        """
        Add a task not already present.

        Raises:
            DuplicateId: If a task with the same id exists.
        """
        if task.id in self._tasks:
            raise DuplicateId(f"Task {task.id} already on the board", details={"task_id": task.id})
        self._tasks[task.id] = task

    def remove_by_id(self, task_id: str) -> bool:
        """Remove a task if present. Returns whether one was removed."""
        return self._tasks.pop(task_id, None) is not None

    def set_status(self, task_id: str, new_status: Stage) -> Task:
        """
        Move a task to ``new_status`` in place.

        Raises:
            NotFound: If no task has this id.
        """
        task = self._tasks.get(task_id)
        if task is None:
            raise NotFound(f"Task {task_id} not on the board", details={"task_id": task_id})
        updated = task.with_status(new_status)
        self._tasks[task_id] = updated
        return updated

    def replace_all(self, tasks: Iterable[Task]) -> None:
        """
        Replace the whole board, e.g. after the startup load.

        Raises:
            DuplicateId: If ``tasks`` repeats an id. The board is unchanged.
        """
        seeded: dict[str, Task] = {}
        for task in tasks:
            if task.id in seeded:
                raise DuplicateId(
                    f"Task {task.id} appears twice in load",
                    details={"task_id": task.id},
                )
            seeded[task.id] = task
        self._tasks = seeded

    def clear(self) -> None:
        self._tasks = {}

    def __contains__(self, task_id: object) -> bool:
        return task_id in self._tasks

    def __len__(self) -> int:
        return len(self._tasks)

    def __repr__(self) -> str:
        summary = ", ".join(f"{stage.value}={count}" for stage, count in self.counts().items())
        return f"BoardState({summary})"
