"""
KanbanBoard: entry points used by the UI layer.

Composes the repository, board state and transition engine. Every
mutating call awaits its remote operation before touching board state.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from kanban_board.logging import get_logger
from kanban_board.models import Stage, Task, parse_stage
from kanban_board.state import BoardState
from kanban_board.transitions import Transition, TransitionEngine

if TYPE_CHECKING:
    from kanban_board.models import DropEvent
    from kanban_board.repository import TaskRepository

logger = get_logger(__name__)


@dataclass(frozen=True)
class BoardEvent:
    """Notification sent to subscribers after a committed change."""

    kind: str
    task_id: str | None = None
    stage: Stage | None = None


BoardListener = Callable[[BoardEvent], None]


class KanbanBoard:
    """
    The task board as seen by the UI.

    Usage::

        async with TaskRepository.from_config(settings.store) as repository:
            board = KanbanBoard(repository)
            await board.startup()
            task = await board.add_task("Write spec")
            await board.drop_task(task.id, Stage.DONE)
    """

    def __init__(self, repository: TaskRepository, state: BoardState | None = None) -> None:
        self._repository = repository
        self._state = state if state is not None else BoardState()
        self._engine = TransitionEngine(repository, self._state)
        self._loading = False
        self._listeners: list[BoardListener] = []

    @property
    def state(self) -> BoardState:
        return self._state

    @property
    def loading(self) -> bool:
        """True while the startup load is in flight."""
        return self._loading

    # ------------------------------------------------------------------
    # Observers
    # ------------------------------------------------------------------

    def subscribe(self, listener: BoardListener) -> Callable[[], None]:
        """Register a change listener. Returns a callable that unregisters it."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _notify(self, event: BoardEvent) -> None:
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception("Board listener failed", extra={"event": event.kind})

    def _set_loading(self, loading: bool) -> None:
        self._loading = loading
        self._notify(BoardEvent(kind="loading"))

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    async def startup(self) -> None:
        """
        Load every task from the store into the board.

        On failure the board is emptied and the error re-raised; calling
        again is the manual reload.
        """
        self._set_loading(True)
        try:
            tasks = await self._repository.load_all()
            self._state.replace_all(tasks)
        except Exception:
            self._state.clear()
            logger.warning("Board load failed, showing empty board")
            raise
        finally:
            self._set_loading(False)
        self._notify(BoardEvent(kind="loaded"))

    async def add_task(self, text: str) -> Task | None:
        """
        Create a task in Backlog.

        Blank text is ignored and returns None without contacting the store.
        """
        if not text.strip():
            logger.debug("Ignoring blank task text")
            return None

        task = await self._repository.create(text, Stage.BACKLOG)
        self._state.insert(task)
        self._notify(BoardEvent(kind="added", task_id=task.id, stage=task.status))
        return task

    async def delete_task(self, task_id: str) -> None:
        """Delete a task from the store, then from the board."""
        await self._repository.delete(task_id)
        if not self._state.remove_by_id(task_id):
            logger.debug("Deleted task was not on the board", extra={"task_id": task_id})
        self._notify(BoardEvent(kind="deleted", task_id=task_id))

    async def drop_task(self, task_id: str, target_stage: Stage | str) -> Transition:
        """Move a task to ``target_stage``. Listeners hear of it only if the board changed."""
        transition = await self._engine.move(task_id, target_stage)
        if transition.committed:
            self._notify(BoardEvent(kind="moved", task_id=task_id, stage=transition.to_stage))
        return transition

    async def handle_drop(self, event: DropEvent) -> Transition:
        """Entry point for the drag-and-drop layer."""
        return await self.drop_task(event.dragged_id, event.dropped_on_stage)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def tasks_for_stage(self, stage: Stage | str) -> list[Task]:
        return self._state.by_stage(parse_stage(stage))

    def columns(self) -> dict[Stage, list[Task]]:
        """Every stage in board order with its tasks."""
        return {stage: self._state.by_stage(stage) for stage in Stage}

    def __repr__(self) -> str:
        return f"KanbanBoard(loading={self._loading}, state={self._state!r})"
