"""Stage transitions triggered by drop events."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from kanban_board.exceptions import NotFound
from kanban_board.logging import get_logger
from kanban_board.models import Stage, parse_stage

if TYPE_CHECKING:
    from kanban_board.repository import TaskRepository
    from kanban_board.state import BoardState

logger = get_logger(__name__)


@dataclass(frozen=True)
class Transition:
    """
    Outcome of a confirmed move.

    ``from_stage`` is None if the task was not on the board when dropped;
    ``committed`` is False if it had left the board by the time the store
    confirmed, so board state was not touched.
    """

    task_id: str
    from_stage: Stage | None
    to_stage: Stage
    committed: bool = True


class TransitionEngine:
    """
    Applies stage changes with a confirm-then-commit sequence.

    Every stage may move to every stage, itself included. The remote
    update is awaited first; the board state only changes once the store
    has accepted the new status. The engine keeps nothing between calls,
    so two drops of the same card are independent of each other.
    """

    def __init__(self, repository: TaskRepository, state: BoardState) -> None:
        self._repository = repository
        self._state = state

    @staticmethod
    def is_legal(from_stage: Stage, to_stage: Stage) -> bool:
        """Whether a card in ``from_stage`` may be dropped on ``to_stage``. Always true."""
        return True

    @classmethod
    def legal_targets(cls, from_stage: Stage) -> list[Stage]:
        return [stage for stage in Stage if cls.is_legal(from_stage, stage)]

    async def move(self, task_id: str, target_stage: Stage | str) -> Transition:
        """
        Move a task to ``target_stage``.

        Raises:
            InvalidStage: If ``target_stage`` names no stage. Nothing is sent.
            NotFound: If the store has no such task. Board state unchanged.
            StoreUnavailable: If the store update fails. Board state unchanged.
        """
        stage = parse_stage(target_stage)
        current = self._state.get(task_id)
        from_stage = current.status if current is not None else None

        await self._repository.update_status(task_id, stage)

        try:
            self._state.set_status(task_id, stage)
        except NotFound:
            # Removed locally while the update was in flight.
            logger.warning(
                "Task left the board before its move was committed",
                extra={"task_id": task_id, "to_stage": stage.value},
            )
            return Transition(task_id=task_id, from_stage=from_stage, to_stage=stage, committed=False)

        logger.debug(
            "Task moved",
            extra={
                "task_id": task_id,
                "from_stage": from_stage.value if from_stage is not None else None,
                "to_stage": stage.value,
            },
        )
        return Transition(task_id=task_id, from_stage=from_stage, to_stage=stage)
