"""Task, Stage and drop event types."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum

from kanban_board.exceptions import InvalidStage


class Stage(str, Enum):
    """Board stages in column order. Values are the stored status strings."""

    BACKLOG = "Backlog"
    IN_PROGRESS = "In Progress"
    DONE = "Done"


def _normalize(value: str) -> str:
    return value.replace(" ", "").replace("_", "").replace("-", "").lower()


_STAGE_LOOKUP: dict[str, Stage] = {}
for _stage in Stage:
    _STAGE_LOOKUP[_normalize(_stage.value)] = _stage
    _STAGE_LOOKUP[_normalize(_stage.name)] = _stage


def parse_stage(value: Stage | str) -> Stage:
    """
    Coerce a stage given as member, stored value or member name.

    Accepts "In Progress", "IN_PROGRESS", "in-progress" and "InProgress"
    alike.

    Raises:
        InvalidStage: If the value names no stage.
    """
    if isinstance(value, Stage):
        return value
    if isinstance(value, str):
        stage = _STAGE_LOOKUP.get(_normalize(value.strip()))
        if stage is not None:
            return stage
    raise InvalidStage(
        f"Unknown stage: {value!r}",
        details={"value": str(value), "allowed": [s.value for s in Stage]},
    )


@dataclass(frozen=True)
class Task:
    """A card on the board. Only ``status`` ever changes, by replacement."""

    id: str
    text: str
    status: Stage = Stage.BACKLOG

    def with_status(self, status: Stage) -> Task:
        """Return a copy of this task in another stage."""
        return replace(self, status=status)

    def to_fields(self) -> dict[str, str]:
        """Record fields as written to the task store."""
        return {"text": self.text, "status": self.status.value}


@dataclass(frozen=True)
class DropEvent:
    """Emitted by the drag-and-drop layer when a card lands on a column."""

    dragged_id: str
    dropped_on_stage: Stage | str
