"""Kanban Sync: task board state kept in step with a remote document store."""

from kanban_board.board import BoardEvent, KanbanBoard
from kanban_board.exceptions import (
    BoardError,
    DuplicateId,
    InvalidStage,
    NotFound,
    StoreUnavailable,
)
from kanban_board.models import DropEvent, Stage, Task, parse_stage
from kanban_board.repository import TaskRepository
from kanban_board.state import BoardState
from kanban_board.transitions import Transition, TransitionEngine

__version__ = "0.1.0"

__all__ = [
    "BoardError",
    "BoardEvent",
    "BoardState",
    "DropEvent",
    "DuplicateId",
    "InvalidStage",
    "KanbanBoard",
    "NotFound",
    "Stage",
    "StoreUnavailable",
    "Task",
    "TaskRepository",
    "Transition",
    "TransitionEngine",
    "parse_stage",
]
