"""Error taxonomy for the task board."""

from __future__ import annotations

from typing import Any


class BoardError(Exception):
    """
    Base error carrying a machine-readable code.

    Mirrors the error/message/details triple used across the platform so
    the UI layer can present failures without parsing message strings.
    """

    error: str = "BOARD_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details: dict[str, Any] = details if details is not None else {}


class StoreUnavailable(BoardError):
    """The task store could not be reached or answered unexpectedly."""

    error = "STORE_UNAVAILABLE"


class NotFound(BoardError):
    """A mutation targeted a task that does not exist."""

    error = "TASK_NOT_FOUND"


class DuplicateId(BoardError):
    """A task id was inserted twice into the board state."""

    error = "DUPLICATE_TASK_ID"


class InvalidStage(BoardError, ValueError):
    """A value could not be interpreted as a board stage."""

    error = "INVALID_STAGE"
