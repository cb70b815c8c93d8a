"""Entry point: load the board once and print its columns.

Usage::

    KANBAN_CONFIG_PATH=config.yaml python -m kanban_board
"""

from __future__ import annotations

import asyncio
import sys

from kanban_board.board import KanbanBoard
from kanban_board.config import get_settings
from kanban_board.exceptions import StoreUnavailable
from kanban_board.logging import get_logger, setup_logging
from kanban_board.repository import TaskRepository


def render_columns(board: KanbanBoard) -> str:
    """Plain-text listing of every column and its tasks."""
    lines: list[str] = []
    for stage, tasks in board.columns().items():
        lines.append(f"{stage.value} ({len(tasks)})")
        if not tasks:
            lines.append("  (empty)")
        for task in tasks:
            lines.append(f"  [{task.id}] {task.text}")
    return "\n".join(lines)


async def _main() -> int:
    settings = get_settings()
    setup_logging(settings.logging.level, settings.logging.directory)
    logger = get_logger("main")

    logger.info(
        "Loading board",
        extra={"base_url": settings.store.base_url, "collection": settings.store.collection},
    )

    async with TaskRepository.from_config(settings.store) as repository:
        board = KanbanBoard(repository)
        try:
            await board.startup()
        except StoreUnavailable as exc:
            logger.error("Task store unavailable", extra={"error": exc.error, "details": exc.details})
            return 1
        print(render_columns(board))
    return 0


def main() -> None:
    """Sync entry point."""
    sys.exit(asyncio.run(_main()))


if __name__ == "__main__":
    main()
