"""Unit test fixtures."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from kanban_board.board import KanbanBoard
from kanban_board.config import clear_settings_cache
from kanban_board.repository import TaskRepository
from tests.helpers import BASE_URL, COLLECTION, FakeDocumentStore

if TYPE_CHECKING:
    from collections.abc import AsyncIterator


@pytest.fixture()
def fake_store() -> FakeDocumentStore:
    """Empty in-memory task store."""
    return FakeDocumentStore()


@pytest.fixture()
async def repository(fake_store: FakeDocumentStore) -> AsyncIterator[TaskRepository]:
    """Repository wired to the fake store."""
    repo = TaskRepository(
        base_url=BASE_URL,
        collection=COLLECTION,
        timeout_seconds=5,
        transport=fake_store.transport(),
    )
    yield repo
    await repo.close()


@pytest.fixture()
def board(repository: TaskRepository) -> KanbanBoard:
    """Board on top of the fake-store repository, not yet started."""
    return KanbanBoard(repository)


@pytest.fixture(autouse=True)
def _clear_config_cache() -> None:
    """Clear config cache between tests."""
    clear_settings_cache()
