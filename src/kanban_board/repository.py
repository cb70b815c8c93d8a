"""Async HTTP repository for task records in the remote document store."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any
from urllib.parse import quote

import httpx

from kanban_board.exceptions import InvalidStage, NotFound, StoreUnavailable
from kanban_board.logging import get_logger
from kanban_board.models import Stage, Task, parse_stage

if TYPE_CHECKING:
    from types import TracebackType

    from kanban_board.config import StoreConfig

logger = get_logger(__name__)


class TaskRepository:
    """
    Translates between Task entities and task store documents.

    The store exposes a keyed collection of documents; each document has
    an ``id`` assigned by the store and a ``fields`` mapping holding
    ``text`` and ``status``. This class owns every remote call made by
    the board and keeps no cache of its own.
    """

    def __init__(
        self,
        base_url: str,
        collection: str,
        timeout_seconds: float,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url
        self._collection = collection
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=httpx.Timeout(timeout_seconds),
            transport=transport,
        )

    @classmethod
    def from_config(
        cls,
        config: StoreConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> TaskRepository:
        """Build a repository from the ``store`` config section."""
        return cls(
            base_url=config.base_url,
            collection=config.collection,
            timeout_seconds=config.timeout_seconds,
            transport=transport,
        )

    @property
    def _documents_path(self) -> str:
        return f"/collections/{self._collection}/documents"

    def _document_path(self, task_id: str) -> str:
        # Every reserved character and dot escaped: an id is always one segment.
        segment = quote(task_id, safe="").replace(".", "%2E")
        return f"{self._documents_path}/{segment}"

    async def load_all(self) -> list[Task]:
        """
        Fetch every task record in the collection.

        Documents with missing fields or an unknown status are skipped.

        Raises:
            StoreUnavailable: If the store cannot be reached or answers badly.
        """
        response = await self._send("GET", self._documents_path)
        self._expect_success(response, "list")

        body = self._json_body(response, "list")
        documents = body.get("documents")
        if not isinstance(documents, list):
            raise self._malformed("list")

        tasks: list[Task] = []
        for document in documents:
            task = self._document_to_task(document)
            if task is not None:
                tasks.append(task)

        logger.info(
            "Loaded tasks from store",
            extra={"count": len(tasks), "skipped": len(documents) - len(tasks)},
        )
        return tasks

    async def create(self, text: str, status: Stage) -> Task:
        """
        Write a new task record and return it with its store-assigned id.

        Raises:
            StoreUnavailable: If the store cannot be reached or answers badly.
        """
        fields = {"text": text, "status": status.value}
        response = await self._send("POST", self._documents_path, json={"fields": fields})
        self._expect_success(response, "create")

        body = self._json_body(response, "create")
        task_id = body.get("id")
        if not isinstance(task_id, str) or not task_id:
            raise self._malformed("create")

        logger.info("Created task", extra={"task_id": task_id, "status": status.value})
        return Task(id=task_id, text=text, status=status)

    async def update_status(self, task_id: str, new_status: Stage) -> None:
        """
        Write the status field of an existing record.

        Raises:
            NotFound: If the store holds no record with this id.
            StoreUnavailable: If the store cannot be reached or answers badly.
        """
        response = await self._send(
            "PATCH",
            self._document_path(task_id),
            json={"fields": {"status": new_status.value}},
        )
        self._expect_success(response, "update", task_id=task_id)
        logger.info("Updated task status", extra={"task_id": task_id, "status": new_status.value})

    async def delete(self, task_id: str) -> None:
        """
        Remove the record keyed by ``task_id``.

        Raises:
            NotFound: If the store holds no record with this id.
            StoreUnavailable: If the store cannot be reached or answers badly.
        """
        response = await self._send("DELETE", self._document_path(task_id))
        self._expect_success(response, "delete", task_id=task_id)
        logger.info("Deleted task", extra={"task_id": task_id})

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> TaskRepository:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    async def _send(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            return await self._client.request(method, path, **kwargs)
        except (httpx.ConnectError, httpx.TimeoutException) as exc:
            logger.warning(
                "Task store connection failed",
                extra={"error": str(exc), "base_url": self._base_url, "method": method},
            )
            raise StoreUnavailable(
                "Cannot connect to task store",
                details={"method": method, "path": path},
            ) from exc
        except httpx.HTTPError as exc:
            logger.warning(
                "Task store HTTP error",
                extra={"error": str(exc), "base_url": self._base_url, "method": method},
            )
            raise StoreUnavailable(
                "Task store request failed",
                details={"method": method, "path": path},
            ) from exc

    def _expect_success(
        self,
        response: httpx.Response,
        operation: str,
        task_id: str | None = None,
    ) -> None:
        if 200 <= response.status_code < 300:
            return

        if response.status_code == 404 and task_id is not None:
            logger.warning(
                "Task not found in store",
                extra={"task_id": task_id, "operation": operation},
            )
            raise NotFound(f"Task {task_id} not found", details={"task_id": task_id})

        logger.warning(
            "Task store unexpected status",
            extra={
                "status_code": response.status_code,
                "operation": operation,
                "base_url": self._base_url,
            },
        )
        raise StoreUnavailable(
            f"Task store returned unexpected status {response.status_code}",
            details={"operation": operation, "status_code": response.status_code},
        )

    def _json_body(self, response: httpx.Response, operation: str) -> dict[str, Any]:
        try:
            body = response.json()
        except ValueError as exc:
            raise self._malformed(operation) from exc
        if not isinstance(body, dict):
            raise self._malformed(operation)
        return body

    def _malformed(self, operation: str) -> StoreUnavailable:
        logger.warning(
            "Task store returned malformed body",
            extra={"operation": operation, "base_url": self._base_url},
        )
        return StoreUnavailable(
            "Task store returned malformed response",
            details={"operation": operation},
        )

    @staticmethod
    def _document_to_task(document: Any) -> Task | None:
        if not isinstance(document, dict):
            logger.warning("Skipping non-object document")
            return None

        task_id = document.get("id")
        fields = document.get("fields")
        if not isinstance(task_id, str) or not task_id or not isinstance(fields, dict):
            logger.warning("Skipping document without id or fields", extra={"task_id": task_id})
            return None

        text = fields.get("text")
        if not isinstance(text, str):
            logger.warning("Skipping document without text", extra={"task_id": task_id})
            return None

        try:
            status = parse_stage(fields.get("status", ""))
        except InvalidStage:
            logger.warning(
                "Skipping document with unknown status",
                extra={"task_id": task_id, "status": fields.get("status")},
            )
            return None

        return Task(id=task_id, text=text, status=status)
