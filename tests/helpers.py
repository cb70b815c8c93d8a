"""Shared test helpers: an in-memory document store behind httpx.MockTransport."""

from __future__ import annotations

import asyncio
import json
from typing import Any
from urllib.parse import unquote

import httpx

from kanban_board.models import Task

BASE_URL = "http://mock-store:8080"
COLLECTION = "tasks"


class FakeDocumentStore:
    """
    In-memory task collection speaking the document store HTTP API.

    ``offline`` makes every request fail at the connection level;
    ``failing`` does the same only for the listed HTTP methods.
    ``gates`` holds an asyncio.Event per method; requests with a gated
    method are applied at once but their response is held until the
    event is set, like a reply delayed on the wire.
    """

    def __init__(self, collection: str = COLLECTION) -> None:
        self.collection = collection
        self.documents: dict[str, dict[str, Any]] = {}
        self.requests: list[tuple[str, str]] = []
        self.offline = False
        self.failing: set[str] = set()
        self.gates: dict[str, asyncio.Event] = {}
        self._next_id = 1

    @property
    def prefix(self) -> str:
        return f"/collections/{self.collection}/documents"

    def seed(self, doc_id: str, text: str, status: str) -> None:
        self.documents[doc_id] = {"text": text, "status": status}

    def count(self, method: str) -> int:
        return sum(1 for m, _path in self.requests if m == method)

    def as_tasks(self) -> set[tuple[str, str, str]]:
        return {(doc_id, fields["text"], fields["status"]) for doc_id, fields in self.documents.items()}

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    async def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append((request.method, request.url.path))

        if self.offline or request.method in self.failing:
            raise httpx.ConnectError("store offline", request=request)

        response = self._serve(request)

        gate = self.gates.get(request.method)
        if gate is not None:
            await gate.wait()
        return response

    def _serve(self, request: httpx.Request) -> httpx.Response:
        # Route on the path as sent, the way a server sees it before decoding.
        path = request.url.raw_path.decode("ascii").split("?", 1)[0]
        if path == self.prefix:
            if request.method == "GET":
                documents = [
                    {"id": doc_id, "fields": dict(fields)} for doc_id, fields in self.documents.items()
                ]
                return httpx.Response(200, json={"documents": documents})
            if request.method == "POST":
                fields = json.loads(request.content)["fields"]
                doc_id = f"doc-{self._next_id}"
                self._next_id += 1
                self.documents[doc_id] = dict(fields)
                return httpx.Response(201, json={"id": doc_id, "fields": fields})
            return httpx.Response(405, json={"error": "METHOD_NOT_ALLOWED"})

        if path.startswith(f"{self.prefix}/"):
            segment = path[len(self.prefix) + 1 :]
            if "/" in segment:
                return httpx.Response(404, json={"error": "NOT_FOUND"})
            doc_id = unquote(segment)
            if doc_id not in self.documents:
                return httpx.Response(404, json={"error": "NOT_FOUND"})
            if request.method == "PATCH":
                fields = json.loads(request.content)["fields"]
                self.documents[doc_id].update(fields)
                return httpx.Response(200, json={"id": doc_id, "fields": self.documents[doc_id]})
            if request.method == "DELETE":
                del self.documents[doc_id]
                return httpx.Response(204)
            return httpx.Response(405, json={"error": "METHOD_NOT_ALLOWED"})

        return httpx.Response(404, json={"error": "NO_SUCH_COLLECTION"})


def board_tasks(tasks: list[Task]) -> set[tuple[str, str, str]]:
    """Tasks as (id, text, status value) tuples for comparison with the store."""
    return {(task.id, task.text, task.status.value) for task in tasks}
