"""
Pytest configuration and fixtures

The ``backend`` fixture is an in-memory stand-in for the ticket REST API,
mounted into the client through ``httpx.MockTransport``. It speaks the same
wire format as the real service (``_id``, camelCase timestamps, ``{"error":
...}`` bodies) and records every request it receives.
"""
import json
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional
from urllib.parse import unquote

import httpx
import pytest

from ticketdesk.config import ClientConfig
from ticketdesk.models.schemas import Priority, Ticket, TicketStatus
from ticketdesk.services.ticket_api import TicketDeskClient

BASE_URL = "http://testserver/api"

PRIORITIES = {p.value for p in Priority}
STATUSES = {s.value for s in TicketStatus}
UPDATABLE_FIELDS = ("title", "description", "priority", "status", "reporter")


class FakeTicketBackend:
    """In-memory ticket API"""

    def __init__(self):
        self.tickets: Dict[str, Dict[str, Any]] = {}
        self.comments: Dict[str, List[Dict[str, Any]]] = {}
        self.requests: List[httpx.Request] = []
        self._clock = datetime(2024, 1, 1, 9, 0, 0, tzinfo=timezone.utc)

    def _now(self) -> str:
        # every write moves time forward so timestamps strictly increase
        self._clock += timedelta(seconds=1)
        return self._clock.isoformat(timespec="milliseconds").replace("+00:00", "Z")

    @staticmethod
    def _reply(status_code: int, body: Any = None) -> httpx.Response:
        if body is None:
            return httpx.Response(status_code)
        return httpx.Response(status_code, json=body)

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.raw_path.decode("ascii").split("?", 1)[0]
        assert path.startswith("/api/"), path
        parts = [unquote(p) for p in path[len("/api/"):].strip("/").split("/")]
        body = json.loads(request.content) if request.content else None

        if parts[0] != "tickets":
            return self._reply(404, {"error": "Not found"})

        if len(parts) == 1:
            if request.method == "GET":
                return self._list(request.url.params)
            if request.method == "POST":
                return self._create(body)

        ticket = self.tickets.get(parts[1]) if len(parts) > 1 else None

        if len(parts) == 2:
            if ticket is None:
                return self._reply(404, {"error": "Ticket not found"})
            if request.method == "GET":
                return self._reply(200, ticket)
            if request.method == "PATCH":
                return self._update(ticket, body)
            if request.method == "DELETE":
                del self.tickets[ticket["_id"]]
                self.comments.pop(ticket["_id"], None)
                return self._reply(204)

        if len(parts) == 3 and parts[2] == "comments":
            if ticket is None:
                return self._reply(404, {"error": "Ticket not found"})
            if request.method == "GET":
                return self._reply(200, self.comments[ticket["_id"]])
            if request.method == "POST":
                return self._comment(ticket, body)

        return self._reply(405, {"error": "Method not allowed"})

    def _list(self, params: httpx.QueryParams) -> httpx.Response:
        items = list(self.tickets.values())
        status = params.get("status")
        text = params.get("q")
        if status:
            items = [t for t in items if t["status"] == status]
        if text:
            needle = text.lower()
            items = [
                t for t in items
                if needle in t["title"].lower() or needle in t["description"].lower()
            ]
        return self._reply(200, {"items": items, "total": len(items)})

    def _create(self, body: Optional[dict]) -> httpx.Response:
        body = body or {}
        for field in ("title", "description", "reporter"):
            if not isinstance(body.get(field), str) or not body[field]:
                return self._reply(400, {"error": f"{field} is required"})
        if body.get("priority") not in PRIORITIES:
            return self._reply(400, {"error": "priority is invalid"})

        now = self._now()
        ticket = {
            "_id": uuid.uuid4().hex,
            "title": body["title"],
            "description": body["description"],
            "priority": body["priority"],
            "status": "OPEN",
            "reporter": body["reporter"],
            "createdAt": now,
            "updatedAt": now,
        }
        self.tickets[ticket["_id"]] = ticket
        self.comments[ticket["_id"]] = []
        return self._reply(201, ticket)

    def _update(self, ticket: dict, body: Optional[dict]) -> httpx.Response:
        body = body or {}
        if "status" in body and body["status"] not in STATUSES:
            return self._reply(400, {"error": "status is invalid"})
        if "priority" in body and body["priority"] not in PRIORITIES:
            return self._reply(400, {"error": "priority is invalid"})
        for field in UPDATABLE_FIELDS:
            if field in body:
                ticket[field] = body[field]
        ticket["updatedAt"] = self._now()
        return self._reply(200, ticket)

    def _comment(self, ticket: dict, body: Optional[dict]) -> httpx.Response:
        body = body or {}
        if not body.get("author") or not body.get("body"):
            return self._reply(400, {"error": "author and body are required"})
        comment = {
            "_id": uuid.uuid4().hex,
            "author": body["author"],
            "body": body["body"],
            "ticketId": ticket["_id"],
            "createdAt": self._now(),
        }
        self.comments[ticket["_id"]].append(comment)
        return self._reply(201, comment)


@pytest.fixture
def backend() -> FakeTicketBackend:
    """Fresh in-memory backend"""
    return FakeTicketBackend()


@pytest.fixture
def client_config() -> ClientConfig:
    return ClientConfig(base_url=BASE_URL, timeout=5.0)


@pytest.fixture
def client(backend, client_config) -> TicketDeskClient:
    """Client wired to the in-memory backend"""
    return TicketDeskClient(client_config, transport=httpx.MockTransport(backend.handle))


@pytest.fixture
def make_client(client_config):
    """Build a client around an arbitrary request handler"""
    def _make(handler) -> TicketDeskClient:
        return TicketDeskClient(client_config, transport=httpx.MockTransport(handler))
    return _make


@pytest.fixture
def sample_ticket_data() -> Dict[str, Any]:
    """Valid ticket form data"""
    return {
        "title": "Printer jam",
        "description": "Paper stuck in tray 2",
        "priority": "HIGH",
        "reporter": "Alice",
    }


@pytest.fixture
def make_ticket():
    """Factory for Ticket records"""
    def _make(**overrides) -> Ticket:
        data = {
            "_id": uuid.uuid4().hex,
            "title": "Printer jam",
            "description": "Paper stuck in tray 2",
            "priority": "HIGH",
            "status": "OPEN",
            "reporter": "Alice",
            "createdAt": "2024-01-01T09:00:00.000Z",
            "updatedAt": "2024-01-01T09:00:00.000Z",
        }
        data.update(overrides)
        return Ticket.model_validate(data)
    return _make
