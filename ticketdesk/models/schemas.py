"""
Pydantic models for the TicketDesk client

Wire format is camelCase JSON (``createdAt``, ``ticketId``); Python attributes
are snake_case. Identifiers arrive as ``_id`` from the backend, ``id`` is
accepted as well. Models accept either spelling on input.
"""
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


# ============================================================================
# Enums
# ============================================================================

class Priority(str, Enum):
    """Ticket priorities"""
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class TicketStatus(str, Enum):
    """Ticket lifecycle statuses"""
    OPEN = "OPEN"
    IN_PROGRESS = "IN_PROGRESS"
    CLOSED = "CLOSED"


class WireModel(BaseModel):
    """Base for every model that crosses the wire"""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True
    )

    def to_payload(self) -> Dict[str, Any]:
        """Serialize to a JSON-ready dict using wire names"""
        return self.model_dump(mode="json", by_alias=True)


# ============================================================================
# Records
# ============================================================================

class Ticket(WireModel):
    """
    A tracked support issue.

    Attributes:
        id: Server-assigned identifier (immutable)
        title: Short summary
        description: Free-form description
        priority: LOW / MEDIUM / HIGH
        status: OPEN / IN_PROGRESS / CLOSED
        reporter: Who reported the issue
        created_at: Creation timestamp (server-assigned)
        updated_at: Last update timestamp (server-assigned)
    """
    id: str = Field(..., validation_alias=AliasChoices("_id", "id"))
    title: str
    description: str
    priority: Priority
    status: TicketStatus
    reporter: str
    created_at: datetime
    updated_at: datetime


class Comment(WireModel):
    """An append-only note attached to one ticket"""
    id: str = Field(..., validation_alias=AliasChoices("_id", "id"))
    author: str
    body: str
    ticket_id: str
    created_at: datetime


class TicketListResponse(WireModel):
    """
    List envelope returned by ``GET /tickets``.

    ``total`` comes from the server as-is; it may exceed ``len(items)`` once
    the backend paginates.
    """
    items: List[Ticket] = Field(default_factory=list)
    total: int = Field(..., ge=0)


# ============================================================================
# Request payloads
# ============================================================================

class TicketCreate(WireModel):
    """Payload for ``POST /tickets``; status and timestamps are server-side"""
    title: str
    description: str
    priority: Priority
    reporter: str


class TicketUpdate(WireModel):
    """
    Partial patch for ``PATCH /tickets/{id}``.

    A field left out means "leave unchanged". Only fields that were set to a
    value are serialized, so a patch never clears anything.
    """
    title: Optional[str] = None
    description: Optional[str] = None
    priority: Optional[Priority] = None
    status: Optional[TicketStatus] = None
    reporter: Optional[str] = None

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(
            mode="json",
            by_alias=True,
            exclude_unset=True,
            exclude_none=True
        )


class CommentCreate(WireModel):
    """Payload for ``POST /tickets/{id}/comments``"""
    author: str
    body: str


class TicketQuery(BaseModel):
    """
    Optional list filters, combined with AND on the server.

    ``text`` is sent as ``q`` and interpreted by the backend; the client does
    not filter locally.
    """
    model_config = ConfigDict(frozen=True)

    text: Optional[str] = None
    status: Optional[TicketStatus] = None

    @classmethod
    def from_params(cls, params: Mapping[str, Any]) -> "TicketQuery":
        """Build filters from navigational query parameters (``q``, ``status``)"""
        text = params.get("q") or None
        status = params.get("status") or None
        if status not in TicketStatus._value2member_map_:
            status = None
        return cls(text=text, status=status)

    def to_params(self) -> Dict[str, str]:
        """Query string parameters, empty filters omitted"""
        params: Dict[str, str] = {}
        if self.text:
            params["q"] = self.text
        if self.status:
            params["status"] = self.status.value
        return params


# ============================================================================
# Error Models
# ============================================================================

class ErrorResponse(BaseModel):
    """Error body returned by the backend"""
    model_config = ConfigDict(extra="allow")

    error: Optional[Any] = None
    message: Optional[Any] = None
    detail: Optional[Any] = None

    @property
    def text(self) -> Optional[str]:
        """First human-readable message found in the body"""
        for candidate in (self.error, self.message, self.detail):
            if isinstance(candidate, str) and candidate:
                return candidate
        return None
