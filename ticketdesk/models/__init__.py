"""
Pydantic models for the TicketDesk client
"""

from ticketdesk.models.schemas import (
    # Enums
    Priority,
    TicketStatus,

    # Records
    Ticket,
    Comment,
    TicketListResponse,

    # Payloads
    TicketCreate,
    TicketUpdate,
    CommentCreate,
    TicketQuery,

    # Errors
    ErrorResponse,
)

__all__ = [
    # Enums
    "Priority",
    "TicketStatus",

    # Records
    "Ticket",
    "Comment",
    "TicketListResponse",

    # Payloads
    "TicketCreate",
    "TicketUpdate",
    "CommentCreate",
    "TicketQuery",

    # Errors
    "ErrorResponse",
]
