"""
Utility functions
"""
from ticketdesk.utils.logger import setup_logger, get_logger, redirect_logs
from ticketdesk.utils.validators import (
    TicketCreateForm,
    CommentCreateForm,
    check_fields,
    validate_ticket_create,
    validate_comment_create,
)

__all__ = [
    "setup_logger",
    "get_logger",
    "redirect_logs",
    "TicketCreateForm",
    "CommentCreateForm",
    "check_fields",
    "validate_ticket_create",
    "validate_comment_create",
]
