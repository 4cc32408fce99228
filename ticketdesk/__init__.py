"""
TicketDesk - async client, validation rules and view state for a support ticket API
"""
from ticketdesk.config import ClientConfig, Settings, get_settings
from ticketdesk.services.ticket_api import TicketDeskClient

__version__ = "1.0.0"

__all__ = [
    "ClientConfig",
    "Settings",
    "get_settings",
    "TicketDeskClient",
]
