"""
Remote services
"""
from ticketdesk.services.ticket_api import TicketDeskClient

__all__ = ["TicketDeskClient"]
