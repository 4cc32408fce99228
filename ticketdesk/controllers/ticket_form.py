"""
Ticket creation form controller
"""
from typing import Any, Dict, Mapping, Optional

from ticketdesk.controllers.base import Navigator, log_navigation, ticket_detail_path
from ticketdesk.errors import FormValidationError, TicketDeskError
from ticketdesk.models.schemas import Priority, Ticket
from ticketdesk.services.ticket_api import TicketDeskClient
from ticketdesk.utils.logger import get_logger
from ticketdesk.utils.validators import validate_ticket_create

logger = get_logger(__name__)

SUBMIT_ERROR = "Failed to create ticket"


def ticket_form_defaults() -> Dict[str, Any]:
    """Initial form values; MEDIUM priority is a form default only"""
    return {
        "title": "",
        "description": "",
        "priority": Priority.MEDIUM.value,
        "reporter": "",
    }


class TicketFormController:
    """
    State for the "create ticket" form

    On success navigates to the new ticket's detail screen. On failure the
    entered values are kept and ``submit_error`` holds the server's message,
    or a generic one when the server did not send any.

    Args:
        client: API client
        navigate: Called with the path of the created ticket
        initial: Values overriding the form defaults
    """

    def __init__(
        self,
        client: TicketDeskClient,
        navigate: Navigator = log_navigation,
        initial: Optional[Mapping[str, Any]] = None
    ):
        self.client = client
        self.navigate = navigate
        self.values = ticket_form_defaults()
        self.values.update(initial or {})
        self.errors: Dict[str, str] = {}
        self.submitting = False
        self.submit_error = ""

    def update(self, **values: Any) -> None:
        """Change form values without submitting"""
        self.values.update(values)

    async def submit(self, data: Optional[Mapping[str, Any]] = None) -> Optional[Ticket]:
        """
        Validate and create the ticket

        Args:
            data: Values merged into the form before validation

        Returns:
            The created ticket, or None on validation or request failure
        """
        if self.submitting:
            return None
        if data:
            self.values.update(data)

        try:
            payload = validate_ticket_create(self.values)
        except FormValidationError as e:
            self.errors = e.errors
            return None
        self.errors = {}

        self.submitting = True
        self.submit_error = ""
        try:
            ticket = await self.client.create_ticket(payload)
        except TicketDeskError as e:
            logger.error(f"Failed to create ticket: {e}")
            self.submit_error = e.server_message or SUBMIT_ERROR
            return None
        finally:
            self.submitting = False

        self.navigate(ticket_detail_path(ticket.id))
        return ticket
