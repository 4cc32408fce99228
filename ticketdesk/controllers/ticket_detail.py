"""
Ticket detail screen controller
"""
import asyncio
from typing import Any, Dict, List, Mapping, Optional, Union

from ticketdesk.controllers.base import AlertSink, ViewState, log_alert
from ticketdesk.errors import FormValidationError, TicketDeskError
from ticketdesk.models.schemas import Comment, Ticket, TicketStatus, TicketUpdate
from ticketdesk.services.ticket_api import TicketDeskClient
from ticketdesk.utils.logger import get_logger
from ticketdesk.utils.validators import validate_comment_create

logger = get_logger(__name__)

LOAD_ERROR = "Failed to load ticket"
STATUS_UPDATE_ERROR = "Failed to update ticket status"
COMMENT_ERROR = "Failed to add comment"


class TicketDetailController:
    """
    State for one ticket and its comments

    Loading fetches the ticket and its comments concurrently; both must
    succeed. Status changes are not applied optimistically: the held ticket
    is replaced only by the server's response. New comments are appended
    locally without re-fetching the list.

    Args:
        client: API client
        ticket_id: Ticket shown by this screen
        alert: Called with a message when a secondary action fails
    """

    def __init__(
        self,
        client: TicketDeskClient,
        ticket_id: str,
        alert: AlertSink = log_alert
    ):
        self.client = client
        self.ticket_id = ticket_id
        self.alert = alert
        self.state = ViewState.LOADING
        self.ticket: Optional[Ticket] = None
        self.comments: List[Comment] = []
        self.error = ""
        self.updating_status = False
        self.submitting_comment = False
        self.comment_errors: Dict[str, str] = {}

    @property
    def is_ready(self) -> bool:
        return self.state == ViewState.READY and self.ticket is not None

    async def mount(self) -> None:
        """Load ticket and comments"""
        self.state = ViewState.LOADING
        try:
            ticket, comments = await asyncio.gather(
                self.client.get_ticket(self.ticket_id),
                self.client.list_comments(self.ticket_id)
            )
        except TicketDeskError as e:
            logger.error(f"Failed to load ticket {self.ticket_id}: {e}")
            self.error = LOAD_ERROR
            self.state = ViewState.ERROR
            return

        self.ticket = ticket
        self.comments = list(comments)
        self.error = ""
        self.state = ViewState.READY

    async def change_status(self, status: Union[TicketStatus, str]) -> bool:
        """
        Ask the server to move the ticket to a new status

        Unknown statuses are rejected locally without a request or alert.

        Returns:
            True if the server accepted the change
        """
        if not self.is_ready:
            logger.warning(f"Status change ignored, ticket {self.ticket_id} not loaded")
            return False

        try:
            patch = TicketUpdate(status=TicketStatus(status))
        except ValueError:
            logger.warning(f"Status change ignored, unknown status {status!r}")
            return False

        self.updating_status = True
        try:
            updated = await self.client.update_ticket(self.ticket_id, patch)
        except TicketDeskError as e:
            logger.error(f"Failed to update status of ticket {self.ticket_id}: {e}")
            self.alert(STATUS_UPDATE_ERROR)
            return False
        finally:
            self.updating_status = False

        self.ticket = updated
        return True

    async def submit_comment(self, data: Mapping[str, Any]) -> Optional[Comment]:
        """
        Validate and post a comment

        Field errors are stored in ``comment_errors`` and no request is sent.

        Ignored while a previous comment is still being posted.

        Returns:
            The created comment, or None if ignored or if validation or the request failed
        """
        if not self.is_ready:
            logger.warning(f"Comment ignored, ticket {self.ticket_id} not loaded")
            return None
        if self.submitting_comment:
            logger.warning(f"Comment ignored, another one is being posted to {self.ticket_id}")
            return None

        try:
            payload = validate_comment_create(data)
        except FormValidationError as e:
            self.comment_errors = e.errors
            return None
        self.comment_errors = {}

        self.submitting_comment = True
        try:
            comment = await self.client.create_comment(self.ticket_id, payload)
        except TicketDeskError as e:
            logger.error(f"Failed to add comment to ticket {self.ticket_id}: {e}")
            self.alert(COMMENT_ERROR)
            return None
        finally:
            self.submitting_comment = False

        self.comments = [*self.comments, comment]
        return comment
