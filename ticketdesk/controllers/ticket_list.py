"""
Ticket list screen controller

Re-fetches whenever the committed filter pair (text, status) changes. Every
fetch is tagged with a generation number; only the response of the latest
generation may touch state, so a slow stale response never overwrites the
results of a newer filter.
"""
from typing import Any, List, Mapping, Optional, Union

from ticketdesk.controllers.base import ViewState
from ticketdesk.errors import TicketDeskError
from ticketdesk.models.schemas import Ticket, TicketQuery, TicketStatus
from ticketdesk.services.ticket_api import TicketDeskClient
from ticketdesk.utils.logger import get_logger

logger = get_logger(__name__)

LOAD_ERROR = "Failed to load tickets"


class TicketListController:
    """
    State for the ticket list screen

    Attributes:
        state: LOADING / READY / ERROR
        query: Active filters
        tickets: Tickets of the last accepted response
        total: Server-reported total of the last accepted response
        error: Error text, empty unless state is ERROR
    """

    def __init__(self, client: TicketDeskClient, query: Optional[TicketQuery] = None):
        self.client = client
        self.query = query or TicketQuery()
        self.state = ViewState.LOADING
        self.tickets: List[Ticket] = []
        self.total = 0
        self.error = ""
        self.mounted = False
        self._generation = 0

    @property
    def generation(self) -> int:
        """Number of fetches issued so far"""
        return self._generation

    async def mount(self) -> None:
        """Initial load with the current filters"""
        self.mounted = True
        await self._fetch()

    async def refresh(self) -> None:
        await self._fetch()

    async def set_filters(
        self,
        text: Optional[str] = None,
        status: Optional[Union[TicketStatus, str]] = None
    ) -> bool:
        """
        Commit a new filter pair

        Returns:
            True if the filters changed (and a fetch ran when mounted)
        """
        return await self._apply(TicketQuery(text=text or None, status=status or None))

    async def apply_query_params(self, params: Mapping[str, Any]) -> bool:
        """Commit filters taken from navigational query parameters (q, status)"""
        return await self._apply(TicketQuery.from_params(params))

    async def _apply(self, query: TicketQuery) -> bool:
        if query == self.query:
            return False
        self.query = query
        if self.mounted:
            await self._fetch()
        return True

    async def _fetch(self) -> None:
        self._generation += 1
        generation = self._generation
        query = self.query
        self.state = ViewState.LOADING

        try:
            result = await self.client.list_tickets(text=query.text, status=query.status)
        except TicketDeskError as e:
            if generation != self._generation:
                logger.info(f"Ignoring failure of stale ticket list fetch #{generation}")
                return
            logger.error(f"Failed to load tickets: {e}")
            self.error = LOAD_ERROR
            self.state = ViewState.ERROR
            return

        if generation != self._generation:
            logger.info(f"Discarding stale ticket list response #{generation}")
            return

        self.tickets = result.items
        self.total = result.total
        self.error = ""
        self.state = ViewState.READY
