"""
TicketDesk API Client

Typed async access to the ticket REST API:
- Ticket listing with text/status filters
- Ticket fetch, create, partial update, delete
- Per-ticket comment listing and creation

Errors are mapped to NotFoundError, TransportError and, for writes only,
ServerValidationError.
No caching and no retry happens here; retrying is left to the caller.
"""
from typing import Any, List, Optional, Type, TypeVar, Union
from urllib.parse import quote

import httpx
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from ticketdesk.config import ClientConfig
from ticketdesk.errors import NotFoundError, ServerValidationError, TransportError
from ticketdesk.models.schemas import (
    Comment,
    CommentCreate,
    ErrorResponse,
    Ticket,
    TicketCreate,
    TicketListResponse,
    TicketQuery,
    TicketStatus,
    TicketUpdate,
)
from ticketdesk.utils.logger import get_logger

logger = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

VALIDATION_STATUSES = (400, 422)


class TicketDeskClient:
    """
    Ticket API integration

    Each call opens a short-lived ``httpx.AsyncClient`` unless the client is
    used as an async context manager, in which case one connection pool is
    shared until exit.

    Args:
        config: Resolved connection settings
        transport: Optional httpx transport (tests mount a MockTransport here)
    """

    def __init__(
        self,
        config: ClientConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.config = config
        self.base_url = config.base_url
        self.headers = dict(config.headers)
        self.timeout = config.timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self) -> "TicketDeskClient":
        self._client = self._build_client()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    def _build_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            headers=self.headers,
            timeout=self.timeout,
            transport=self._transport
        )

    async def _make_request(
        self,
        method: str,
        endpoint: str,
        allow_validation: bool = False,
        **kwargs
    ) -> Any:
        """
        Make HTTP request and decode the JSON body

        Args:
            method: HTTP method (GET, POST, PATCH, DELETE)
            endpoint: Path below the API base, without leading slash
            allow_validation: Map 400/422 to ServerValidationError (writes only)
            **kwargs: Additional arguments for httpx (params, json)

        Returns:
            Decoded JSON body, or None for an empty body

        Raises:
            NotFoundError: On 404
            ServerValidationError: On 400/422 when ``allow_validation`` is set
            TransportError: On network failure or any other status
        """
        url = f"{self.base_url}/{endpoint}"
        logger.info(f"{method} {url}")

        try:
            if self._client is not None:
                response = await self._client.request(method, url, **kwargs)
            else:
                async with self._build_client() as client:
                    response = await client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"{method} {url} failed: {e}")
            raise TransportError(f"Request to {endpoint} failed: {e}") from e

        return self._handle_response(method, endpoint, response, allow_validation)

    def _handle_response(
        self,
        method: str,
        endpoint: str,
        response: httpx.Response,
        allow_validation: bool = False
    ) -> Any:
        status_code = response.status_code

        if response.is_success:
            if not response.content:
                return None
            try:
                return response.json()
            except ValueError as e:
                logger.error(f"{method} {endpoint} returned invalid JSON")
                raise TransportError(
                    f"Invalid JSON in response from {endpoint}", status_code
                ) from e

        error = self._error_body(response)
        server_message = error.text

        if status_code == 404:
            logger.warning(f"{method} {endpoint} -> 404")
            raise NotFoundError(
                server_message or f"Resource not found: {endpoint}",
                path=endpoint,
                server_message=server_message
            )

        if allow_validation and status_code in VALIDATION_STATUSES:
            logger.warning(f"{method} {endpoint} rejected ({status_code}): {server_message}")
            raise ServerValidationError(
                server_message or "Request rejected by server",
                status_code=status_code,
                errors=self._field_errors(error),
                server_message=server_message
            )

        logger.error(f"{method} {endpoint} -> unexpected status {status_code}")
        raise TransportError(
            server_message or f"Unexpected status {status_code} from {endpoint}",
            status_code,
            server_message=server_message
        )

    @staticmethod
    def _error_body(response: httpx.Response) -> ErrorResponse:
        try:
            body = response.json()
        except ValueError:
            return ErrorResponse()
        if not isinstance(body, dict):
            return ErrorResponse()
        try:
            return ErrorResponse.model_validate(body)
        except PydanticValidationError:
            return ErrorResponse()

    @staticmethod
    def _field_errors(error: ErrorResponse) -> dict:
        errors = (error.model_extra or {}).get("errors")
        if not isinstance(errors, dict):
            return {}
        return {str(k): str(v) for k, v in errors.items()}

    @staticmethod
    def _parse(model: Type[ModelT], data: Any, endpoint: str) -> ModelT:
        try:
            return model.model_validate(data)
        except PydanticValidationError as e:
            logger.error(f"Unexpected {model.__name__} payload from {endpoint}: {e}")
            raise TransportError(f"Unexpected response shape from {endpoint}") from e

    # ------------------------------------------------------------------
    # Tickets
    # ------------------------------------------------------------------

    async def list_tickets(
        self,
        text: Optional[str] = None,
        status: Optional[Union[TicketStatus, str]] = None
    ) -> TicketListResponse:
        """
        List tickets, optionally filtered

        Args:
            text: Free-text filter, sent as ``q`` and matched by the server
            status: Only tickets in this status

        Returns:
            Envelope with items and total
        """
        params = TicketQuery(text=text, status=status).to_params()
        logger.info(f"Listing tickets (filters={params})")
        data = await self._make_request("GET", "tickets", params=params)
        result = self._parse(TicketListResponse, data, "tickets")
        logger.info(f"Fetched {len(result.items)} tickets (total: {result.total})")
        return result

    async def get_ticket(self, ticket_id: str) -> Ticket:
        """
        Get ticket details by ID

        Raises:
            NotFoundError: If the server has no such ticket
        """
        endpoint = f"tickets/{quote(ticket_id, safe='')}"
        data = await self._make_request("GET", endpoint)
        return self._parse(Ticket, data, endpoint)

    async def create_ticket(self, payload: TicketCreate) -> Ticket:
        """
        Create a ticket; the server assigns id, status and timestamps

        Args:
            payload: Validated creation payload

        Returns:
            Created ticket
        """
        logger.info(f"Creating ticket '{payload.title}'")
        data = await self._make_request(
            "POST", "tickets", allow_validation=True, json=payload.to_payload()
        )
        ticket = self._parse(Ticket, data, "tickets")
        logger.info(f"Created ticket {ticket.id}")
        return ticket

    async def update_ticket(self, ticket_id: str, payload: TicketUpdate) -> Ticket:
        """
        Apply a partial update; fields absent from the payload stay unchanged

        Args:
            ticket_id: Ticket ID
            payload: Fields to overwrite

        Returns:
            Updated ticket as stored by the server
        """
        endpoint = f"tickets/{quote(ticket_id, safe='')}"
        body = payload.to_payload()
        logger.info(f"Updating ticket {ticket_id} with {len(body)} fields")
        data = await self._make_request("PATCH", endpoint, allow_validation=True, json=body)
        return self._parse(Ticket, data, endpoint)

    async def delete_ticket(self, ticket_id: str) -> None:
        """Delete a ticket"""
        endpoint = f"tickets/{quote(ticket_id, safe='')}"
        logger.info(f"Deleting ticket {ticket_id}")
        await self._make_request("DELETE", endpoint)

    # ------------------------------------------------------------------
    # Comments
    # ------------------------------------------------------------------

    async def list_comments(self, ticket_id: str) -> List[Comment]:
        """
        Fetch the comments of a ticket in server order

        Raises:
            NotFoundError: If the ticket does not exist
        """
        endpoint = f"tickets/{quote(ticket_id, safe='')}/comments"
        data = await self._make_request("GET", endpoint)
        if not isinstance(data, list):
            raise TransportError(f"Expected a list of comments from {endpoint}")
        comments = [self._parse(Comment, item, endpoint) for item in data]
        logger.info(f"Fetched {len(comments)} comments for ticket {ticket_id}")
        return comments

    async def create_comment(self, ticket_id: str, payload: CommentCreate) -> Comment:
        """
        Add a comment to a ticket

        Args:
            ticket_id: Owning ticket ID
            payload: Validated comment payload

        Returns:
            Created comment
        """
        endpoint = f"tickets/{quote(ticket_id, safe='')}/comments"
        logger.info(f"Adding comment to ticket {ticket_id}")
        data = await self._make_request(
            "POST", endpoint, allow_validation=True, json=payload.to_payload()
        )
        return self._parse(Comment, data, endpoint)
