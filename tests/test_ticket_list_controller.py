"""
Tests for the ticket list controller
"""
import asyncio
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from ticketdesk.controllers.base import ViewState
from ticketdesk.controllers.ticket_list import LOAD_ERROR, TicketListController
from ticketdesk.errors import TransportError
from ticketdesk.models.schemas import TicketListResponse, TicketQuery, TicketStatus
from ticketdesk.utils.validators import validate_ticket_create


class PendingListClient:
    """Client double whose list calls stay pending until resolved by the test"""

    def __init__(self):
        self.calls = []

    async def list_tickets(self, text=None, status=None):
        future = asyncio.get_running_loop().create_future()
        self.calls.append(((text, status), future))
        return await future


def envelope(*tickets) -> TicketListResponse:
    return TicketListResponse(items=list(tickets), total=len(tickets))


class TestMount:

    def test_initial_state_is_loading(self):
        controller = TicketListController(MagicMock())
        assert controller.state == ViewState.LOADING
        assert controller.tickets == []

    @pytest.mark.asyncio
    async def test_mount_loads_tickets(self, client, backend, sample_ticket_data):
        await client.create_ticket(validate_ticket_create(sample_ticket_data))

        controller = TicketListController(client)
        await controller.mount()

        assert controller.state == ViewState.READY
        assert [t.title for t in controller.tickets] == ["Printer jam"]
        assert controller.total == 1
        assert controller.error == ""

    @pytest.mark.asyncio
    async def test_mount_failure(self):
        client = MagicMock()
        client.list_tickets = AsyncMock(side_effect=TransportError("down"))

        controller = TicketListController(client)
        await controller.mount()

        assert controller.state == ViewState.ERROR
        assert controller.error == LOAD_ERROR

    @pytest.mark.asyncio
    async def test_mount_failure_with_non_string_message(self, make_client):
        client = make_client(lambda request: httpx.Response(503, json={"message": 503}))

        controller = TicketListController(client)
        await controller.mount()

        assert controller.state == ViewState.ERROR
        assert controller.error == LOAD_ERROR
        assert controller.tickets == []

    @pytest.mark.asyncio
    async def test_refresh_after_error_recovers(self, make_ticket):
        client = MagicMock()
        client.list_tickets = AsyncMock(side_effect=[TransportError("down"), envelope(make_ticket())])

        controller = TicketListController(client)
        await controller.mount()
        await controller.refresh()

        assert controller.state == ViewState.READY
        assert controller.error == ""
        assert len(controller.tickets) == 1


class TestFilters:

    @pytest.mark.asyncio
    async def test_filter_change_refetches(self, make_ticket):
        client = MagicMock()
        client.list_tickets = AsyncMock(return_value=envelope(make_ticket()))

        controller = TicketListController(client)
        await controller.mount()
        changed = await controller.set_filters(text="printer", status="CLOSED")

        assert changed is True
        assert client.list_tickets.await_count == 2
        client.list_tickets.assert_awaited_with(text="printer", status=TicketStatus.CLOSED)

    @pytest.mark.asyncio
    async def test_same_filters_do_not_refetch(self, make_ticket):
        client = MagicMock()
        client.list_tickets = AsyncMock(return_value=envelope(make_ticket()))

        controller = TicketListController(client, TicketQuery(text="jam"))
        await controller.mount()
        changed = await controller.set_filters(text="jam")

        assert changed is False
        assert client.list_tickets.await_count == 1

    @pytest.mark.asyncio
    async def test_filters_before_mount_only_recorded(self):
        client = MagicMock()
        client.list_tickets = AsyncMock(return_value=envelope())

        controller = TicketListController(client)
        await controller.set_filters(status=TicketStatus.OPEN)

        client.list_tickets.assert_not_awaited()
        assert controller.query.status == TicketStatus.OPEN

    @pytest.mark.asyncio
    async def test_query_params_drive_filters(self):
        client = MagicMock()
        client.list_tickets = AsyncMock(return_value=envelope())

        controller = TicketListController(client)
        await controller.mount()
        await controller.apply_query_params({"q": "vpn", "status": "IN_PROGRESS"})

        client.list_tickets.assert_awaited_with(text="vpn", status=TicketStatus.IN_PROGRESS)

    @pytest.mark.asyncio
    async def test_clearing_params_removes_constraints(self):
        client = MagicMock()
        client.list_tickets = AsyncMock(return_value=envelope())

        controller = TicketListController(client, TicketQuery(text="vpn"))
        await controller.mount()
        await controller.apply_query_params({})

        client.list_tickets.assert_awaited_with(text=None, status=None)


class TestStaleResponses:
    """Only the latest committed filter may update state"""

    @pytest.mark.asyncio
    async def test_stale_success_is_discarded(self, make_ticket):
        client = PendingListClient()
        controller = TicketListController(client)

        mount = asyncio.create_task(controller.mount())
        await asyncio.sleep(0)
        client.calls[0][1].set_result(envelope())
        await mount

        older = asyncio.create_task(controller.set_filters(text="pr"))
        await asyncio.sleep(0)
        newer = asyncio.create_task(controller.set_filters(text="printer"))
        await asyncio.sleep(0)
        assert [args for args, _ in client.calls[1:]] == [("pr", None), ("printer", None)]

        latest = make_ticket(title="Printer jam")
        client.calls[2][1].set_result(envelope(latest))
        await newer
        assert controller.state == ViewState.READY
        assert controller.tickets == [latest]

        client.calls[1][1].set_result(envelope(make_ticket(title="Projector broken"), latest))
        await older
        assert controller.tickets == [latest]
        assert controller.state == ViewState.READY
        assert controller.generation == 3

    @pytest.mark.asyncio
    async def test_stale_failure_is_discarded(self, make_ticket):
        client = PendingListClient()
        controller = TicketListController(client)
        controller.mounted = True

        older = asyncio.create_task(controller.set_filters(text="a"))
        await asyncio.sleep(0)
        newer = asyncio.create_task(controller.set_filters(text="ab"))
        await asyncio.sleep(0)

        client.calls[1][1].set_result(envelope(make_ticket()))
        await newer
        client.calls[0][1].set_exception(TransportError("late failure"))
        await older

        assert controller.state == ViewState.READY
        assert controller.error == ""

    @pytest.mark.asyncio
    async def test_stays_loading_while_latest_is_pending(self, make_ticket):
        client = PendingListClient()
        controller = TicketListController(client)
        controller.mounted = True

        older = asyncio.create_task(controller.set_filters(text="a"))
        await asyncio.sleep(0)
        newer = asyncio.create_task(controller.set_filters(text="ab"))
        await asyncio.sleep(0)

        client.calls[0][1].set_result(envelope(make_ticket()))
        await older
        assert controller.state == ViewState.LOADING
        assert controller.tickets == []

        client.calls[1][1].set_result(envelope())
        await newer
        assert controller.state == ViewState.READY
