"""
View state controllers, one per screen
"""
from ticketdesk.controllers.base import ViewState, ticket_detail_path
from ticketdesk.controllers.ticket_list import TicketListController
from ticketdesk.controllers.ticket_detail import TicketDetailController
from ticketdesk.controllers.ticket_form import TicketFormController, ticket_form_defaults

__all__ = [
    "ViewState",
    "ticket_detail_path",
    "TicketListController",
    "TicketDetailController",
    "TicketFormController",
    "ticket_form_defaults",
]
