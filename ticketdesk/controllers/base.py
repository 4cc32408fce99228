"""
Shared pieces for the per-screen view state controllers
"""
from enum import Enum
from typing import Callable

from ticketdesk.utils.logger import get_logger

logger = get_logger(__name__)

# Collaborators supplied by the presentation layer
Navigator = Callable[[str], None]
AlertSink = Callable[[str], None]


class ViewState(str, Enum):
    """Lifecycle of a screen's data"""
    LOADING = "loading"
    READY = "ready"
    ERROR = "error"


def ticket_detail_path(ticket_id: str) -> str:
    return f"/tickets/{ticket_id}"


def log_alert(message: str) -> None:
    """Default alert sink: log instead of interrupting the user"""
    logger.warning(f"Alert: {message}")


def log_navigation(path: str) -> None:
    """Default navigator: record the destination only"""
    logger.info(f"Navigate to {path}")
