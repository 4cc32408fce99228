"""
Error taxonomy for the TicketDesk client

Hierarchy:
    TicketDeskError
    ├── ValidationError
    │   ├── FormValidationError   (client-side, never sent)
    │   └── ServerValidationError (payload rejected by the server)
    ├── NotFoundError             (404)
    └── TransportError            (network failure or unexpected status)
"""
from typing import Dict, Optional


class TicketDeskError(Exception):
    """
    Base class for every error raised by this package

    Attributes:
        message: Human-readable description
        server_message: Message taken verbatim from the server's error body,
            None when the failure did not come with one
    """

    def __init__(self, message: str, server_message: Optional[str] = None):
        self.message = message
        self.server_message = server_message
        super().__init__(message)

    def to_dict(self) -> dict:
        return {"error": self.__class__.__name__, "message": self.message}


class ValidationError(TicketDeskError):
    """
    Payload failed validation.

    Attributes:
        errors: Field name -> human-readable message
        source: "client" when raised before any request, "server" otherwise
    """

    source = "client"

    def __init__(
        self,
        message: str,
        errors: Optional[Dict[str, str]] = None,
        server_message: Optional[str] = None
    ):
        self.errors = dict(errors or {})
        super().__init__(message, server_message)

    def to_dict(self) -> dict:
        result = super().to_dict()
        result["source"] = self.source
        if self.errors:
            result["errors"] = self.errors
        return result


class FormValidationError(ValidationError):
    """Client-side rule violation; the submission is never attempted"""

    source = "client"

    def __init__(self, errors: Dict[str, str]):
        fields = ", ".join(sorted(errors))
        super().__init__(f"Invalid fields: {fields}", errors)


class ServerValidationError(ValidationError):
    """Server rejected a create or update payload (400/422)"""

    source = "server"

    def __init__(
        self,
        message: str,
        status_code: int = 400,
        errors: Optional[Dict[str, str]] = None,
        server_message: Optional[str] = None
    ):
        self.status_code = status_code
        super().__init__(message, errors, server_message)


class NotFoundError(TicketDeskError):
    """Server reported that the resource does not exist"""

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        server_message: Optional[str] = None
    ):
        self.path = path
        super().__init__(message, server_message)


class TransportError(TicketDeskError):
    """Network failure, timeout, unexpected status or unreadable body"""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        server_message: Optional[str] = None
    ):
        self.status_code = status_code
        super().__init__(message, server_message)
