from __future__ import annotations


class GatewayError(RuntimeError):
    """Raised when a call to the Store Rate API does not succeed."""

    def __init__(self, message: str = "", status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class NetworkError(GatewayError):
    """The request never produced an HTTP response."""


class ServerError(GatewayError):
    """The API answered with a 5xx or an unreadable body."""


class ValidationError(GatewayError):
    """The API rejected the request (bad value, not permitted, unknown store)."""


class NotAuthenticated(RuntimeError):
    """A rating was attempted without a logged-in user."""
