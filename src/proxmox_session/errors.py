"""Exception types raised by proxmox_session."""
from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional

if TYPE_CHECKING:
    from .session import Session


class ProxmoxError(Exception):
    """Base error for all proxmox_session failures."""


class TransportError(ProxmoxError):
    """Raised when the HTTP request could not be completed."""


class AuthenticationError(ProxmoxError):
    """Raised when the ticket endpoint rejects the credentials.

    ``session`` is the partially-constructed session: its base URL is set,
    its ticket and CSRF token are empty.
    """

    def __init__(self, message: str, status_code: int, session: Optional["Session"] = None):
        super().__init__(message)
        self.status_code = status_code
        self.session = session


class UnsupportedMethodError(ProxmoxError):
    """Raised for HTTP methods other than GET, POST, PUT and DELETE."""

    def __init__(self, method: str):
        super().__init__(f"Unsupported method: {method}")
        self.method = method


class ParseError(ProxmoxError):
    """Raised when a response body is not the expected JSON shape."""


class ApiError(ProxmoxError):
    """Raised when the API answers a request with a non-2xx status."""

    def __init__(self, status_code: int, reason: str, payload: Optional[Any] = None):
        super().__init__(f"{status_code} {reason}")
        self.status_code = status_code
        self.reason = reason
        self.payload = payload


class ConfigurationError(ProxmoxError):
    """Raised when the client configuration is missing or invalid."""
