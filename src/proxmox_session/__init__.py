"""
proxmox-session - a thin ticket-authenticated client for the Proxmox VE API.
"""

from .errors import (
    ApiError,
    AuthenticationError,
    ConfigurationError,
    ParseError,
    ProxmoxError,
    TransportError,
    UnsupportedMethodError,
)
from .session import AuthTicket, JSONResponse, QueryParams, Session
from .transport import build_transport

__version__ = "0.1.0"
__all__ = [
    "ApiError",
    "AuthTicket",
    "AuthenticationError",
    "ConfigurationError",
    "JSONResponse",
    "ParseError",
    "ProxmoxError",
    "QueryParams",
    "Session",
    "TransportError",
    "UnsupportedMethodError",
    "build_transport",
    "main",
]


def __getattr__(name):
    """Lazily expose the CLI so importing the library does not pull in argparse setup."""
    if name == "main":
        from .cli import main

        return main
    raise AttributeError(f"module 'proxmox_session' has no attribute {name!r}")
