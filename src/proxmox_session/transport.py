"""requests-based HTTP transport shared by one or more sessions."""
from __future__ import annotations

import logging

import requests

LOG = logging.getLogger("proxmox_session.transport")


def build_transport(verify_ssl: bool = True) -> requests.Session:
    """Return a ``requests.Session`` ready to be handed to :class:`Session`.

    TLS verification is configured on the transport, not on the session, so
    several sessions can share (or isolate) the same settings. Sessions read
    ``transport.verify`` and pass it explicitly on every request, so
    ``REQUESTS_CA_BUNDLE`` cannot re-enable verification.
    """
    transport = requests.Session()
    transport.verify = verify_ssl
    transport.headers.update({"Accept": "application/json"})
    if not verify_ssl:
        LOG.debug("TLS certificate verification disabled")
    return transport
