"""
Ticket-based session for the Proxmox VE API.

A session logs in once against ``/access/ticket``, keeps the returned ticket
and CSRF prevention token, and attaches them to every later request:

- the ticket as the ``PVEAuthCookie`` cookie,
- the CSRF token as a header on POST, PUT and DELETE.

All request parameters travel in the query string, for every method.
"""
from __future__ import annotations

import logging
import warnings
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

import requests
from urllib3.exceptions import InsecureRequestWarning

from .errors import (
    ApiError,
    AuthenticationError,
    ParseError,
    TransportError,
    UnsupportedMethodError,
)

LOG = logging.getLogger("proxmox_session.session")

QueryParams = Dict[str, str]
JSONResponse = Dict[str, Any]

TICKET_PATH = "/access/ticket"
TICKET_COOKIE = "PVEAuthCookie"
CSRF_HEADER = "CSRFPreventionToken"
SUPPORTED_METHODS = ("GET", "POST", "PUT", "DELETE")
CSRF_METHODS = ("POST", "PUT", "DELETE")


@dataclass
class AuthTicket:
    """The auth ticket, sent back to the API as a cookie."""

    name: str = TICKET_COOKIE
    value: str = ""

    def as_cookies(self) -> Dict[str, str]:
        if not self.value:
            return {}
        return {self.name: self.value}


class Session:
    """An authenticated connection to a Proxmox VE API endpoint.

    The transport is injected and never owned: any object exposing the
    ``requests.Session.request`` signature works, and one transport may back
    several sessions. ``verify`` defaults to the transport's own ``verify``
    setting and is passed explicitly with every request.

    Example::

        transport = build_transport(verify_ssl=False)
        session = Session.login(
            transport,
            "https://127.0.0.1:8006/api2/json",
            {"username": "root@pam", "password": "secret"},
        )
        version = session.do("GET", "/version")
    """

    def __init__(
        self,
        transport: Any,
        base_url: str,
        *,
        timeout: Optional[float] = None,
        verify: Optional[Union[bool, str]] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.csrf_token = ""
        self.ticket = AuthTicket()
        self.timeout = timeout
        if verify is None:
            verify = getattr(transport, "verify", True)
        self.verify = verify
        self._transport = transport

    @classmethod
    def login(
        cls,
        transport: Any,
        base_url: str,
        credentials: QueryParams,
        *,
        timeout: Optional[float] = None,
        verify: Optional[Union[bool, str]] = None,
    ) -> "Session":
        """Create a session by posting ``credentials`` to the ticket endpoint.

        Raises:
            TransportError: The request could not be sent or answered.
            AuthenticationError: The endpoint answered with a status other
                than 200. The error carries the unauthenticated session.
            ParseError: The body does not contain a ticket and CSRF token.
        """
        session = cls(transport, base_url, timeout=timeout, verify=verify)
        session._authenticate(credentials)
        return session

    def _authenticate(self, credentials: QueryParams) -> None:
        url = self.base_url + TICKET_PATH
        LOG.debug("Requesting ticket for %s from %s", credentials.get("username"), url)
        response = self._send("POST", url, credentials, {})

        if response.status_code != 200:
            status = f"{response.status_code} {response.reason}"
            LOG.warning("Login to %s failed: %s", self.base_url, status)
            raise AuthenticationError(status, response.status_code, session=self)

        data = self._decode(response).get("data")
        if not isinstance(data, dict):
            raise ParseError(f"Ticket response has no data object: {data!r}")
        ticket = data.get("ticket")
        csrf_token = data.get(CSRF_HEADER)
        if not isinstance(ticket, str) or not isinstance(csrf_token, str) or not ticket or not csrf_token:
            raise ParseError("Ticket response is missing ticket or CSRFPreventionToken")

        self.ticket = AuthTicket(value=ticket)
        self.csrf_token = csrf_token
        LOG.info("Authenticated as %s against %s", data.get("username"), self.base_url)

    @property
    def is_authenticated(self) -> bool:
        return bool(self.ticket.value and self.csrf_token)

    def do(self, method: str, path: str, params: Optional[QueryParams] = None) -> JSONResponse:
        """Perform ``method`` on ``path`` and return the decoded JSON body.

        ``params`` are always sent as query parameters, also for POST, PUT
        and DELETE.
        """
        verb = method.upper()
        if verb not in SUPPORTED_METHODS:
            raise UnsupportedMethodError(verb)

        headers: Dict[str, str] = {}
        if verb in CSRF_METHODS and self.csrf_token:
            headers[CSRF_HEADER] = self.csrf_token

        url = self.base_url + path
        response = self._send(verb, url, params or {}, headers)
        if not 200 <= response.status_code < 300:
            LOG.warning("%s %s returned %s %s", verb, path, response.status_code, response.reason)
            raise ApiError(response.status_code, response.reason, self._payload_or_none(response))
        return self._decode(response)

    def get(self, path: str, params: Optional[QueryParams] = None) -> JSONResponse:
        return self.do("GET", path, params)

    def post(self, path: str, params: Optional[QueryParams] = None) -> JSONResponse:
        return self.do("POST", path, params)

    def put(self, path: str, params: Optional[QueryParams] = None) -> JSONResponse:
        return self.do("PUT", path, params)

    def delete(self, path: str, params: Optional[QueryParams] = None) -> JSONResponse:
        return self.do("DELETE", path, params)

    def _send(
        self,
        method: str,
        url: str,
        params: QueryParams,
        headers: Dict[str, str],
    ) -> requests.Response:
        LOG.debug("%s %s (params=%s)", method, url, sorted(params))
        try:
            with warnings.catch_warnings():
                if self.verify is False:
                    warnings.simplefilter("ignore", InsecureRequestWarning)
                return self._transport.request(
                    method=method,
                    url=url,
                    params=params,
                    headers=headers,
                    cookies=self.ticket.as_cookies(),
                    timeout=self.timeout,
                    verify=self.verify,
                )
        except requests.RequestException as exc:
            raise TransportError(f"{method} {url} failed: {exc}") from exc

    @staticmethod
    def _decode(response: requests.Response) -> JSONResponse:
        try:
            payload = response.json()
        except ValueError as exc:
            raise ParseError(f"Malformed JSON response: {exc}") from exc
        if not isinstance(payload, dict):
            raise ParseError(f"Expected a JSON object, got {type(payload).__name__}")
        return payload

    @staticmethod
    def _payload_or_none(response: requests.Response) -> Optional[Any]:
        try:
            return response.json()
        except ValueError:
            return None

    def __repr__(self) -> str:
        state = "authenticated" if self.is_authenticated else "anonymous"
        return f"Session(base_url={self.base_url!r}, {state})"
