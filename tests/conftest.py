import json
from typing import Any, Dict, List, Optional, Tuple

import pytest
import requests

BASE_URL = "https://localhost:8006/api2/json"
TICKET = (
    "PVE:root@pam:5FDFEFAA::VOz9e34ULtm1h+Sv3ZrP+Cp1vn99bQvLFJT61JxKf9tSsZcPli76YICIK1xKnQLT2d/"
    "FnhY8XBgU4owTXFuCN22BxzqGAkEz2V0Q0eJt18hPLHy1MkLYj4IxCL6pkPmfzDNZzIe4cn1ShjwWGzpYS3JjNdSHiVh3n8tis"
)
CSRF_TOKEN = "5FDFEFAA:F4MJATbjo6mYMtlPx3vko043K+kijnVpU7tTbGX2Bm8"
TICKET_BODY = {
    "data": {
        "ticket": TICKET,
        "username": "root@pam",
        "cap": {"vms": {"VM.Audit": 1}, "nodes": {"Sys.Audit": 1}},
        "CSRFPreventionToken": CSRF_TOKEN,
    }
}

_REASONS = {200: "OK", 400: "Bad Request", 401: "Unauthorized", 500: "Internal Server Error"}


def make_response(status: int, body: Any, url: str = BASE_URL) -> requests.Response:
    response = requests.Response()
    response.status_code = status
    response.reason = _REASONS.get(status, "")
    response.url = url
    response.headers["Content-Type"] = "application/json"
    raw = body if isinstance(body, str) else json.dumps(body)
    response._content = raw.encode("utf-8")
    response.encoding = "utf-8"
    return response


class _FakeTransport:
    """Stands in for requests.Session; unknown (method, url) pairs fail like a dead host."""

    def __init__(self) -> None:
        self._responders: Dict[Tuple[str, str], Tuple[int, Any]] = {}
        self.calls: List[Dict[str, Any]] = []

    def register(self, method: str, url: str, status: int, body: Any) -> None:
        self._responders[(method, url)] = (status, body)

    def request(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        self.calls.append({"method": method, "url": url, **kwargs})
        try:
            status, body = self._responders[(method, url)]
        except KeyError:
            raise requests.ConnectionError(f"no responder for {method} {url}")
        return make_response(status, body, url)

    @property
    def last_call(self) -> Optional[Dict[str, Any]]:
        return self.calls[-1] if self.calls else None


@pytest.fixture
def transport():
    return _FakeTransport()


@pytest.fixture
def login_transport(transport):
    transport.register("POST", BASE_URL + "/access/ticket", 200, TICKET_BODY)
    return transport
