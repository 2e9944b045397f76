"""HTTP transport wrapper around requests.

Any object with a compatible `send` method can stand in for RequestsTransport.
"""

import requests
from pydantic import BaseModel, ConfigDict


class Request(BaseModel):
    """A transport-ready request. Built fresh for every call."""

    model_config = ConfigDict(frozen=True)

    http_method: str
    uri: str
    headers: dict[str, str] = {}
    body: bytes | str | None = None

    def with_headers(self, headers: dict[str, str]) -> "Request":
        """Return a copy with `headers` merged over the existing ones."""
        merged = dict(self.headers)
        merged.update(headers)
        return self.model_copy(update={"headers": merged})

    def as_tuple(self) -> tuple[str, str, dict[str, str], bytes | str | None]:
        return self.http_method, self.uri, self.headers, self.body


class TransportError(Exception):
    """The request never produced an HTTP response (DNS, connection, timeout)."""


class Response(BaseModel):
    """What the server answered: status, headers and raw body."""

    model_config = ConfigDict(frozen=True)

    status: int
    headers: dict[str, str] = {}
    body: bytes = b""

    def as_tuple(self) -> tuple[int, dict[str, str], bytes]:
        return self.status, self.headers, self.body


class RequestsTransport:
    """Sends requests through a shared requests.Session."""

    def __init__(self, session: requests.Session | None = None, timeout: float = 30.0, user_agent: str | None = None):
        self.session = session or requests.Session()
        self.timeout = timeout
        if user_agent:
            self.session.headers["User-Agent"] = user_agent

    def send(self, http_method: str, uri: str, headers: dict[str, str] | None = None, body: bytes | str | None = None) -> Response:
        """Perform one request; any received status, 2xx or not, is a Response."""
        try:
            resp = self.session.request(
                http_method,
                uri,
                headers=headers or {},
                data=body,
                timeout=self.timeout,
                allow_redirects=True,
            )
        except requests.RequestException as e:
            raise TransportError(f"{http_method} {uri} failed: {e}") from e
        return Response(status=resp.status_code, headers=dict(resp.headers), body=resp.content)
