"""Execution layer: sends generated requests and wraps what comes back."""

import json
import logging

from pydantic import BaseModel, ConfigDict

from api_discovery_client.errors import ClientError, ServerError, TransmissionError
from api_discovery_client.transport import Request, Response, TransportError

logger = logging.getLogger(__name__)


class Result(BaseModel):
    """A request paired with the response the server gave to it."""

    model_config = ConfigDict(frozen=True)

    request: Request
    response: Response

    @property
    def status(self) -> int:
        return self.response.status

    @property
    def headers(self) -> dict[str, str]:
        return self.response.headers

    @property
    def body(self) -> bytes:
        return self.response.body

    @property
    def content_type(self) -> str:
        for name, value in self.response.headers.items():
            if name.lower() == "content-type":
                return value.split(";")[0].strip().lower()
        return ""

    @property
    def is_success(self) -> bool:
        return 200 <= self.status < 300

    @property
    def data(self):
        """The decoded JSON body, or None for non-JSON or empty responses."""
        if not self.body or not self.content_type.endswith("json"):
            return None
        try:
            return json.loads(self.body)
        except ValueError:
            return None

    @property
    def error_message(self) -> str | None:
        """The server's own error message, when it sent a JSON error body."""
        if self.is_success:
            return None
        data = self.data
        if isinstance(data, dict) and isinstance(data.get("error"), dict):
            return data["error"].get("message")
        return None

    def raise_for_status(self) -> "Result":
        """Raise ClientError for 4xx and ServerError for 5xx; otherwise return self."""
        if 400 <= self.status < 500:
            raise ClientError(self._failure_message(), result=self)
        if self.status >= 500:
            raise ServerError(self._failure_message(), result=self)
        return self

    def _failure_message(self) -> str:
        message = f"{self.request.http_method} {self.request.uri} returned {self.status}"
        if self.error_message:
            message += f": {self.error_message}"
        return message


class Executor:
    """Sends requests through a transport with a `send` method."""

    def __init__(self, transport):
        self.transport = transport

    def execute(self, request: Request) -> Result:
        """Send `request`. Any HTTP status yields a Result; only transport failures raise."""
        logger.debug(f"Executing {request.http_method} {request.uri}")
        try:
            response = self.transport.send(request.http_method, request.uri, request.headers, request.body)
        except TransportError as e:
            raise TransmissionError(str(e)) from e
        result = Result(request=request, response=response)
        if not result.is_success:
            logger.debug(f"{request.http_method} {request.uri} returned {result.status}")
        return result

    def execute_strict(self, request: Request) -> Result:
        """Like `execute`, but non-2xx statuses raise ClientError or ServerError."""
        return self.execute(request).raise_for_status()
