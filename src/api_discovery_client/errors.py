"""Exception hierarchy shared by every layer of the client.

Validation errors are raised before any I/O. Transmission errors cover
everything that went wrong on the way to or from the server.
"""


class APIClientError(Exception):
    """Base class for all errors raised by this package."""


class ValidationError(APIClientError, TypeError):
    """An argument has the wrong shape or type (e.g. a non-string API name)."""


class ParameterValidationError(APIClientError, ValueError):
    """Supplied parameters violate a method's declared parameter schema."""

    def __init__(self, errors: dict[str, str]):
        self.errors = dict(errors)
        details = "; ".join(f"{name}: {msg}" for name, msg in sorted(self.errors.items()))
        super().__init__(f"Invalid parameters: {details}")


class TransmissionError(APIClientError):
    """A document or response could not be fetched, parsed or accepted."""

    def __init__(self, message: str, result=None):
        super().__init__(message)
        self.result = result


class DocumentParseError(TransmissionError):
    """A discovery or directory document is not valid JSON/YAML."""


class ClientError(TransmissionError):
    """The server answered with a 4xx status."""


class ServerError(TransmissionError):
    """The server answered with a 5xx status."""
