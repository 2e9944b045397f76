"""Request generator: turns a Method plus caller arguments into a Request."""

import json
import logging
from collections.abc import Mapping

from api_discovery_client.errors import ParameterValidationError, ValidationError
from api_discovery_client.generator.encoding import build_uri, expand_path, format_value
from api_discovery_client.generator.validator import validate_parameters
from api_discovery_client.parser.base import Method
from api_discovery_client.transport import Request

logger = logging.getLogger(__name__)

JSON_CONTENT_TYPE = "application/json"


class RequestGenerator:
    """Validates arguments against a method schema and assembles requests.

    `authorization` may be swapped between calls; it is any object with a
    `sign(request) -> request` method, or None for anonymous requests.
    """

    def __init__(self, authorization=None):
        self.authorization = authorization

    def generate(
        self,
        method: Method,
        parameters: Mapping | None = None,
        body=None,
        headers: Mapping | None = None,
        authenticated: bool = True,
    ) -> Request:
        """Build a request for a discovered method.

        Raises ValidationError for arguments of the wrong type and
        ParameterValidationError when parameters violate the method schema.
        """
        if not isinstance(method, Method):
            raise ValidationError(f"Expected a discovered Method, got {type(method).__name__}.")
        parameters = _check_mapping(parameters, "parameters")
        headers = _check_mapping(headers, "headers")
        parameters = {k: v for k, v in parameters.items() if v is not None}

        errors = validate_parameters(method, parameters)
        if errors:
            raise ParameterValidationError(errors)

        path_values, query_pairs = _partition(method, parameters)
        path = expand_path(method.path, path_values)
        uri = build_uri(method.method_base, path, query_pairs)
        return self._assemble(method.http_method, uri, body, headers, authenticated)

    def generate_raw(
        self,
        http_method: str,
        uri: str,
        body=None,
        headers: Mapping | None = None,
        authenticated: bool = True,
    ) -> Request:
        """Build a request for an explicit verb and URI, bypassing any schema."""
        if not isinstance(http_method, str) or not isinstance(uri, str):
            raise ValidationError("http_method and uri must be strings.")
        headers = _check_mapping(headers, "headers")
        return self._assemble(http_method.upper(), uri, body, headers, authenticated)

    def _assemble(self, http_method: str, uri: str, body, headers: dict, authenticated: bool) -> Request:
        computed: dict[str, str] = {}
        if isinstance(body, (dict, list)):
            body = json.dumps(body)
            computed["Content-Type"] = JSON_CONTENT_TYPE
        elif body is not None and not isinstance(body, (bytes, str)):
            raise ValidationError(f"Unsupported body type {type(body).__name__}.")

        # Caller headers override computed defaults, case-insensitively
        overridden = {k.lower() for k in headers}
        merged = {k: v for k, v in computed.items() if k.lower() not in overridden}
        merged.update({str(k): str(v) for k, v in headers.items()})

        request = Request(http_method=http_method, uri=uri, headers=merged, body=body)
        if authenticated and self.authorization is not None:
            request = self.authorization.sign(request)
        logger.debug(f"Generated request: {request.http_method} {request.uri}")
        return request


def _check_mapping(value, label: str) -> dict:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ValidationError(f"{label} must be a mapping, got {type(value).__name__}.")
    for key in value:
        if not isinstance(key, str):
            raise ValidationError(f"{label} keys must be strings, got {key!r}.")
    return dict(value)


def _partition(method: Method, parameters: dict) -> tuple[dict, list[tuple[str, str]]]:
    """Split validated parameters into path substitutions and query pairs."""
    path_values = {}
    query_pairs = []
    for name, value in parameters.items():
        param = method.parameters[name]
        items = list(value) if isinstance(value, (list, tuple)) else [value]
        if param.location == "path":
            rendered = [format_value(v) for v in items]
            path_values[name] = rendered if param.repeated else rendered[0]
        else:
            query_pairs.extend((name, format_value(v)) for v in items)
    return path_values, query_pairs
