"""Validates caller-supplied parameters against a method's parameter schema."""

import re

from api_discovery_client.generator.encoding import format_value
from api_discovery_client.parser.base import Method, Parameter

_INTEGER = re.compile(r"-?\d+")
_NUMBER = re.compile(r"-?(\d+\.?\d*|\.\d+)([eE][-+]?\d+)?")


def validate_parameters(method: Method, parameters: dict) -> dict[str, str]:
    """Check supplied parameters against the method schema.

    Returns dict of {parameter_name: error_message} for every violation.
    A parameter whose value is None counts as absent.
    """
    errors = {}
    for name in parameters:
        if name not in method.parameters:
            errors[name] = f"unknown parameter for method {method.id}"

    for name, param in method.parameters.items():
        value = parameters.get(name)
        if value is None:
            if param.required:
                errors[name] = "missing required parameter"
            continue
        message = validate_value(param, value)
        if message:
            errors[name] = message
    return errors


def validate_value(param: Parameter, value) -> str | None:
    """Return an error message if `value` violates `param`, else None."""
    if isinstance(value, (list, tuple)):
        if not param.repeated:
            return "parameter is not repeated but got a list"
        if param.required and not value:
            return "missing required parameter"
        items = list(value)
    else:
        items = [value]

    for item in items:
        message = _validate_item(param, item)
        if message:
            return message
    return None


def _validate_item(param: Parameter, item) -> str | None:
    text = format_value(item)

    if param.param_type == "integer":
        if isinstance(item, bool) or not (isinstance(item, int) or _INTEGER.fullmatch(text)):
            return f"expected an integer, got {text!r}"
    elif param.param_type == "number":
        if isinstance(item, bool) or not (isinstance(item, (int, float)) or _NUMBER.fullmatch(text)):
            return f"expected a number, got {text!r}"
    elif param.param_type == "boolean":
        if text not in ("true", "false"):
            return f"expected a boolean, got {text!r}"

    if param.enum is not None and text not in param.enum:
        return f"{text!r} is not one of {', '.join(param.enum)}"
    if param.pattern and not re.search(param.pattern, text):
        return f"{text!r} does not match pattern {param.pattern}"
    return None
