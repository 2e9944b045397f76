"""Discovery document parser.

Builds ApiDescription models from parsed discovery documents and
DirectoryItem models from directory listings. Structurally malformed
documents raise DocumentParseError.
"""

from urllib.parse import urljoin

import pydantic

from api_discovery_client.errors import DocumentParseError
from .base import ApiDescription, DirectoryItem, Method, MethodBase, Parameter, Resource

MALFORMED = (AttributeError, TypeError, ValueError, pydantic.ValidationError)


def build_api(doc: dict) -> ApiDescription:
    """Build an ApiDescription from a discovery document."""
    if not isinstance(doc, dict):
        raise DocumentParseError("Discovery document must be a JSON object.")
    missing = [key for key in ("name", "version") if not doc.get(key)]
    if not doc.get("rootUrl") and not doc.get("baseUrl"):
        missing.append("rootUrl")
    if missing:
        raise DocumentParseError(
            f"Discovery document is missing required fields: {', '.join(missing)}"
        )

    try:
        return _build_api(doc)
    except MALFORMED as e:
        raise DocumentParseError(f"Malformed discovery document: {e}") from e


def _build_api(doc: dict) -> ApiDescription:
    name = doc["name"]
    if doc.get("rootUrl"):
        root_url = doc["rootUrl"]
        service_path = doc.get("servicePath", "")
    else:
        root_url, service_path = doc["baseUrl"], ""

    global_params = _parse_parameters(_mapping(doc.get("parameters"), "parameters"))
    base = MethodBase(urljoin(root_url, service_path))

    api = ApiDescription(
        name=name,
        version=doc["version"],
        title=doc.get("title", ""),
        description=doc.get("description", ""),
        root_url=root_url,
        service_path=service_path,
        base_url=doc.get("baseUrl", ""),
        parameters=global_params,
        resources=_parse_resources(_mapping(doc.get("resources"), "resources"), name, global_params, base),
        methods=_parse_methods(_mapping(doc.get("methods"), "methods"), name, global_params, base),
        schemas=_mapping(doc.get("schemas"), "schemas"),
    )
    api._document = doc
    api._base = base
    return api


def parse_directory(doc: dict) -> list[DirectoryItem]:
    """Parse a directory listing into DirectoryItem models."""
    if not isinstance(doc, dict):
        raise DocumentParseError("Directory document must be a JSON object.")
    entries = doc.get("items") or []
    if not isinstance(entries, list):
        raise DocumentParseError("Directory items must be a list.")
    items = []
    for item in entries:
        item = _mapping(item, "directory item")
        if not item.get("name") or not item.get("version"):
            continue
        try:
            items.append(
                DirectoryItem(
                    id=item.get("id", f"{item['name']}:{item['version']}"),
                    name=item["name"],
                    version=item["version"],
                    title=item.get("title", ""),
                    description=item.get("description", ""),
                    preferred=bool(item.get("preferred", False)),
                    discovery_rest_url=item.get("discoveryRestUrl", ""),
                )
            )
        except pydantic.ValidationError as e:
            raise DocumentParseError(f"Malformed directory item {item.get('name')!r}: {e}") from e
    return items


def _mapping(value, label: str) -> dict:
    """Missing nodes are empty; anything but an object is malformed."""
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise DocumentParseError(f"'{label}' must be a JSON object, got {type(value).__name__}.")
    return value


def _parse_resources(
    resources: dict, prefix: str, global_params: dict[str, Parameter], base: MethodBase
) -> dict[str, Resource]:
    """Recursively parse nested resources."""
    result = {}
    for name, body in resources.items():
        path = f"{prefix}.{name}"
        body = _mapping(body, path)
        result[name] = Resource(
            name=name,
            resources=_parse_resources(_mapping(body.get("resources"), f"{path}.resources"), path, global_params, base),
            methods=_parse_methods(_mapping(body.get("methods"), f"{path}.methods"), path, global_params, base),
        )
    return result


def _parse_methods(
    methods: dict, prefix: str, global_params: dict[str, Parameter], base: MethodBase
) -> dict[str, Method]:
    result = {}
    for name, body in methods.items():
        body = _mapping(body, f"{prefix}.{name}")
        if "path" not in body:
            raise DocumentParseError(f"Method '{prefix}.{name}' has no path.")
        # Method-level declarations win over global ones
        params = dict(global_params)
        params.update(_parse_parameters(_mapping(body.get("parameters"), f"{prefix}.{name}.parameters")))

        method = Method(
            id=body.get("id", f"{prefix}.{name}"),
            name=name,
            http_method=body.get("httpMethod", "GET").upper(),
            path=body["path"],
            parameters=params,
            parameter_order=body.get("parameterOrder", []),
            request_ref=_schema_ref(body.get("request")),
            response_ref=_schema_ref(body.get("response")),
            media_upload=body.get("mediaUpload"),
            scopes=body.get("scopes", []),
            description=body.get("description", ""),
        )
        method._base = base
        result[name] = method
    return result


def _parse_parameters(params: dict) -> dict[str, Parameter]:
    result = {}
    for name, p in params.items():
        p = _mapping(p, f"parameter {name}")
        enum = p.get("enum")
        default = p.get("default")
        result[name] = Parameter(
            name=name,
            location=p.get("location", "query"),
            param_type=p.get("type", "string"),
            required=p.get("required", False),
            repeated=p.get("repeated", False),
            pattern=p.get("pattern"),
            enum=[str(v) for v in enum] if enum is not None else None,
            default=_default_str(default),
            description=p.get("description", ""),
        )
    return result


def _schema_ref(body: dict | None) -> str | None:
    if not body:
        return None
    return _mapping(body, "schema reference").get("$ref")


def _default_str(value) -> str | None:
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)
