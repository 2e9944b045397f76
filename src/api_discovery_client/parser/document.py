"""Raw document parsing: bytes or text into a JSON-like object tree."""

import json

import yaml

from api_discovery_client.errors import DocumentParseError


def parse_document(data: bytes | str | dict) -> dict:
    """Parse a discovery or directory document.

    Accepts JSON (what the directory service serves) and YAML (handy for
    hand-written documents kept on disk). Already-parsed dicts pass through.
    """
    if isinstance(data, dict):
        return data
    if isinstance(data, bytes):
        try:
            data = data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise DocumentParseError(f"Document is not valid UTF-8: {e}") from e

    try:
        doc = json.loads(data)
    except (json.JSONDecodeError, ValueError):
        # JSON is a subset of YAML, so this only matters for YAML input
        try:
            doc = yaml.safe_load(data)
        except yaml.YAMLError as e:
            raise DocumentParseError(f"Document is neither JSON nor YAML: {e}") from e

    if not isinstance(doc, dict):
        raise DocumentParseError("Document root must be an object.")
    return doc
