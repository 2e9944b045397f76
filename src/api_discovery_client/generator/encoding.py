"""URI building: path template expansion and RFC 3986 query encoding."""

from urllib.parse import quote, urlsplit, urlunsplit

import uritemplate

# Segments a client or proxy would otherwise collapse while normalising the path
DOT_SEGMENTS = {".": "%2E", "..": "%2E%2E"}


def format_value(value) -> str:
    """Render a parameter value the way discovery-based APIs expect it."""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def encode_component(value: str) -> str:
    """Percent-encode everything outside the RFC 3986 unreserved set.

    `+` and `=` become `%2B` and `%3D`; spaces become `%20`, never `+`.
    """
    return quote(value, safe="")


def encode_query(pairs: list[tuple[str, str]]) -> str:
    """Serialize key/value pairs with keys in lexicographic order.

    Values of a repeated key keep the order the caller gave them.
    """
    ordered = sorted(pairs, key=lambda pair: pair[0])
    return "&".join(f"{encode_component(k)}={encode_component(v)}" for k, v in ordered)


def expand_path(template: str, values: dict[str, str | list[str]]) -> str:
    """Expand an RFC 6570 path template such as `people/{userId}/activities/{collection}`.

    A value that expands to `.` or `..` stays a literal segment of its own.
    """
    expanded = uritemplate.expand(template, values)
    return "/".join(DOT_SEGMENTS.get(segment, segment) for segment in expanded.split("/"))


def join_path(base: str, path: str) -> str:
    """Append `path` to `base`; a leading slash makes it host-relative."""
    if not base:
        return path
    if path.startswith("/"):
        parts = urlsplit(base)
        return urlunsplit((parts.scheme, parts.netloc, path, "", ""))
    return f"{base.rstrip('/')}/{path}"


def build_uri(base: str, path: str, query_pairs: list[tuple[str, str]]) -> str:
    """Join `path` onto `base` and append the encoded query, if any."""
    uri = join_path(base, path)
    query = encode_query(query_pairs)
    if not query:
        return uri
    separator = "&" if "?" in uri else "?"
    return f"{uri}{separator}{query}"
