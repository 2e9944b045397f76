"""Resolver: from API names and method ids to schema model objects.

Discovery documents are fetched through the transport, parsed once and kept
in a DiscoveryCache. ApiDescriptions are rebuilt from the cached document on
every call, so a `method_base` override on one never leaks into another.
"""

import logging

from api_discovery_client.cache import DiscoveryCache
from api_discovery_client.errors import TransmissionError, ValidationError
from api_discovery_client.generator.encoding import encode_component
from api_discovery_client.parser.base import ApiDescription, DirectoryItem, Method
from api_discovery_client.parser.discovery import build_api, parse_directory
from api_discovery_client.parser.document import parse_document
from api_discovery_client.transport import TransportError

logger = logging.getLogger(__name__)

DIRECTORY_KEY = ("__directory__",)


def check_identifier(value, label: str) -> str:
    """Names and versions must be strings; anything else is a ValidationError."""
    if not isinstance(value, str):
        raise ValidationError(f"{label} must be a string, got {type(value).__name__}.")
    return value


class Resolver:
    """Looks up discovery documents, API descriptions and methods."""

    def __init__(
        self,
        transport,
        discovery_root: str,
        default_version: str = "v1",
        key: str | None = None,
        user_ip: str | None = None,
        cache: DiscoveryCache | None = None,
    ):
        self.transport = transport
        self.discovery_root = discovery_root.rstrip("/")
        self.default_version = default_version
        self.key = key
        self.user_ip = user_ip
        self.cache = cache if cache is not None else DiscoveryCache()

    def directory_uri(self) -> str:
        return self._with_credentials(f"{self.discovery_root}/apis")

    def discovery_uri(self, api: str, version: str | None = None) -> str:
        """Canonical URI of the discovery document for (api, version).

        No I/O happens here; a missing version means the configured default.
        """
        check_identifier(api, "API name")
        if version is not None:
            check_identifier(version, "API version")
        version = version or self.default_version
        return self._with_credentials(
            f"{self.discovery_root}/apis/{encode_component(api)}/{encode_component(version)}/rest"
        )

    def directory_document(self) -> dict:
        return self.cache.get_or_load(DIRECTORY_KEY, lambda: self._fetch(self.directory_uri()))

    def register_directory_document(self, document) -> None:
        self.cache.put(DIRECTORY_KEY, parse_document(document))

    def discovered_apis(self) -> list[DirectoryItem]:
        return parse_directory(self.directory_document())

    def discovery_document(self, api: str, version: str | None = None) -> dict:
        check_identifier(api, "API name")
        if version is None:
            version = self._preferred_version_name(api) or self.default_version
        check_identifier(version, "API version")
        return self.cache.get_or_load(
            (api, version), lambda: self._fetch(self.discovery_uri(api, version))
        )

    def register_discovery_document(self, api: str, version: str, document) -> None:
        """Seed the cache so (api, version) resolves without any network I/O."""
        check_identifier(api, "API name")
        check_identifier(version, "API version")
        self.cache.put((api, version), parse_document(document))

    def discovered_api(self, api: str, version: str | None = None) -> ApiDescription:
        """Build the description of `api`, using the preferred version if none is given."""
        return build_api(self.discovery_document(api, version))

    def preferred_version(self, api: str) -> ApiDescription | None:
        """The version the directory flags as preferred, or None for unknown APIs."""
        check_identifier(api, "API name")
        version = self._preferred_version_name(api)
        if version is None:
            return None
        return self.discovered_api(api, version)

    def discovered_method(self, method_id: str, api: str | None = None, version: str | None = None) -> Method | None:
        """Find a method by dotted id, e.g. `plus.activities.list`.

        The first segment names the API when `api` is omitted. Returns None
        when any segment of the id is not in the document.
        """
        check_identifier(method_id, "Method id")
        segments = method_id.split(".")
        if api is None:
            api = segments[0]
        check_identifier(api, "API name")

        description = self.discovered_api(api, version)
        if segments[0] == description.name and len(segments) > 1:
            segments = segments[1:]
        found = description.lookup(".".join(segments))
        return found if isinstance(found, Method) else None

    def _preferred_version_name(self, api: str) -> str | None:
        candidates = [item for item in self.discovered_apis() if item.name == api and item.preferred]
        if not candidates:
            logger.debug(f"No preferred version listed for {api}")
            return None
        return candidates[0].version

    def _fetch(self, uri: str) -> dict:
        logger.debug(f"Fetching {uri}")
        try:
            response = self.transport.send("GET", uri, {}, None)
        except TransportError as e:
            raise TransmissionError(f"Could not fetch {uri}: {e}") from e
        if not 200 <= response.status < 300:
            logger.warning(f"Fetching {uri} returned {response.status}")
            raise TransmissionError(f"Could not fetch {uri}: HTTP {response.status}")
        return parse_document(response.body)

    def _with_credentials(self, uri: str) -> str:
        query = []
        if self.key is not None:
            query.append(f"key={encode_component(self.key)}")
        if self.user_ip is not None:
            query.append(f"userIp={encode_component(self.user_ip)}")
        return f"{uri}?{'&'.join(query)}" if query else uri
