"""APIClient: the caller-facing entry point.

Wires the resolver, request generator and executor together around one
transport, one discovery cache and one (swappable) authorization strategy.
"""

from collections.abc import Mapping

from api_discovery_client.auth.base import AuthorizationStrategy
from api_discovery_client.auth.oauth1 import OAuth1Authorization
from api_discovery_client.auth.oauth2 import OAuth2Authorization
from api_discovery_client.cache import DiscoveryCache
from api_discovery_client.config import Settings, get_settings
from api_discovery_client.errors import ValidationError
from api_discovery_client.execution import Executor, Result
from api_discovery_client.generator.request import RequestGenerator
from api_discovery_client.parser.base import ApiDescription, DirectoryItem, Method
from api_discovery_client.resolver import Resolver
from api_discovery_client.transport import Request, RequestsTransport

AUTHORIZATION_SCHEMES = {
    "oauth_1": OAuth1Authorization,
    "oauth_2": OAuth2Authorization,
}


def build_authorization(value) -> AuthorizationStrategy | None:
    """Accept None, a scheme name ('oauth_1', 'oauth_2') or a strategy instance."""
    if value is None or isinstance(value, AuthorizationStrategy):
        return value
    if isinstance(value, str) and value in AUTHORIZATION_SCHEMES:
        return AUTHORIZATION_SCHEMES[value]()
    raise ValidationError(f"Invalid authorization: {value!r}")


class APIClient:
    """Generic client for any API described by a discovery document."""

    def __init__(
        self,
        authorization=None,
        transport=None,
        settings: Settings | None = None,
        key: str | None = None,
        user_ip: str | None = None,
        discovery_root: str | None = None,
        cache: DiscoveryCache | None = None,
    ):
        settings = settings or get_settings()
        self.transport = transport or RequestsTransport(timeout=settings.timeout, user_agent=settings.user_agent)
        self.resolver = Resolver(
            self.transport,
            discovery_root=discovery_root or settings.discovery_root,
            default_version=settings.default_version,
            key=key if key is not None else settings.key,
            user_ip=user_ip if user_ip is not None else settings.user_ip,
            cache=cache,
        )
        self.generator = RequestGenerator()
        self.executor = Executor(self.transport)
        self.authorization = authorization

    @property
    def authorization(self) -> AuthorizationStrategy | None:
        return self.generator.authorization

    @authorization.setter
    def authorization(self, value) -> None:
        self.generator.authorization = build_authorization(value)

    @property
    def key(self) -> str | None:
        return self.resolver.key

    @key.setter
    def key(self, value: str | None) -> None:
        self.resolver.key = value

    @property
    def user_ip(self) -> str | None:
        return self.resolver.user_ip

    @user_ip.setter
    def user_ip(self, value: str | None) -> None:
        self.resolver.user_ip = value

    @property
    def cache(self) -> DiscoveryCache:
        return self.resolver.cache

    # Discovery

    def directory_uri(self) -> str:
        return self.resolver.directory_uri()

    def discovery_uri(self, api: str, version: str | None = None) -> str:
        return self.resolver.discovery_uri(api, version)

    def directory_document(self) -> dict:
        return self.resolver.directory_document()

    def discovered_apis(self) -> list[DirectoryItem]:
        return self.resolver.discovered_apis()

    def discovery_document(self, api: str, version: str | None = None) -> dict:
        return self.resolver.discovery_document(api, version)

    def register_directory_document(self, document) -> None:
        self.resolver.register_directory_document(document)

    def register_discovery_document(self, api: str, version: str, document) -> None:
        self.resolver.register_discovery_document(api, version, document)

    def discovered_api(self, api: str, version: str | None = None) -> ApiDescription:
        return self.resolver.discovered_api(api, version)

    def preferred_version(self, api: str) -> ApiDescription | None:
        return self.resolver.preferred_version(api)

    def discovered_method(self, method_id: str, api: str | None = None, version: str | None = None) -> Method | None:
        return self.resolver.discovered_method(method_id, api, version)

    # Requests

    def generate_request(
        self,
        api_method=None,
        parameters: Mapping | None = None,
        body=None,
        headers: Mapping | None = None,
        *,
        api_name: str | None = None,
        version: str | None = None,
        authenticated: bool = True,
        http_method: str | None = None,
        uri: str | None = None,
    ) -> Request:
        """Build a request for a method (object or dotted id) or a raw verb + URI.

        A dotted id is resolved against a freshly built ApiDescription, so it
        always targets the document's own base. To honor a `method_base`
        override, pass the Method taken from the overridden description.
        """
        if api_method is None:
            if http_method is None or uri is None:
                raise ValidationError("Either api_method or both http_method and uri are required.")
            return self.generator.generate_raw(http_method, uri, body, headers, authenticated)

        method = self._resolve_method(api_method, api_name, version)
        parameters = self._with_credential_parameters(method, parameters)
        return self.generator.generate(method, parameters, body, headers, authenticated)

    def execute(self, api_method=None, parameters: Mapping | None = None, body=None, headers: Mapping | None = None, **options) -> Result:
        """Send a request and return its Result whatever the HTTP status."""
        return self.executor.execute(self._request_for(api_method, parameters, body, headers, options))

    def execute_strict(self, api_method=None, parameters: Mapping | None = None, body=None, headers: Mapping | None = None, **options) -> Result:
        """Send a request; 4xx raises ClientError and 5xx raises ServerError."""
        return self.executor.execute_strict(self._request_for(api_method, parameters, body, headers, options))

    def _request_for(self, api_method, parameters, body, headers, options: dict) -> Request:
        if isinstance(api_method, Request):
            return api_method
        return self.generate_request(api_method, parameters, body, headers, **options)

    def _resolve_method(self, api_method, api_name: str | None, version: str | None) -> Method:
        if isinstance(api_method, Method):
            return api_method
        if not isinstance(api_method, str):
            raise ValidationError(f"Expected a Method or method id, got {type(api_method).__name__}.")
        method = self.discovered_method(api_method, api_name, version)
        if method is None:
            raise ValidationError(f"Unknown method: {api_method}")
        return method

    def _with_credential_parameters(self, method: Method, parameters: Mapping | None):
        """Fill in `key` and `userIp` where the method declares them and the caller did not."""
        if parameters is None:
            parameters = {}
        if not isinstance(parameters, Mapping):
            return parameters
        extra = {}
        if self.key is not None and "key" in method.parameters and parameters.get("key") is None:
            extra["key"] = self.key
        if self.user_ip is not None and "userIp" in method.parameters and parameters.get("userIp") is None:
            extra["userIp"] = self.user_ip
        return {**parameters, **extra} if extra else parameters
