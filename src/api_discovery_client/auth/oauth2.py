"""OAuth 2.0 bearer-token authorization."""

from api_discovery_client.auth.base import AuthorizationStrategy
from api_discovery_client.transport import Request


class OAuth2Authorization(AuthorizationStrategy):
    """Adds `Authorization: OAuth <access_token>` once a token is set.

    Obtaining or refreshing the token is left to the caller.
    """

    def __init__(self, access_token: str | None = None):
        self.access_token = access_token

    def sign(self, request: Request) -> Request:
        if not self.access_token:
            return request
        return request.with_headers({"Authorization": f"OAuth {self.access_token}"})
