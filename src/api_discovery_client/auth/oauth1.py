"""OAuth 1.0a request signing (RFC 5849, HMAC-SHA1) via oauthlib.

Only the signing half of OAuth 1 lives here. Acquiring temporary and token
credentials is a separate flow the caller runs beforehand.
"""

from oauthlib.common import generate_nonce, generate_timestamp
from oauthlib.oauth1 import SIGNATURE_HMAC_SHA1, SIGNATURE_TYPE_AUTH_HEADER, Client

from api_discovery_client.auth.base import AuthorizationStrategy
from api_discovery_client.transport import Request

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


class OAuth1Authorization(AuthorizationStrategy):
    """Signs requests with consumer and (optional) token credentials."""

    def __init__(
        self,
        consumer_key: str = "anonymous",
        consumer_secret: str = "anonymous",
        token_credential_key: str | None = None,
        token_credential_secret: str | None = None,
    ):
        self.consumer_key = consumer_key
        self.consumer_secret = consumer_secret
        self.token_credential_key = token_credential_key
        self.token_credential_secret = token_credential_secret

    def client(self) -> Client:
        """An oauthlib client for the current credentials and a fresh nonce."""
        return Client(
            self.consumer_key,
            client_secret=self.consumer_secret,
            resource_owner_key=self.token_credential_key or None,
            resource_owner_secret=self.token_credential_secret,
            signature_method=SIGNATURE_HMAC_SHA1,
            signature_type=SIGNATURE_TYPE_AUTH_HEADER,
            nonce=self._nonce(),
            timestamp=self._timestamp(),
        )

    def sign(self, request: Request) -> Request:
        # Body parameters are part of the signature only for form-encoded bodies
        if _is_form(request):
            body, headers = request.body, {"Content-Type": FORM_CONTENT_TYPE}
        else:
            body, headers = None, {}
        _, signed_headers, _ = self.client().sign(
            request.uri, http_method=request.http_method.upper(), body=body, headers=headers
        )
        return request.with_headers({"Authorization": signed_headers["Authorization"]})

    def _nonce(self) -> str:
        return generate_nonce()

    def _timestamp(self) -> str:
        return generate_timestamp()


def _is_form(request: Request) -> bool:
    content_type = next(
        (v for k, v in request.headers.items() if k.lower() == "content-type"), ""
    )
    return content_type.startswith(FORM_CONTENT_TYPE) and bool(request.body)
