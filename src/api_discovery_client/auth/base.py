"""Authorization strategies decorate a generated request with credentials.

The request generator only ever calls `sign`; it never inspects which
strategy it was given.
"""

from abc import ABC, abstractmethod

from api_discovery_client.transport import Request


class AuthorizationStrategy(ABC):
    """Capability shared by every authorization scheme."""

    @abstractmethod
    def sign(self, request: Request) -> Request:
        """Return `request` with credentials attached."""


class NoAuthorization(AuthorizationStrategy):
    """Anonymous access: requests pass through untouched."""

    def sign(self, request: Request) -> Request:
        return request
