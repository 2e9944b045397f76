import json
from pathlib import Path
from urllib.parse import urlsplit

import pytest

from api_discovery_client.client import APIClient
from api_discovery_client.config import Settings
from api_discovery_client.transport import Response

FIXTURES = Path(__file__).parent / "fixtures"

DISCOVERY_ROOT = "https://www.googleapis.com/discovery/v1"

UNAUTHORIZED = {"error": {"code": 401, "message": "Login Required"}}


class FakeTransport:
    """Serves fixture documents for discovery URIs; answers everything else with `api_response`."""

    def __init__(self):
        self.calls = []
        self.documents = {
            f"{DISCOVERY_ROOT}/apis": "directory.json",
            f"{DISCOVERY_ROOT}/apis/prediction/v1.2/rest": "prediction-v1.2.json",
            f"{DISCOVERY_ROOT}/apis/plus/v1/rest": "plus-v1.json",
            f"{DISCOVERY_ROOT}/apis/analytics/v3/rest": "analytics-v3.json",
        }
        self.api_response = Response(
            status=401,
            headers={"Content-Type": "application/json; charset=UTF-8"},
            body=json.dumps(UNAUTHORIZED).encode(),
        )

    def send(self, http_method, uri, headers=None, body=None):
        self.calls.append((http_method, uri, dict(headers or {}), body))
        parts = urlsplit(uri)
        bare = f"{parts.scheme}://{parts.netloc}{parts.path}"
        if bare.startswith(DISCOVERY_ROOT):
            name = self.documents.get(bare)
            if name is None:
                return Response(status=404, body=b'{"error": {"code": 404, "message": "Not Found"}}')
            return Response(
                status=200,
                headers={"Content-Type": "application/json"},
                body=(FIXTURES / name).read_bytes(),
            )
        return self.api_response


def load_fixture(name: str) -> dict:
    return json.loads((FIXTURES / name).read_text(encoding="utf-8"))


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def client(transport):
    return APIClient(transport=transport, settings=Settings(key=None, user_ip=None))
