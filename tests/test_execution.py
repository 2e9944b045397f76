from unittest.mock import MagicMock

import pytest
import requests

from api_discovery_client.errors import ClientError, ServerError, TransmissionError
from api_discovery_client.execution import Executor, Result
from api_discovery_client.transport import Request, RequestsTransport, Response, TransportError

REQUEST = Request(http_method="GET", uri="https://www.googleapis.com/plus/v1/people/me")


def _executor(status: int, body: bytes = b"", headers: dict | None = None) -> Executor:
    transport = MagicMock()
    transport.send.return_value = Response(status=status, headers=headers or {}, body=body)
    return Executor(transport)


class TestExecute:
    def test_success(self):
        result = _executor(200, b'{"id": "me"}', {"Content-Type": "application/json; charset=UTF-8"}).execute(REQUEST)
        assert result.status == 200
        assert result.is_success
        assert result.data == {"id": "me"}
        assert result.request is REQUEST

    @pytest.mark.parametrize("status", [401, 404, 500, 503])
    def test_error_status_is_returned(self, status):
        result = _executor(status).execute(REQUEST)
        assert result.status == status
        assert not result.is_success

    def test_transport_failure_becomes_transmission_error(self):
        transport = MagicMock()
        transport.send.side_effect = TransportError("connection refused")
        with pytest.raises(TransmissionError):
            Executor(transport).execute(REQUEST)

    def test_sends_request_fields(self):
        executor = _executor(200)
        request = Request(http_method="POST", uri="https://example.com/x", headers={"A": "1"}, body=b"payload")
        executor.execute(request)
        executor.transport.send.assert_called_once_with("POST", "https://example.com/x", {"A": "1"}, b"payload")


class TestExecuteStrict:
    def test_success_passes_through(self):
        assert _executor(204).execute_strict(REQUEST).status == 204

    @pytest.mark.parametrize("status", [400, 401, 403, 404])
    def test_client_errors(self, status):
        with pytest.raises(ClientError):
            _executor(status).execute_strict(REQUEST)

    @pytest.mark.parametrize("status", [500, 502])
    def test_server_errors(self, status):
        with pytest.raises(ServerError):
            _executor(status).execute_strict(REQUEST)

    def test_error_message_in_exception(self):
        body = b'{"error": {"code": 403, "message": "Daily Limit Exceeded"}}'
        with pytest.raises(ClientError, match="Daily Limit Exceeded"):
            _executor(403, body, {"Content-Type": "application/json"}).execute_strict(REQUEST)

    def test_http_errors_are_transmission_errors(self):
        with pytest.raises(TransmissionError):
            _executor(500).execute_strict(REQUEST)


class TestResult:
    def test_non_json_body_has_no_data(self):
        result = Result(request=REQUEST, response=Response(status=200, headers={"content-type": "text/plain"}, body=b"hi"))
        assert result.data is None
        assert result.error_message is None

    def test_invalid_json_has_no_data(self):
        result = Result(request=REQUEST, response=Response(status=200, headers={"Content-Type": "application/json"}, body=b"{"))
        assert result.data is None


class TestRequestsTransport:
    def test_send_wraps_response(self):
        session = MagicMock()
        session.headers = {}
        session.request.return_value = MagicMock(status_code=401, headers={"Content-Type": "application/json"}, content=b"{}")
        transport = RequestsTransport(session=session, timeout=5, user_agent="test-agent")

        response = transport.send("GET", "https://example.com/x", {"A": "1"}, None)

        assert response.as_tuple() == (401, {"Content-Type": "application/json"}, b"{}")
        assert session.headers["User-Agent"] == "test-agent"
        call_kwargs = session.request.call_args[1]
        assert call_kwargs["headers"] == {"A": "1"}
        assert call_kwargs["timeout"] == 5

    def test_connection_failure(self):
        session = MagicMock()
        session.request.side_effect = requests.ConnectionError("refused")
        with pytest.raises(TransportError):
            RequestsTransport(session=session).send("GET", "https://example.com/x")
