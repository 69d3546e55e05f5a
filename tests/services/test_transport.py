import pytest

from grafanabackup.errors import TransportError
from grafanabackup.services.transport import GrafanaClient


class DummyLogger:
    def debug(self, *_args, **_kwargs):
        return None

    def warning(self, *_args, **_kwargs):
        return None


class FakeRequestsModule:
    class RequestException(Exception):
        def __init__(self, message="", response=None):
            super().__init__(message)
            self.response = response

    class HTTPError(RequestException):
        pass

    class ConnectionError(RequestException):
        pass

    class Timeout(RequestException):
        pass

    class InvalidSchema(RequestException):
        pass

    def __init__(self, responses):
        self.responses = list(responses)
        self.calls = []

    def get(self, url, headers=None, timeout=None):
        self.calls.append({"url": url, "headers": headers, "timeout": timeout})
        result = self.responses.pop(0)
        if isinstance(result, Exception):
            raise result
        status_code, content = result
        return FakeResponse(self, status_code, content)


class FakeResponse:
    def __init__(self, module, status_code, content):
        self.module = module
        self.status_code = status_code
        self.content = content

    def raise_for_status(self):
        if self.status_code >= 400:
            raise self.module.HTTPError(f"{self.status_code} Error", response=self)


def build_client(requests_module, **kwargs):
    return GrafanaClient(
        credential="secret-token",
        logger=DummyLogger(),
        requests_module=requests_module,
        retry_backoff_seconds=0.0,
        **kwargs,
    )


def test_get_returns_body_and_sends_bearer_header():
    requests_module = FakeRequestsModule([(200, b"[]")])
    client = build_client(requests_module, timeout=12.5)

    body = client.get("https://grafana.example.com/api/search?query=&")

    assert body == b"[]"
    call = requests_module.calls[0]
    assert call["headers"]["Authorization"] == "Bearer secret-token"
    assert call["timeout"] == 12.5


def test_get_raises_transport_error_on_client_error_without_retry():
    requests_module = FakeRequestsModule([(401, b"unauthorized"), (200, b"[]")])
    client = build_client(requests_module, retry_count=2)

    with pytest.raises(TransportError) as error:
        client.get("https://grafana.example.com/api/search?query=&")

    assert error.value.status_code == 401
    assert error.value.url == "https://grafana.example.com/api/search?query=&"
    assert len(requests_module.calls) == 1


def test_get_retries_transient_server_errors():
    requests_module = FakeRequestsModule([(503, b"busy"), (200, b"{}")])
    client = build_client(requests_module, retry_count=1)

    assert client.get("https://grafana.example.com/api/dashboards/uid/a") == b"{}"
    assert len(requests_module.calls) == 2


def test_get_does_not_retry_by_default():
    requests_module = FakeRequestsModule(
        [FakeRequestsModule.RequestException("connection refused"), (200, b"{}")]
    )
    client = build_client(requests_module)

    with pytest.raises(TransportError, match="connection refused") as error:
        client.get("https://grafana.example.com/api/dashboards/uid/a")

    assert error.value.status_code is None
    assert len(requests_module.calls) == 1


def test_get_retries_connection_errors_and_timeouts():
    requests_module = FakeRequestsModule(
        [
            FakeRequestsModule.ConnectionError("connection reset"),
            FakeRequestsModule.Timeout("read timed out"),
            (200, b"{}"),
        ]
    )
    client = build_client(requests_module, retry_count=2)

    assert client.get("https://grafana.example.com/api/dashboards/uid/a") == b"{}"
    assert len(requests_module.calls) == 3


def test_get_does_not_retry_errors_that_cannot_succeed():
    requests_module = FakeRequestsModule(
        [
            FakeRequestsModule.InvalidSchema("No connection adapters were found for 'htp://grafana'"),
            (200, b"{}"),
            (200, b"{}"),
        ]
    )
    client = build_client(requests_module, retry_count=2)

    with pytest.raises(TransportError, match="No connection adapters"):
        client.get("htp://grafana.example.com/api/search?query=&")

    assert len(requests_module.calls) == 1
