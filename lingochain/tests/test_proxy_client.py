import httpx
import pytest

from lingochain.client.proxy_client import ProxyClient
from lingochain.domain.exceptions import ApiError, MalformedResponseError, NetworkError


def make_client_cls(status_code=200, body=None, error=None, captured=None):
    class Resp:
        def __init__(self):
            self.status_code = status_code

        def json(self):
            if body is None:
                raise ValueError("Expecting value")
            return body

    class Client:
        def __init__(self, *a, **kw):
            pass

        def __enter__(self):
            return self

        def __exit__(self, *a):
            return False

        def post(self, url, json=None, **_):
            if captured is not None:
                captured["url"] = url
                captured["payload"] = json
            if error is not None:
                raise error
            return Resp()

    return Client


def test_proxy_client_returns_reply_text(monkeypatch):
    captured = {}
    body = {"content": [{"type": "text", "text": "Hola"}]}
    monkeypatch.setattr("httpx.Client", make_client_cls(body=body, captured=captured))
    client = ProxyClient(api_url="http://localhost:3000/api/chat")
    assert client.send("Hi") == "Hola"
    assert captured == {"url": "http://localhost:3000/api/chat", "payload": {"message": "Hi"}}


def test_proxy_client_http_error(monkeypatch):
    monkeypatch.setattr("httpx.Client", make_client_cls(status_code=500, body={"error": "Failed to get AI response"}))
    with pytest.raises(ApiError) as exc:
        ProxyClient(api_url="http://localhost:3000/api/chat").send("Hi")
    assert exc.value.message == "API Error: 500"


def test_proxy_client_connection_refused(monkeypatch):
    monkeypatch.setattr("httpx.Client", make_client_cls(error=httpx.ConnectError("refused")))
    with pytest.raises(NetworkError):
        ProxyClient(api_url="http://localhost:3000/api/chat").send("Hi")


def test_proxy_client_relayed_upstream_error_body(monkeypatch):
    body = {"type": "error", "error": {"type": "authentication_error"}}
    monkeypatch.setattr("httpx.Client", make_client_cls(body=body))
    with pytest.raises(MalformedResponseError):
        ProxyClient(api_url="http://localhost:3000/api/chat").send("Hi")
