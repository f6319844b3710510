import httpx
import pytest

from lingochain.domain.exceptions import (
    ApiError,
    MalformedResponseError,
    NetworkError,
    RateLimitError,
    ValidationError,
)
from lingochain.domain.models import ChatRequest
from lingochain.providers.anthropic_client import AnthropicClient, extract_reply_text


class SettingsStub:
    anthropic_api_key = "sk-ant-test-key"
    anthropic_base_url = "https://api.anthropic.com"
    anthropic_version = "2023-06-01"
    http_timeout = None


UPSTREAM_BODY = {
    "id": "msg_1",
    "type": "message",
    "role": "assistant",
    "content": [{"type": "text", "text": "Bonjour!"}],
    "model": "claude-sonnet-4-5-20250929",
    "usage": {"input_tokens": 3, "output_tokens": 2},
}


def fake_client(resp, captured=None):
    class Client:
        def __init__(self, *a, **kw):
            if captured is not None:
                captured["client_kwargs"] = kw

        def __enter__(self):
            return self

        def __exit__(self, *a):
            return False

        def post(self, url, json=None, headers=None, **_):
            if captured is not None:
                captured["url"] = url
                captured["payload"] = json
                captured["headers"] = headers
            if isinstance(resp, Exception):
                raise resp
            return resp

    return Client


class Resp:
    def __init__(self, status_code=200, body=None, text=""):
        self.status_code = status_code
        self._body = body
        self.text = text

    def json(self):
        if self._body is None:
            raise ValueError("Expecting value")
        return self._body


def test_anthropic_client_payload_and_headers(monkeypatch):
    captured = {}
    monkeypatch.setattr("httpx.Client", fake_client(Resp(body=UPSTREAM_BODY), captured))
    data = AnthropicClient(SettingsStub()).chat(ChatRequest(message="Hello"))
    assert data == UPSTREAM_BODY
    assert captured["url"] == "https://api.anthropic.com/v1/messages"
    assert captured["payload"] == {
        "model": "claude-sonnet-4-5-20250929",
        "max_tokens": 1024,
        "messages": [{"role": "user", "content": "Hello"}],
    }
    assert captured["headers"]["x-api-key"] == "sk-ant-test-key"
    assert captured["headers"]["anthropic-version"] == "2023-06-01"
    assert captured["headers"]["content-type"] == "application/json"
    assert captured["client_kwargs"]["timeout"] is None


def test_anthropic_client_missing_key():
    class NoKey(SettingsStub):
        anthropic_api_key = None

    with pytest.raises(ValidationError):
        AnthropicClient(NoKey()).chat(ChatRequest(message="hi"))


def test_anthropic_client_network_error(monkeypatch):
    monkeypatch.setattr("httpx.Client", fake_client(httpx.ConnectError("refused")))
    with pytest.raises(NetworkError):
        AnthropicClient(SettingsStub()).chat(ChatRequest(message="hi"))


def test_anthropic_client_rate_limit(monkeypatch):
    monkeypatch.setattr("httpx.Client", fake_client(Resp(status_code=429, text="slow down")))
    with pytest.raises(RateLimitError):
        AnthropicClient(SettingsStub()).chat(ChatRequest(message="hi"))


def test_anthropic_client_api_error(monkeypatch):
    monkeypatch.setattr("httpx.Client", fake_client(Resp(status_code=401, text="invalid x-api-key")))
    with pytest.raises(ApiError) as exc:
        AnthropicClient(SettingsStub()).chat(ChatRequest(message="hi"))
    assert exc.value.http_status == 401


def test_anthropic_client_non_json(monkeypatch):
    monkeypatch.setattr("httpx.Client", fake_client(Resp(body=None)))
    with pytest.raises(MalformedResponseError):
        AnthropicClient(SettingsStub()).chat(ChatRequest(message="hi"))


def test_extract_reply_text():
    assert extract_reply_text(UPSTREAM_BODY) == "Bonjour!"


@pytest.mark.parametrize(
    "body",
    [
        {},
        {"content": []},
        {"content": [{"type": "tool_use"}]},
        {"content": [{"text": 42}]},
        {"error": {"type": "overloaded_error"}},
        None,
    ],
)
def test_extract_reply_text_rejects_unexpected_shapes(body):
    with pytest.raises(MalformedResponseError):
        extract_reply_text(body)
