"""Anthropic Provider 适配器。

本模块负责：

1. 接收统一的 ChatRequest。
2. 将其转换为 Messages API（/v1/messages）的请求格式。
3. 调用 HTTP 接口并把网络/API 异常包装为业务异常。
4. 原样返回响应 JSON，由调用方决定如何使用。

extract_reply_text 是对响应结构唯一的假设：content[0].text。
结构不符时抛 MalformedResponseError，而不是让 KeyError/IndexError 冒出去。
"""

from typing import Any, Dict

import httpx

from lingochain.domain.exceptions import (
    ApiError,
    MalformedResponseError,
    NetworkError,
    RateLimitError,
    ValidationError,
)
from lingochain.domain.models import ChatRequest
from lingochain.providers.registry import ANTHROPIC_CONFIG, ModelConfig


class AnthropicClient:
    """Anthropic 提供方客户端实现。"""

    name = "anthropic"

    def __init__(self, settings):
        # Settings 里包含 base_url、api_key、超时等配置
        self._settings = settings

    def chat(self, req: ChatRequest) -> Dict[str, Any]:
        """执行一次非流式对话调用，返回上游原始 JSON。

        不重试；http_timeout 为 None 时不设超时。
        """

        api_key = getattr(self._settings, "anthropic_api_key", None)
        if not api_key:
            raise ValidationError(code="MISSING_API_KEY", message="ANTHROPIC_API_KEY not set")
        try:
            model_cfg = ANTHROPIC_CONFIG.models[req.model]
        except KeyError:
            raise ValidationError(code="UNKNOWN_MODEL", message=f"Unknown model: {req.model!r}")
        payload = self._build_payload(req, model_cfg)
        base = getattr(self._settings, "anthropic_base_url", None) or ANTHROPIC_CONFIG.base_url
        try:
            with httpx.Client(timeout=getattr(self._settings, "http_timeout", None), trust_env=False) as client:
                resp = client.post(
                    f"{base.rstrip('/')}/v1/messages",
                    json=payload,
                    headers={
                        "x-api-key": api_key,
                        "anthropic-version": getattr(self._settings, "anthropic_version", "2023-06-01"),
                        "content-type": "application/json",
                    },
                )
        except httpx.RequestError as e:
            raise NetworkError(code="NETWORK_ERROR", message=str(e), provider=self.name)
        if resp.status_code == 429:
            raise RateLimitError(code="RATE_LIMIT", message="Anthropic rate limit", http_status=429)
        if resp.status_code >= 400:
            raise ApiError(code="API_ERROR", message=resp.text, http_status=resp.status_code)
        try:
            data = resp.json()
        except ValueError as e:
            raise MalformedResponseError(code="MALFORMED_RESPONSE", message=str(e), provider=self.name)
        if not isinstance(data, dict):
            raise MalformedResponseError(
                code="MALFORMED_RESPONSE",
                message=f"Expected a JSON object, got {type(data).__name__}",
                provider=self.name,
            )
        return data

    def _build_payload(self, req: ChatRequest, model_cfg: ModelConfig) -> dict:
        """将 ChatRequest 转成 Messages API 所需的请求 JSON。"""

        return {
            "model": model_cfg.provider_model,
            "max_tokens": req.max_tokens or model_cfg.max_tokens,
            "messages": [{"role": "user", "content": req.message}],
        }


def extract_reply_text(data: Any) -> str:
    """取出 content[0].text。"""

    try:
        text = data["content"][0]["text"]
    except (KeyError, IndexError, TypeError):
        raise MalformedResponseError(
            code="MALFORMED_RESPONSE",
            message="Response has no content[0].text",
        )
    if not isinstance(text, str):
        raise MalformedResponseError(
            code="MALFORMED_RESPONSE",
            message=f"content[0].text is {type(text).__name__}, expected str",
        )
    return text
