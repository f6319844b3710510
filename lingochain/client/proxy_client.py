"""聊天客户端到代理服务的 HTTP 调用。"""

from typing import Optional

import httpx

from lingochain.config.settings import settings as default_settings
from lingochain.domain.exceptions import ApiError, MalformedResponseError, NetworkError
from lingochain.providers.anthropic_client import extract_reply_text


class ProxyClient:
    """POST {"message": text} 到代理，并取出助手回复文本。"""

    def __init__(self, api_url: Optional[str] = None, timeout: Optional[float] = None):
        self._api_url = api_url or default_settings.api_url
        self._timeout = timeout

    def send(self, text: str) -> str:
        try:
            with httpx.Client(timeout=self._timeout, trust_env=False) as client:
                resp = client.post(
                    self._api_url,
                    json={"message": text},
                    headers={"Content-Type": "application/json"},
                )
        except httpx.RequestError as e:
            raise NetworkError(code="NETWORK_ERROR", message=str(e))
        if resp.status_code < 200 or resp.status_code >= 300:
            raise ApiError(
                code="API_ERROR",
                message=f"API Error: {resp.status_code}",
                http_status=resp.status_code,
            )
        try:
            data = resp.json()
        except ValueError as e:
            raise MalformedResponseError(code="MALFORMED_RESPONSE", message=str(e))
        return extract_reply_text(data)
