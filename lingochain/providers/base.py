"""Provider 抽象接口。

代理服务不直接依赖具体厂商的 HTTP 细节，而是依赖此协议：

- 每个厂商实现一个 ProviderClient（如 AnthropicClient）。
- 负责：将 ChatRequest 转成具体 API 请求，并原样返回响应 JSON。

代理的职责是透传，所以这里返回 dict 而不是解析后的结构。
"""

from typing import Any, Dict, Protocol

from lingochain.domain.models import ChatRequest


class ProviderClient(Protocol):
    """LLM Provider 客户端协议。

    实现者需要提供：
    - name: Provider 名称，用于日志。
    - chat(req): 执行一次非流式对话调用，返回上游原始 JSON。
    """

    name: str

    def chat(self, req: ChatRequest) -> Dict[str, Any]:
        ...
