"""LLM Provider 集成层。

该包下的模块负责：
- 定义 Provider 抽象接口 (base)。
- 维护 Provider 与模型配置 (registry)。
- 提供各厂商的具体实现 (anthropic_client)。
"""

from typing import Optional

from lingochain.config.settings import settings
from lingochain.providers.anthropic_client import AnthropicClient, extract_reply_text
from lingochain.providers.base import ProviderClient
from lingochain.providers.registry import get_provider_config


def create_provider(name: Optional[str] = None, cfg=None) -> ProviderClient:
    """根据名称创建 Provider 实例，未知名称抛 KeyError。

    cfg 为空时使用全局 settings。
    """

    get_provider_config(name or "anthropic")
    return AnthropicClient(cfg or settings)


__all__ = ["AnthropicClient", "ProviderClient", "create_provider", "extract_reply_text"]
