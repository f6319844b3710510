"""Lingochain 顶层包。

该包提供聊天客户端的会话管理与服务端代理的实现，
包括配置加载、领域模型、上游 Provider 适配、
代理 HTTP 服务、会话持久化以及本地聊天界面。
"""

from lingochain.session import ChatSession

__version__ = "0.1.0"

__all__ = ["ChatSession", "__version__"]
