"""客户端会话管理。"""

from lingochain.session.chat_session import ChatSession, ChatSummary, PendingSend

__all__ = ["ChatSession", "ChatSummary", "PendingSend"]
