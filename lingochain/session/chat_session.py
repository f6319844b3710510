"""会话管理核心模块。

ChatSession 持有全部会话、当前激活的会话 ID 以及发送中的忙碌标记，
每次变更之后立即把完整的会话列表写回键值存储（不做批量/延迟写入）。

界面层只通过这里的方法修改状态，不直接改字段。
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, List, Optional, Protocol
import time

from lingochain.config.settings import settings
from lingochain.domain.exceptions import StorageError
from lingochain.domain.models import (
    DEFAULT_TITLE,
    AssistantMessage,
    Conversation,
    Message,
    UserMessage,
    derive_title,
    utc_now_iso,
)
from lingochain.domain.storage import KeyValueStore, LoadResult
from lingochain.infrastructure.logging.logger import logger
from lingochain.session.formatting import chat_preview, format_chat_time


CLEAR_ALL_RECREATE_DELAY = 0.3
ERROR_BANNER_TEXT = "Failed to get response. Make sure the server is running on localhost:3000"
ERROR_REPLY_TEXT = "Sorry, I encountered an error. Please make sure the server is running."

Scheduler = Callable[[float, Callable[[], None]], Any]


def run_now(delay: float, callback: Callable[[], None]) -> None:
    """默认调度器：忽略延迟，立即执行。"""

    callback()


def _epoch_millis() -> int:
    return int(time.time() * 1000)


class ReplyClient(Protocol):
    def send(self, text: str) -> str:
        ...


@dataclass
class PendingSend:
    """一次已写入用户消息、等待回复的发送。"""

    chat_id: int
    text: str


@dataclass
class ChatSummary:
    """侧边栏中的一行。"""

    id: int
    title: str
    preview: str
    time_label: str
    active: bool


class ChatSession:
    def __init__(
        self,
        store: KeyValueStore,
        storage_key: Optional[str] = None,
        scheduler: Optional[Scheduler] = None,
        on_error: Optional[Callable[[str], None]] = None,
        clock: Optional[Callable[[], int]] = None,
    ):
        self._store = store
        self._key = storage_key or settings.storage_key
        self._scheduler = scheduler or run_now
        self._on_error = on_error
        self._clock = clock or _epoch_millis
        self._chats: List[Conversation] = []
        self._current_id: Optional[int] = None
        self._loading = False
        self.last_load: Optional[LoadResult] = None

    @property
    def conversations(self) -> List[Conversation]:
        return list(self._chats)

    @property
    def current_chat_id(self) -> Optional[int]:
        return self._current_id

    @property
    def current(self) -> Optional[Conversation]:
        if self._current_id is None:
            return None
        return self._find(self._current_id)

    @property
    def is_loading(self) -> bool:
        return self._loading

    def get(self, chat_id: int) -> Optional[Conversation]:
        return self._find(chat_id)

    # ---- 加载与持久化 ----

    def load(self) -> LoadResult:
        """读取已保存的会话；没有任何会话时新建一个。

        数据损坏时记录日志并从空列表开始，原始结果保留在 last_load 中，
        调用方可以据此决定是否提示用户或备份旧数据。
        """

        result = self._store.load(self._key)
        chats: List[Conversation] = []
        if result.ok:
            try:
                if not isinstance(result.value, list):
                    raise TypeError(f"expected a list, got {type(result.value).__name__}")
                chats = [Conversation.from_dict(item) for item in result.value]
            except (AttributeError, KeyError, TypeError, ValueError) as e:
                result = LoadResult(status="corrupt", value=result.value, error=str(e))
        if result.status == "corrupt":
            logger.error(
                f"Error loading chats: {result.error}",
                extra={"extra": {"key": self._key, "error": result.error}},
            )
            chats = []
        self.last_load = result
        self._chats = chats
        if self._chats:
            self._current_id = self._chats[0].id
        else:
            self._current_id = None
            self.create_conversation()
        return result

    def _persist(self) -> None:
        try:
            self._store.save(self._key, [c.to_dict() for c in self._chats])
        except StorageError as e:
            logger.error(
                f"Error saving chats: {e.message}",
                extra={"extra": {"key": self._key, "code": e.code}},
            )

    # ---- 会话管理 ----

    def create_conversation(self) -> Conversation:
        conv = Conversation(id=self._next_id(), title=DEFAULT_TITLE)
        self._chats.insert(0, conv)
        self._current_id = conv.id
        self._persist()
        return conv

    def switch_conversation(self, chat_id: int) -> bool:
        if self._find(chat_id) is None:
            return False
        self._current_id = chat_id
        return True

    def delete_conversation(self, chat_id: int) -> bool:
        if self._find(chat_id) is None:
            return False
        self._chats = [c for c in self._chats if c.id != chat_id]
        if self._current_id == chat_id:
            if self._chats:
                self._current_id = self._chats[0].id
            else:
                self._current_id = None
                # create_conversation 自己会落盘
                self.create_conversation()
                return True
        self._persist()
        return True

    def clear_conversation(self) -> bool:
        """清空当前会话的消息并重置标题，ID 与位置不变。"""

        conv = self.current
        if conv is None:
            return False
        conv.messages = []
        conv.title = DEFAULT_TITLE
        conv.timestamp = utc_now_iso()
        self._persist()
        return True

    def clear_all(self) -> int:
        """删除全部会话，随后通过调度器延迟新建一个空会话。"""

        removed = len(self._chats)
        if removed == 0:
            return 0
        self._chats = []
        self._current_id = None
        self._persist()
        self._scheduler(CLEAR_ALL_RECREATE_DELAY, self._recreate_after_clear)
        return removed

    def _recreate_after_clear(self) -> None:
        # 调度期间用户可能已经新建过会话
        if not self._chats:
            self.create_conversation()

    def append_message(self, message: Message) -> Conversation:
        conv = self.current
        if conv is None:
            conv = self.create_conversation()
        self._append_to(conv, message)
        return conv

    def _append_to(self, conv: Conversation, message: Message) -> None:
        conv.messages.append(message)
        if isinstance(message, UserMessage) and len(conv.messages) == 1:
            conv.title = derive_title(message.content)
        conv.timestamp = utc_now_iso()
        self._persist()

    # ---- 发送 ----

    def begin_send(self, text: str) -> Optional[PendingSend]:
        """写入用户消息并进入忙碌状态；空输入或忙碌时返回 None 且不改状态。"""

        text = (text or "").strip()
        if not text or self._loading:
            return None
        conv = self.append_message(UserMessage(content=text))
        self._loading = True
        return PendingSend(chat_id=conv.id, text=text)

    def complete_send(self, pending: PendingSend, reply: str) -> Optional[AssistantMessage]:
        try:
            conv = self._find(pending.chat_id)
            if conv is None:
                logger.info(f"Dropping reply for deleted chat {pending.chat_id}")
                return None
            message = AssistantMessage(content=reply, message_number=len(conv.messages))
            self._append_to(conv, message)
            return message
        finally:
            self._loading = False

    def fail_send(self, pending: PendingSend, error: BaseException) -> Optional[AssistantMessage]:
        try:
            logger.error(
                f"Send failed: {error}",
                extra={"extra": {"chat_id": pending.chat_id, "error": str(error)}},
            )
            if self._on_error is not None:
                self._on_error(ERROR_BANNER_TEXT)
            conv = self._find(pending.chat_id)
            if conv is None:
                return None
            message = AssistantMessage(content=ERROR_REPLY_TEXT, is_error=True)
            self._append_to(conv, message)
            return message
        finally:
            self._loading = False

    def send_message(self, text: str, client: ReplyClient) -> Optional[AssistantMessage]:
        """同步完成一次发送：写入用户消息、调用代理、写入回复或错误消息。"""

        pending = self.begin_send(text)
        if pending is None:
            return None
        try:
            reply = client.send(pending.text)
        except Exception as e:
            return self.fail_send(pending, e)
        return self.complete_send(pending, reply)

    # ---- 展示 ----

    def summaries(self, now: Optional[datetime] = None) -> List[ChatSummary]:
        return [
            ChatSummary(
                id=c.id,
                title=c.title,
                preview=chat_preview(c),
                time_label=format_chat_time(c.timestamp, now=now),
                active=c.id == self._current_id,
            )
            for c in self._chats
        ]

    def _find(self, chat_id: int) -> Optional[Conversation]:
        for conv in self._chats:
            if conv.id == chat_id:
                return conv
        return None

    def _next_id(self) -> int:
        candidate = self._clock()
        if self._chats:
            highest = max(c.id for c in self._chats)
            if candidate <= highest:
                candidate = highest + 1
        return candidate
