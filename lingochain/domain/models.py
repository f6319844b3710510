"""会话与消息的数据模型。

本模块定义了聊天客户端内部共享的标准数据结构：

- UserMessage / AssistantMessage: 按 role 区分的消息类型（Message 为二者的联合）。
- Conversation: 一个会话，按时间顺序持有消息列表。
- ChatRequest: 发给上游 Provider 的单轮请求。

持久化时字段名与浏览器版本保持一致（messageNumber / isError），
所以 to_dict / from_dict 负责两边的转换。
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Literal, Optional, Union


DEFAULT_TITLE = "New Conversation"
TITLE_MAX_CHARS = 30

Role = Literal["user", "assistant"]


def utc_now_iso() -> str:
    """返回带毫秒、以 Z 结尾的 UTC ISO-8601 时间串。"""

    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_timestamp(value: str) -> datetime:
    """解析 ISO-8601 时间串，不带时区的按 UTC 处理；无法解析时抛 ValueError。"""

    if not isinstance(value, str):
        raise ValueError(f"Invalid timestamp: {value!r}")
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def normalize_timestamp(value: Any) -> str:
    """校验存储中的时间串，统一为以 Z 结尾的 UTC 形式。"""

    parsed = parse_timestamp(value).astimezone(timezone.utc)
    return parsed.isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass(frozen=True)
class UserMessage:
    """终端用户发出的一条消息。"""

    content: str
    timestamp: str = field(default_factory=utc_now_iso)
    role: Literal["user"] = field(default="user", init=False)


@dataclass(frozen=True)
class AssistantMessage:
    """助手回复。

    - message_number: 追加前会话中的消息数量，仅成功回复会带上。
    - is_error: 请求失败时写入的占位回复为 True。
    """

    content: str
    timestamp: str = field(default_factory=utc_now_iso)
    message_number: Optional[int] = None
    is_error: bool = False
    role: Literal["assistant"] = field(default="assistant", init=False)


Message = Union[UserMessage, AssistantMessage]


def message_to_dict(message: Message) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "role": message.role,
        "content": message.content,
        "timestamp": message.timestamp,
    }
    if isinstance(message, AssistantMessage):
        if message.message_number is not None:
            payload["messageNumber"] = message.message_number
        if message.is_error:
            payload["isError"] = True
    return payload


def message_from_dict(data: Dict[str, Any]) -> Message:
    """把持久化的字典还原为消息对象，未知 role 抛 ValueError。"""

    role = data.get("role")
    content = str(data.get("content") or "")
    raw_ts = data.get("timestamp")
    timestamp = normalize_timestamp(raw_ts) if raw_ts else utc_now_iso()
    if role == "user":
        return UserMessage(content=content, timestamp=timestamp)
    if role == "assistant":
        number = data.get("messageNumber")
        return AssistantMessage(
            content=content,
            timestamp=timestamp,
            message_number=int(number) if number is not None else None,
            is_error=bool(data.get("isError", False)),
        )
    raise ValueError(f"Unknown message role: {role!r}")


def derive_title(text: str) -> str:
    """取首条用户消息的前 30 个字符作为标题，超长时追加省略号。"""

    return text[:TITLE_MAX_CHARS] + ("..." if len(text) > TITLE_MAX_CHARS else "")


@dataclass
class Conversation:
    id: int
    title: str = DEFAULT_TITLE
    messages: List[Message] = field(default_factory=list)
    timestamp: str = field(default_factory=utc_now_iso)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "messages": [message_to_dict(m) for m in self.messages],
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Conversation":
        return cls(
            id=int(data["id"]),
            title=data.get("title") or DEFAULT_TITLE,
            messages=[message_from_dict(m) for m in data.get("messages") or []],
            timestamp=normalize_timestamp(data["timestamp"]) if data.get("timestamp") else utc_now_iso(),
        )


@dataclass
class ChatRequest:
    """发给上游 Provider 的单轮请求。

    model 为逻辑模型名（如 "chat"），由 registry 映射为厂商真实模型 ID。
    """

    message: str
    model: str = "chat"
    max_tokens: Optional[int] = None
