"""会话列表与消息的时间/预览格式化。"""

from datetime import datetime, timezone, tzinfo
from typing import Optional

from lingochain.domain.models import Conversation, parse_timestamp


PREVIEW_MAX_CHARS = 60
EMPTY_PREVIEW = "Start chatting..."


def format_time(timestamp: str, tz: Optional[tzinfo] = None) -> str:
    """消息气泡上的时间，如 "3:07 PM"。"""

    local = parse_timestamp(timestamp).astimezone(tz)
    hour = local.hour % 12 or 12
    suffix = "AM" if local.hour < 12 else "PM"
    return f"{hour}:{local.minute:02d} {suffix}"


def format_chat_time(
    timestamp: str,
    now: Optional[datetime] = None,
    tz: Optional[tzinfo] = None,
) -> str:
    """侧边栏的相对时间：Now / 5m / 3h / 2d，超过一周显示 "Oct 19"。"""

    date = parse_timestamp(timestamp)
    now = now or datetime.now(timezone.utc)
    diff = now - date
    minutes = int(diff.total_seconds() // 60)
    hours = int(diff.total_seconds() // 3600)
    days = int(diff.total_seconds() // 86400)
    if minutes < 1:
        return "Now"
    if minutes < 60:
        return f"{minutes}m"
    if hours < 24:
        return f"{hours}h"
    if days < 7:
        return f"{days}d"
    local = date.astimezone(tz)
    return f"{local.strftime('%b')} {local.day}"


def chat_preview(conv: Conversation) -> str:
    if not conv.messages:
        return EMPTY_PREVIEW
    return conv.messages[-1].content[:PREVIEW_MAX_CHARS] + "..."
