"""Client-side chat state: messages and sessions. Lives only for the process lifetime."""
import asyncio
import enum
import uuid
from datetime import datetime, timezone
from typing import Any

from prepbuddy.core.constants import NEW_SESSION_TITLE, SESSION_TITLE_MAX_CHARS

ROLE_USER = "user"
ROLE_ASSISTANT = "assistant"


def _now() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> str:
    return uuid.uuid4().hex


class StreamState(str, enum.Enum):
    IDLE = "idle"
    AWAITING_FIRST_BYTE = "awaiting_first_byte"
    STREAMING = "streaming"


class Message:
    """One chat message. content changes in place only while is_streaming is set."""

    __slots__ = ("id", "role", "content", "timestamp", "is_streaming")

    def __init__(
        self,
        *,
        role: str,
        content: str,
        id: str | None = None,
        timestamp: datetime | None = None,
        is_streaming: bool = False,
    ):
        self.id = id or new_id()
        self.role = role
        self.content = content
        self.timestamp = timestamp or _now()
        self.is_streaming = is_streaming

    def to_history(self) -> dict[str, str]:
        """Shape sent to the relay as conversationHistory."""
        return {"role": self.role, "content": self.content, "timestamp": self.timestamp.isoformat()}

    def __repr__(self) -> str:
        flag = " streaming" if self.is_streaming else ""
        return f"<Message {self.role}{flag} {self.content[:30]!r}>"


class ChatSession:
    """A named conversation thread plus its in-flight stream bookkeeping."""

    def __init__(self, *, id: str | None = None, title: str = NEW_SESSION_TITLE, messages: list[Message] | None = None):
        self.id = id or new_id()
        self.title = title
        self.messages: list[Message] = list(messages or [])
        self.created_at = _now()
        self.state = StreamState.IDLE
        self.task: asyncio.Task | None = None
        self.abort: asyncio.Event | None = None
        self.streaming_message: Message | None = None

    @property
    def busy(self) -> bool:
        return self.state is not StreamState.IDLE

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "created_at": self.created_at.isoformat(),
            "state": self.state.value,
            "messages": [
                {
                    "id": m.id,
                    "role": m.role,
                    "content": m.content,
                    "timestamp": m.timestamp.isoformat(),
                    "is_streaming": m.is_streaming,
                }
                for m in self.messages
            ],
        }


def title_from(first_message: str) -> str:
    """First SESSION_TITLE_MAX_CHARS characters, plus '...' when cut."""
    if len(first_message) > SESSION_TITLE_MAX_CHARS:
        return first_message[:SESSION_TITLE_MAX_CHARS] + "..."
    return first_message
