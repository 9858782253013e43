"""Protocol for chat-completion providers. Every provider speaks the same request/stream contract."""
from typing import Protocol

from prepbuddy.services.ai.types import ChatTurn, ProviderStream


class ChatProvider(Protocol):
    """Interface for OpenAI, Groq, etc. Same contract; only endpoint, model and knobs differ."""

    @property
    def provider_id(self) -> str:
        """Unique id (e.g. 'openai', 'groq') used in logs and ProviderError."""
        ...

    async def complete(self, prompt: str, history: list[ChatTurn]) -> str:
        """
        Full-response completion. Returns the assistant text.
        Raises ProviderError on network failure, non-2xx status or a malformed body.
        """
        ...

    async def open_stream(self, prompt: str, history: list[ChatTurn]) -> ProviderStream:
        """
        Open a streamed completion and return it once the upstream answered 2xx.
        Raises ProviderError before any bytes are handed out if the upstream is unreachable or refuses.
        """
        ...
