"""Shared types for chat providers: conversation turns, message building and open upstream streams."""
import logging
from typing import Any, AsyncIterator

import httpx

from prepbuddy.core.errors import ProviderError

logger = logging.getLogger(__name__)


class ChatTurn:
    """One prior conversation entry as sent by the client: role, content and an optional ISO timestamp."""

    __slots__ = ("role", "content", "timestamp")

    def __init__(self, *, role: str, content: str, timestamp: str | None = None):
        self.role = role
        self.content = content
        self.timestamp = timestamp

    def to_message(self) -> dict[str, str]:
        """Provider message shape. Anything that is not 'user' is sent as 'assistant'."""
        return {
            "role": "user" if self.role == "user" else "assistant",
            "content": self.content,
        }


def build_messages(
    system_prompt: str,
    history: list[ChatTurn],
    prompt: str,
    history_limit: int,
) -> list[dict[str, str]]:
    """System prompt, then the last `history_limit` turns, then the new user prompt."""
    messages = [{"role": "system", "content": system_prompt}]
    if history_limit > 0:
        messages.extend(turn.to_message() for turn in history[-history_limit:])
    messages.append({"role": "user", "content": prompt})
    return messages


def extract_completion(provider_id: str, data: Any) -> str:
    """Pull choices[0].message.content out of a chat-completion body. Raises ProviderError if missing."""
    try:
        content = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError) as e:
        raise ProviderError(provider_id, "Invalid response format") from e
    if not isinstance(content, str):
        raise ProviderError(provider_id, "Invalid response format")
    return content


class ProviderStream:
    """
    An upstream streamed response that answered 2xx. Owns its client and response:
    iterate with aiter_bytes(), and always aclose() when done (aiter_bytes closes on exit).
    """

    def __init__(self, provider_id: str, client: httpx.AsyncClient, response: httpx.Response):
        self.provider_id = provider_id
        self._client = client
        self._response = response

    async def aiter_bytes(self) -> AsyncIterator[bytes]:
        """Raw upstream chunks in arrival order, unmodified."""
        try:
            async for chunk in self._response.aiter_raw():
                if chunk:
                    yield chunk
        finally:
            await self.aclose()

    async def aclose(self) -> None:
        await self._response.aclose()
        await self._client.aclose()
