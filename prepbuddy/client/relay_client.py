"""
HTTP client for the chat relay (POST /functions/ai-assistant) using httpx.

PREPBUDDY_API_URL and PREPBUDDY_API_KEY (bearer credential) come from the environment or .env.
"""
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

import httpx
from pydantic_settings import BaseSettings

from prepbuddy.client.models import Message

logger = logging.getLogger(__name__)

ASSISTANT_PATH = "/functions/ai-assistant"
CONNECTION_APOLOGY = "I apologize, but I'm having trouble connecting right now. Please try again in a moment."


class ClientSettings(BaseSettings):
    api_url: str = "http://localhost:8000"
    api_key: str = "dev-anon-key"
    user_id: str | None = None

    class Config:
        env_prefix = "PREPBUDDY_"
        env_file = ".env"
        extra = "ignore"


class RelayUnavailable(Exception):
    """The relay could not be reached, answered non-2xx, or the stream broke before finishing."""


class RelayClient:
    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        user_id: str | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float | None = None,
    ):
        cfg = ClientSettings()
        self.base_url = (base_url or cfg.api_url).rstrip("/")
        self.api_key = api_key or cfg.api_key
        self.user_id = user_id or cfg.user_id
        self._transport = transport
        # Streams have no read timeout; only the user cancels a hung stream.
        self._stream_timeout = httpx.Timeout(None, connect=10.0)
        self._complete_timeout = httpx.Timeout(timeout or 120.0, connect=10.0)

    @property
    def endpoint(self) -> str:
        return self.base_url + ASSISTANT_PATH

    def _headers(self) -> dict[str, str]:
        headers = {"Authorization": f"Bearer {self.api_key}", "Content-Type": "application/json"}
        if self.user_id:
            headers["X-User-Id"] = self.user_id
        return headers

    def _payload(self, message: str, history: list[Message], stream: bool) -> dict:
        payload: dict = {
            "message": message,
            "stream": stream,
            "conversationHistory": [m.to_history() for m in history],
        }
        if self.user_id:
            payload["userId"] = self.user_id
        return payload

    @asynccontextmanager
    async def stream_lines(self, message: str, history: list[Message]) -> AsyncIterator[AsyncIterator[str]]:
        """
        Open a streaming request and yield an iterator over response lines.
        Transport errors (on open or mid-stream) surface as RelayUnavailable.
        Leaving the block, including by cancellation, closes the connection.
        """
        async with httpx.AsyncClient(timeout=self._stream_timeout, transport=self._transport) as client:
            request = client.build_request(
                "POST", self.endpoint, json=self._payload(message, history, True), headers=self._headers()
            )
            try:
                response = await client.send(request, stream=True)
            except httpx.HTTPError as e:
                raise RelayUnavailable(f"Failed to reach relay: {e}") from e
            try:
                if not response.is_success:
                    raise RelayUnavailable(f"Failed to get AI response: HTTP {response.status_code}")
                yield self._lines(response)
            finally:
                await response.aclose()

    @staticmethod
    async def _lines(response: httpx.Response) -> AsyncIterator[str]:
        try:
            async for line in response.aiter_lines():
                yield line
        except httpx.HTTPError as e:
            raise RelayUnavailable(f"Stream interrupted: {e}") from e

    async def complete(self, message: str, history: list[Message]) -> str:
        """Non-streaming call. Never raises for transport problems; returns CONNECTION_APOLOGY instead."""
        try:
            async with httpx.AsyncClient(timeout=self._complete_timeout, transport=self._transport) as client:
                resp = await client.post(
                    self.endpoint, json=self._payload(message, history, False), headers=self._headers()
                )
                if not resp.is_success:
                    raise RelayUnavailable(f"Failed to get AI response: HTTP {resp.status_code}")
                data = resp.json()
            text = data.get("response") if isinstance(data, dict) else None
            if not isinstance(text, str) or not text:
                raise RelayUnavailable("Relay answered without a response field")
            return text
        except (httpx.HTTPError, ValueError, RelayUnavailable):
            logger.warning("Non-streaming relay call failed", exc_info=True)
            return CONNECTION_APOLOGY
