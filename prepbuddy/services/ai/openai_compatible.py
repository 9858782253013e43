"""
Chat provider for OpenAI-compatible /chat/completions endpoints (OpenAI itself, Groq).
Uses httpx; pass `transport` to swap the network for tests (httpx.MockTransport).
"""
import logging
from typing import Any

import httpx

from prepbuddy.core.constants import PROVIDER_MAX_TOKENS, PROVIDER_TEMPERATURE, PROVIDER_TOP_P
from prepbuddy.core.errors import ProviderError
from prepbuddy.services.ai.fallback import SYSTEM_PROMPT
from prepbuddy.services.ai.types import ChatTurn, ProviderStream, build_messages, extract_completion

logger = logging.getLogger(__name__)


class OpenAICompatibleProvider:
    def __init__(
        self,
        *,
        provider_id: str,
        api_url: str,
        api_key: str,
        model: str,
        history_limit: int,
        extra_params: dict[str, Any] | None = None,
        timeout: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.provider_id = provider_id
        self.api_url = api_url
        self.api_key = api_key
        self.model = model
        self.history_limit = history_limit
        self.extra_params = dict(extra_params or {})
        self.timeout = timeout
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self._transport)

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    def build_body(self, prompt: str, history: list[ChatTurn], *, stream: bool) -> dict[str, Any]:
        body: dict[str, Any] = {
            "model": self.model,
            "messages": build_messages(SYSTEM_PROMPT, history, prompt, self.history_limit),
            "max_tokens": PROVIDER_MAX_TOKENS,
            "temperature": PROVIDER_TEMPERATURE,
            "top_p": PROVIDER_TOP_P,
        }
        if stream:
            body["stream"] = True
        body.update(self.extra_params)
        return body

    async def complete(self, prompt: str, history: list[ChatTurn]) -> str:
        body = self.build_body(prompt, history, stream=False)
        try:
            async with self._client() as client:
                resp = await client.post(self.api_url, json=body, headers=self._headers())
                if not resp.is_success:
                    raise ProviderError(self.provider_id, f"API error: {resp.status_code}")
                data = resp.json()
        except httpx.HTTPError as e:
            raise ProviderError(self.provider_id, f"request failed: {e}") from e
        except ValueError as e:
            raise ProviderError(self.provider_id, "response body is not JSON") from e
        return extract_completion(self.provider_id, data)

    async def open_stream(self, prompt: str, history: list[ChatTurn]) -> ProviderStream:
        body = self.build_body(prompt, history, stream=True)
        client = self._client()
        request = client.build_request("POST", self.api_url, json=body, headers=self._headers())
        try:
            response = await client.send(request, stream=True)
        except httpx.HTTPError as e:
            await client.aclose()
            raise ProviderError(self.provider_id, f"stream request failed: {e}") from e
        if not response.is_success:
            status = response.status_code
            await response.aclose()
            await client.aclose()
            raise ProviderError(self.provider_id, f"API error: {status}")
        logger.debug("Opened %s stream (model=%s)", self.provider_id, self.model)
        return ProviderStream(self.provider_id, client, response)
