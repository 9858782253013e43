"""
Chat relay: forwards a message plus history to the provider chain and returns either one answer
or a byte stream of `data: ...\n\n` events.

Fallback is an ordered list of providers tried in sequence; the first success wins. Each tier
either returns or raises ProviderError. When every tier fails the answer comes from
canned_answer(), and a stream is synthesized from it word by word.
"""
import asyncio
import json
import logging
from typing import AsyncIterator

import httpx

from prepbuddy.core.constants import SSE_DATA_PREFIX, SSE_DONE_EVENT
from prepbuddy.core.errors import ProviderError
from prepbuddy.services.ai.base import ChatProvider
from prepbuddy.services.ai.fallback import canned_answer
from prepbuddy.services.ai.types import ChatTurn, ProviderStream

logger = logging.getLogger(__name__)


def enhance_message(message: str, context: str | None = None) -> str:
    """Prefix optional context: 'Context: ...\\n\\nQuestion: ...'."""
    if context:
        return f"Context: {context}\n\nQuestion: {message}"
    return message


class RelayAnswer:
    """Non-streaming result. fallback is True when the text came from the canned generator."""

    __slots__ = ("response", "fallback", "provider_id")

    def __init__(self, *, response: str, fallback: bool = False, provider_id: str | None = None):
        self.response = response
        self.fallback = fallback
        self.provider_id = provider_id


def fallback_event(text: str) -> bytes:
    """One event in the fallback shape: data: {"response": text}"""
    return f"{SSE_DATA_PREFIX}{json.dumps({'response': text}, ensure_ascii=False)}\n\n".encode("utf-8")


async def synthesize_stream(text: str, word_delay: float) -> AsyncIterator[bytes]:
    """Emit `text` one word per event (each word followed by a space), word_delay apart, then [DONE]."""
    words = text.split(" ")
    for i, word in enumerate(words):
        if i and word_delay > 0:
            await asyncio.sleep(word_delay)
        yield fallback_event(word + " ")
    yield SSE_DONE_EVENT


def _ends_with_done(tail: bytes) -> bool:
    return tail.rstrip().endswith(SSE_DONE_EVENT.rstrip())


async def relay_upstream(upstream: ProviderStream) -> AsyncIterator[bytes]:
    """
    Pass upstream bytes through verbatim, in order. Appends data: [DONE] if the upstream ended without it.
    A transport error after bytes were relayed is logged and re-raised so the response is cut short
    and the client takes its own fallback path.
    """
    tail = b""
    keep = len(SSE_DONE_EVENT) + 8
    try:
        async for chunk in upstream.aiter_bytes():
            tail = (tail + chunk)[-keep:]
            yield chunk
    except httpx.HTTPError:
        logger.warning("Upstream %s stream broke mid-response", upstream.provider_id, exc_info=True)
        raise
    if not _ends_with_done(tail):
        yield SSE_DONE_EVENT


class ChatRelay:
    def __init__(self, providers: list[ChatProvider], *, word_delay: float = 0.05):
        self.providers = list(providers)
        self.word_delay = word_delay

    async def respond(self, prompt: str, history: list[ChatTurn]) -> RelayAnswer:
        """Full answer from the first provider that succeeds, else the canned answer (fallback=True)."""
        for provider in self.providers:
            try:
                text = await provider.complete(prompt, history)
            except ProviderError:
                logger.warning("Provider %s failed, trying next tier", provider.provider_id, exc_info=True)
                continue
            return RelayAnswer(response=text, provider_id=provider.provider_id)
        logger.info("All providers failed; answering from canned fallback")
        return RelayAnswer(response=canned_answer(prompt), fallback=True)

    async def open_stream(self, prompt: str, history: list[ChatTurn]) -> AsyncIterator[bytes]:
        """
        Open the first provider stream that answers 2xx and return an iterator relaying it.
        Providers are only switched before any byte is relayed. If none opens, a synthesized
        word-by-word stream of the canned answer is returned instead.
        """
        for provider in self.providers:
            try:
                upstream = await provider.open_stream(prompt, history)
            except ProviderError:
                logger.warning("Provider %s stream failed, trying next tier", provider.provider_id, exc_info=True)
                continue
            return relay_upstream(upstream)
        logger.info("All provider streams failed; synthesizing canned stream")
        return synthesize_stream(canned_answer(prompt), self.word_delay)
