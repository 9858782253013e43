"""
Tests for the AI assistant relay: provider fallback order, streaming passthrough,
synthesized fallback streams and the HTTP contract of POST /functions/ai-assistant.
"""
import asyncio
import json

import httpx
import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from prepbuddy.api.deps import get_relay
from prepbuddy.client.decoder import Content, Done, decode_line
from prepbuddy.core.constants import SSE_DONE_EVENT
from prepbuddy.models.chat_history import ChatHistory
from prepbuddy.services.ai import relay as relay_module
from prepbuddy.services.ai.fallback import GREETING_ANSWER, SYSTEM_PROMPT, canned_answer
from prepbuddy.services.ai.relay import ChatRelay, enhance_message, relay_upstream, synthesize_stream
from prepbuddy.services.ai.types import ChatTurn
from tests.conftest import completion_body, make_provider, unreachable

ENDPOINT = "/functions/ai-assistant"


def _history(n: int) -> list[dict]:
    return [{"role": "user" if i % 2 == 0 else "assistant", "content": f"m{i}"} for i in range(n)]


def _events(body: bytes) -> list[str]:
    return [block for block in body.decode("utf-8").split("\n\n") if block]


async def _collect(chunks) -> bytes:
    return b"".join([c async for c in chunks])


class TestProviderChain:
    @pytest.mark.asyncio
    async def test_primary_answers(self, client, relay_providers):
        seen = []

        def primary(request: httpx.Request) -> httpx.Response:
            seen.append(json.loads(request.content))
            return httpx.Response(200, json=completion_body("Use two pointers."))

        relay_providers[:] = [
            make_provider("openai", primary, frequency_penalty=0.1, presence_penalty=0.1),
            make_provider("groq", unreachable, history_limit=8),
        ]
        resp = await client.post(
            ENDPOINT, json={"message": "How do I solve two-sum?", "conversationHistory": _history(14)}
        )

        assert resp.status_code == 200
        data = resp.json()
        assert data["response"] == "Use two pointers."
        assert "fallback" not in data
        assert data["timestamp"]

        body = seen[0]
        assert body["messages"][0] == {"role": "system", "content": SYSTEM_PROMPT}
        assert [m["content"] for m in body["messages"][1:-1]] == [f"m{i}" for i in range(4, 14)]
        assert body["messages"][-1] == {"role": "user", "content": "How do I solve two-sum?"}
        assert body["max_tokens"] == 2000
        assert body["frequency_penalty"] == 0.1
        assert "stream" not in body

    @pytest.mark.asyncio
    async def test_secondary_used_when_primary_fails(self, client, relay_providers):
        seen = []

        def secondary(request: httpx.Request) -> httpx.Response:
            seen.append(json.loads(request.content))
            return httpx.Response(200, json=completion_body("from groq"))

        relay_providers[:] = [
            make_provider("openai", lambda r: httpx.Response(500, json={"error": "boom"})),
            make_provider("groq", secondary, history_limit=8),
        ]
        resp = await client.post(ENDPOINT, json={"message": "hello there", "conversationHistory": _history(12)})

        assert resp.json()["response"] == "from groq"
        # system + last 8 history + prompt
        assert len(seen[0]["messages"]) == 10
        assert "frequency_penalty" not in seen[0]

    @pytest.mark.asyncio
    async def test_malformed_primary_body_falls_through(self, relay_providers):
        relay = ChatRelay(
            [
                make_provider("openai", lambda r: httpx.Response(200, json={"choices": []})),
                make_provider("groq", lambda r: httpx.Response(200, json=completion_body("ok"))),
            ],
            word_delay=0,
        )
        answer = await relay.respond("question", [])
        assert answer.response == "ok"
        assert answer.provider_id == "groq"
        assert answer.fallback is False

    @pytest.mark.asyncio
    async def test_both_down_gives_canned_answer(self, client):
        resp = await client.post(ENDPOINT, json={"message": "hi"})

        assert resp.status_code == 200
        data = resp.json()
        assert data["fallback"] is True
        assert data["response"] == GREETING_ANSWER


class TestRequestValidation:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("payload", [{}, {"message": ""}, {"message": "   "}, {"message": None}])
    async def test_blank_message_is_400(self, client, payload):
        resp = await client.post(ENDPOINT, json=payload)
        assert resp.status_code == 400
        assert resp.json() == {"error": "Message is required"}

    @pytest.mark.asyncio
    async def test_unparseable_body_still_answers(self, client):
        resp = await client.post(ENDPOINT, content=b"{not json", headers={"Content-Type": "application/json"})
        assert resp.status_code == 200
        data = resp.json()
        assert data["fallback"] is True
        assert data["response"]

    def test_enhance_message_with_context(self):
        assert enhance_message("Why?", "Day 3 of DSA") == "Context: Day 3 of DSA\n\nQuestion: Why?"
        assert enhance_message("Why?", None) == "Why?"
        assert enhance_message("Why?", "") == "Why?"

    @pytest.mark.asyncio
    async def test_context_is_sent_to_provider(self, client, relay_providers):
        seen = []

        def primary(request: httpx.Request) -> httpx.Response:
            seen.append(json.loads(request.content))
            return httpx.Response(200, json=completion_body("ok"))

        relay_providers[:] = [make_provider("openai", primary)]
        await client.post(ENDPOINT, json={"message": "Why?", "context": "Arrays"})
        assert seen[0]["messages"][-1]["content"] == "Context: Arrays\n\nQuestion: Why?"


class TestChatHistory:
    @pytest.mark.asyncio
    async def test_saved_when_user_id_present(self, client, db, relay_providers):
        relay_providers[:] = [make_provider("openai", lambda r: httpx.Response(200, json=completion_body("answer")))]
        await client.post(ENDPOINT, json={"message": "Why?", "context": "Arrays", "userId": "u1"})

        rows = db.query(ChatHistory).all()
        assert [(r.user_id, r.user_message, r.ai_response) for r in rows] == [("u1", "Why?", "answer")]

        resp = await client.get(f"{ENDPOINT}/history", headers={"X-User-Id": "u1"})
        assert resp.json()["history"][0]["ai_response"] == "answer"

    @pytest.mark.asyncio
    async def test_not_saved_without_user_id_or_when_streaming(self, client, db):
        await client.post(ENDPOINT, json={"message": "hi"})
        await client.post(ENDPOINT, json={"message": "hi", "userId": "u1", "stream": True})
        assert db.query(ChatHistory).count() == 0

    @pytest.mark.asyncio
    @pytest.mark.parametrize("failing", ["commit", "refresh"])
    async def test_save_failure_keeps_provider_answer(self, client, relay_providers, monkeypatch, failing):
        relay_providers[:] = [make_provider("openai", lambda r: httpx.Response(200, json=completion_body("answer")))]

        def broken(self, *args, **kwargs):
            raise OperationalError("INSERT INTO chat_history", {}, Exception("database is locked"))

        monkeypatch.setattr(Session, failing, broken)
        resp = await client.post(ENDPOINT, json={"message": "Why?", "userId": "u1"})
        monkeypatch.undo()

        assert resp.status_code == 200
        assert resp.json()["response"] == "answer"
        assert "fallback" not in resp.json()


class TestStreaming:
    @pytest.mark.asyncio
    async def test_upstream_bytes_relayed_verbatim(self, client, relay_providers):
        upstream = (
            b'data: {"choices":[{"delta":{"content":"Hel"}}]}\n\n'
            b'data: {"choices":[{"delta":{"content":"lo"}}]}\n\n'
            b"data: [DONE]\n\n"
        )
        seen = []

        def primary(request: httpx.Request) -> httpx.Response:
            seen.append(json.loads(request.content))
            return httpx.Response(200, content=upstream, headers={"Content-Type": "text/event-stream"})

        relay_providers[:] = [make_provider("openai", primary)]
        resp = await client.post(ENDPOINT, json={"message": "hello", "stream": True})

        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("text/plain")
        assert resp.headers["cache-control"] == "no-cache"
        assert resp.headers["connection"] == "keep-alive"
        assert resp.headers["x-accel-buffering"] == "no"
        assert resp.content == upstream
        assert seen[0]["stream"] is True

    @pytest.mark.asyncio
    async def test_done_appended_when_upstream_omits_it(self):
        async def chunks():
            yield b'data: {"choices":[{"delta":{"content":"x"}}]}\n\n'

        provider = make_provider("openai", lambda r: httpx.Response(200, content=chunks()))
        upstream = await provider.open_stream("q", [])
        body = await _collect(relay_upstream(upstream))
        assert body.endswith(SSE_DONE_EVENT)
        assert body.count(SSE_DONE_EVENT) == 1

    @pytest.mark.asyncio
    async def test_mid_stream_failure_is_raised(self):
        async def chunks():
            yield b'data: {"choices":[{"delta":{"content":"x"}}]}\n\n'
            raise httpx.ReadError("connection reset")

        provider = make_provider("openai", lambda r: httpx.Response(200, content=chunks()))
        upstream = await provider.open_stream("q", [])
        received = []
        with pytest.raises(httpx.ReadError):
            async for chunk in relay_upstream(upstream):
                received.append(chunk)
        assert received == [b'data: {"choices":[{"delta":{"content":"x"}}]}\n\n']

    @pytest.mark.asyncio
    async def test_secondary_stream_when_primary_refuses(self, client, relay_providers):
        relay_providers[:] = [
            make_provider("openai", lambda r: httpx.Response(429)),
            make_provider("groq", lambda r: httpx.Response(200, content=b"data: [DONE]\n\n"), history_limit=8),
        ]
        resp = await client.post(ENDPOINT, json={"message": "hello", "stream": True})
        assert resp.content == b"data: [DONE]\n\n"

    @pytest.mark.asyncio
    async def test_synthesized_stream_when_all_down(self, client):
        resp = await client.post(ENDPOINT, json={"message": "hi", "stream": True})

        events = _events(resp.content)
        assert events[-1] == "data: [DONE]"
        decoded = [decode_line(e) for e in events]
        assert isinstance(decoded[-1], Done)
        words = [d.text for d in decoded[:-1]]
        assert all(isinstance(d, Content) for d in decoded[:-1])
        assert "".join(words) == GREETING_ANSWER + " "
        assert len(words) == len(GREETING_ANSWER.split(" "))


class TestSynthesizedStream:
    @pytest.mark.asyncio
    async def test_words_in_order_then_done(self):
        body = await _collect(synthesize_stream("Keep going, you got this", 0))
        events = _events(body)
        assert events[-1] == "data: [DONE]"
        assert [json.loads(e[len("data: "):])["response"] for e in events[:-1]] == [
            "Keep ",
            "going, ",
            "you ",
            "got ",
            "this ",
        ]

    @pytest.mark.asyncio
    async def test_non_ascii_kept_readable(self):
        body = await _collect(synthesize_stream("Hello! 👋", 0))
        assert "👋".encode("utf-8") in body

    @pytest.mark.asyncio
    async def test_words_paced_by_word_delay(self, monkeypatch):
        delays = []
        real_sleep = asyncio.sleep

        async def recording_sleep(delay):
            delays.append(delay)
            await real_sleep(0)

        monkeypatch.setattr(relay_module.asyncio, "sleep", recording_sleep)
        body = await _collect(synthesize_stream("a b c d e", 0.05))
        monkeypatch.undo()

        events = _events(body)
        assert len(events) == 6
        assert events[-1] == "data: [DONE]"
        assert delays == [0.05] * 4

    def test_default_cadence_is_fifty_ms(self):
        assert get_relay().word_delay == 0.05


class TestCannedAnswer:
    @pytest.mark.parametrize("prompt", ["hi", "Hello!", "hey buddy"])
    def test_greetings(self, prompt):
        assert canned_answer(prompt) == GREETING_ANSWER

    def test_dsa(self):
        assert "Data Structures & Algorithms" in canned_answer("Give me a DSA plan")

    def test_generic_mentions_prompt(self):
        answer = canned_answer("resume tips for freshers")
        assert "resume tips for freshers" in answer

    def test_deterministic(self):
        assert canned_answer("what about system design") == canned_answer("what about system design")


def test_history_roles_normalized():
    turns = [ChatTurn(role="user", content="a"), ChatTurn(role="bot", content="b")]
    assert [t.to_message()["role"] for t in turns] == ["user", "assistant"]
