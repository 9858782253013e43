"""
Tests for the client chat state machine (ChatSessionManager) over a scripted relay,
plus the end-to-end path through the real API with both providers down.
"""
import asyncio
import json

import httpx
import pytest

from prepbuddy.client import ChatSessionManager, RelayClient, StreamState
from prepbuddy.client.models import ROLE_ASSISTANT, ROLE_USER
from prepbuddy.client.relay_client import CONNECTION_APOLOGY
from prepbuddy.core.errors import TransportAbort
from prepbuddy.services.ai.fallback import GREETING_ANSWER
from tests.conftest import BASE_URL


class ScriptedRelay:
    """MockTransport handler: streaming calls get the next scripted body, regular calls get `completion`."""

    def __init__(self, *streams, completion: str = "recovered"):
        self.streams = list(streams)
        self.completion = completion
        self.requests: list[dict] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        self.requests.append(body)
        if body["stream"]:
            return httpx.Response(200, content=self.streams.pop(0))
        return httpx.Response(200, json={"response": self.completion, "timestamp": "2024-01-01T00:00:00Z"})

    @property
    def regular_calls(self) -> int:
        return sum(1 for r in self.requests if not r["stream"])


def _events(*texts: str) -> bytes:
    return b"".join(f"data: {json.dumps({'response': t})}\n\n".encode() for t in texts) + b"data: [DONE]\n\n"


def _manager(relay: ScriptedRelay, seed_welcome: bool = False) -> ChatSessionManager:
    client = RelayClient(base_url=BASE_URL, api_key="test", transport=httpx.MockTransport(relay))
    return ChatSessionManager(client, seed_welcome=seed_welcome)


async def _until(predicate, timeout: float = 2.0) -> None:
    async def poll():
        while not predicate():
            await asyncio.sleep(0.01)

    await asyncio.wait_for(poll(), timeout)


class TestSendMessage:
    @pytest.mark.asyncio
    async def test_streamed_reply_accumulates(self):
        relay = ScriptedRelay(_events("Hello ", "there ", "friend"))
        manager = _manager(relay)

        task = manager.send_message("  hi  ")
        assert manager.messages[-1].role == ROLE_USER
        assert manager.messages[-1].content == "hi"
        assert manager.current_session.state is StreamState.AWAITING_FIRST_BYTE
        await task

        user, reply = manager.messages
        assert reply.role == ROLE_ASSISTANT
        assert reply.content == "Hello there friend"
        assert reply.is_streaming is False
        assert manager.current_session.state is StreamState.IDLE
        assert manager.current_session.title == "hi"
        assert relay.regular_calls == 0

    @pytest.mark.asyncio
    async def test_blank_and_busy_sends_are_ignored(self):
        relay = ScriptedRelay(_events("ok"))
        manager = _manager(relay)

        assert manager.send_message("   ") is None
        task = manager.send_message("first")
        assert manager.send_message("second") is None
        await task
        assert [m.content for m in manager.messages] == ["first", "ok"]

    @pytest.mark.asyncio
    async def test_history_is_last_ten_before_the_new_message(self):
        relay = ScriptedRelay(*[_events(f"a{i}") for i in range(7)])
        manager = _manager(relay)
        for i in range(7):
            await manager.send_message(f"q{i}")

        last = relay.requests[-1]
        assert last["message"] == "q6"
        assert len(last["conversationHistory"]) == 10
        assert last["conversationHistory"][-1]["content"] == "a5"

    @pytest.mark.asyncio
    async def test_long_first_message_sets_truncated_title(self):
        manager = _manager(ScriptedRelay(_events("ok")))
        await manager.send_message("How should I plan one hundred days of DSA practice?")
        assert manager.current_session.title == "How should I plan one hundred ..."


class TestFailures:
    @pytest.mark.asyncio
    async def test_mid_stream_failure_replaces_partial(self):
        async def broken():
            yield b'data: {"response": "partial "}\n\n'
            raise httpx.ReadError("connection reset")

        relay = ScriptedRelay(broken(), completion="full answer")
        manager = _manager(relay)
        await manager.send_message("explain heaps")

        assert [(m.role, m.content) for m in manager.messages] == [
            (ROLE_USER, "explain heaps"),
            (ROLE_ASSISTANT, "full answer"),
        ]
        assert relay.regular_calls == 1
        assert relay.requests[-1]["message"] == "explain heaps"
        assert manager.current_session.state is StreamState.IDLE

    @pytest.mark.asyncio
    async def test_empty_stream_uses_regular_call(self):
        relay = ScriptedRelay(b"data: [DONE]\n\n", completion="non-streamed")
        manager = _manager(relay)
        await manager.send_message("hello")
        assert manager.messages[-1].content == "non-streamed"

    @pytest.mark.asyncio
    async def test_relay_unreachable_gives_apology(self):
        def down(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        client = RelayClient(base_url=BASE_URL, api_key="test", transport=httpx.MockTransport(down))
        manager = ChatSessionManager(client, seed_welcome=False)
        await manager.send_message("hello")
        assert manager.messages[-1].content == CONNECTION_APOLOGY
        assert not manager.is_busy()

    @pytest.mark.asyncio
    async def test_error_status_falls_back(self):
        def handler(request: httpx.Request) -> httpx.Response:
            if json.loads(request.content)["stream"]:
                return httpx.Response(503)
            return httpx.Response(200, json={"response": "after 503"})

        client = RelayClient(base_url=BASE_URL, api_key="test", transport=httpx.MockTransport(handler))
        manager = ChatSessionManager(client, seed_welcome=False)
        await manager.send_message("hello")
        assert manager.messages[-1].content == "after 503"


class TestStopStreaming:
    @pytest.mark.asyncio
    async def test_partial_kept_and_no_fallback_call(self):
        async def hanging():
            yield b'data: {"response": "partial "}\n\n'
            await asyncio.Event().wait()

        relay = ScriptedRelay(hanging())
        manager = _manager(relay)
        task = manager.send_message("long answer please")
        await _until(lambda: manager.current_session.state is StreamState.STREAMING)

        assert manager.stop_streaming() is True
        await asyncio.gather(task, return_exceptions=True)

        reply = manager.messages[-1]
        assert reply.content == "partial "
        assert reply.is_streaming is False
        assert manager.current_session.state is StreamState.IDLE
        assert relay.regular_calls == 0

    @pytest.mark.asyncio
    async def test_abort_flag_checked_between_chunks(self):
        manager = _manager(ScriptedRelay(_events("a ", "b ")))
        abort = asyncio.Event()
        abort.set()
        with pytest.raises(TransportAbort):
            await manager._read_stream(manager.current_session, "q", [], abort)
        assert manager.messages == []

    def test_stop_when_idle_is_noop(self):
        manager = _manager(ScriptedRelay())
        assert manager.stop_streaming() is False


class TestRegenerate:
    @pytest.mark.asyncio
    async def test_replaces_last_reply(self):
        relay = ScriptedRelay(_events("one"), _events("two"))
        manager = _manager(relay)
        await manager.send_message("question")
        old = manager.messages[-1]

        await manager.regenerate_last_response()

        assert [m.content for m in manager.messages] == ["question", "two"]
        assert old not in manager.messages
        assert relay.requests[-1]["message"] == "question"
        assert relay.requests[-1]["conversationHistory"] == []

    @pytest.mark.asyncio
    async def test_noop_unless_user_then_assistant(self):
        manager = _manager(ScriptedRelay(), seed_welcome=True)
        # Welcome session holds a single assistant message
        assert manager.regenerate_last_response() is None
        assert len(manager.messages) == 1


class TestSessions:
    def test_welcome_session_seeded(self):
        manager = _manager(ScriptedRelay(), seed_welcome=True)
        session = manager.current_session
        assert session.id == "welcome"
        assert session.title == "Welcome Chat"
        assert manager.messages[0].role == ROLE_ASSISTANT

    def test_create_switch_delete(self):
        manager = _manager(ScriptedRelay(), seed_welcome=True)
        new = manager.create_session()
        assert manager.sessions[0] is new
        assert manager.current_session_id == new.id
        assert new.messages == []

        assert manager.switch_session("welcome") is True
        assert manager.switch_session("missing") is False
        assert manager.current_session_id == "welcome"

        assert manager.delete_session("welcome") is True
        assert manager.current_session_id == new.id

    def test_deleting_only_session_is_noop(self):
        manager = _manager(ScriptedRelay(), seed_welcome=True)
        assert manager.delete_session("welcome") is False
        assert [s.id for s in manager.sessions] == ["welcome"]

    @pytest.mark.asyncio
    async def test_delete_stops_inflight_stream(self):
        async def hanging():
            yield b'data: {"response": "x"}\n\n'
            await asyncio.Event().wait()

        manager = _manager(ScriptedRelay(hanging()), seed_welcome=True)
        busy = manager.create_session()
        task = manager.send_message("go")
        await _until(lambda: busy.state is StreamState.STREAMING)

        assert manager.delete_session(busy.id) is True
        await asyncio.gather(task, return_exceptions=True)
        assert manager.get_session(busy.id) is None
        assert busy.state is StreamState.IDLE


@pytest.mark.asyncio
async def test_end_to_end_greeting_when_providers_down(api):
    """'hi' through the real API with both providers unreachable: a word-by-word canned greeting."""
    client = RelayClient(base_url=BASE_URL, api_key="test", transport=httpx.ASGITransport(app=api))
    manager = ChatSessionManager(client, seed_welcome=False)

    await manager.send_message("hi")

    assert [m.role for m in manager.messages] == [ROLE_USER, ROLE_ASSISTANT]
    reply = manager.messages[-1]
    assert reply.content.startswith("Hello! 👋 I'm PrepBuddy AI")
    assert reply.content == GREETING_ANSWER + " "
    assert reply.is_streaming is False
    assert not manager.is_busy()
