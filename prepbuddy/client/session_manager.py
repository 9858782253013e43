"""
ChatSessionManager: the client's chat state container.

Holds the session list (most recent first), the current session, and at most one in-flight
relay call per session. Per session the state goes idle -> awaiting_first_byte -> streaming -> idle;
stop_streaming() from either busy state also lands in idle.

A send runs as one asyncio task: open the stream, read lines, decode each with decode_line().
The first content chunk creates the assistant message; every later chunk replaces its content with
the accumulated text. Cancellation is cooperative (abort flag checked between chunks, plus task.cancel()
so a pending read is interrupted and the connection is closed).

If the stream fails without a user abort, or ends without any content, the partial assistant message
is dropped and one non-streaming call supplies a fresh assistant message instead.
"""
import asyncio
import logging

from prepbuddy.client.decoder import Content, Done, Raw, decode_line
from prepbuddy.client.models import ROLE_ASSISTANT, ROLE_USER, ChatSession, Message, StreamState, title_from
from prepbuddy.client.relay_client import RelayClient, RelayUnavailable
from prepbuddy.core.constants import CLIENT_HISTORY_LIMIT, WELCOME_SESSION_ID, WELCOME_SESSION_TITLE
from prepbuddy.core.errors import TransportAbort

logger = logging.getLogger(__name__)

WELCOME_MESSAGE = """\
# Welcome to PrepBuddy AI! 🎯

I'm your personal placement preparation assistant. I can help you with:

## 🔧 **Technical Skills**
- **Data Structures & Algorithms** - Master DSA concepts and problem-solving
- **System Design** - Learn scalable architecture patterns
- **Programming** - Java, Python, C++, JavaScript guidance
- **Database Design** - SQL, NoSQL, optimization techniques

## 💼 **Career Preparation**
- **Resume Building** - Create compelling, ATS-optimized resumes
- **Interview Prep** - Technical and behavioral interview strategies
- **Company Research** - Insights for FAANG, startups, and product companies
- **Salary Negotiation** - Tips for getting the best offers

## 🗺️ **Study Planning**
- **Roadmaps** - 30, 60, 100-day preparation plans
- **Resource Recommendations** - Best books, courses, platforms
- **Progress Tracking** - Milestone-based learning approaches
- **Time Management** - Efficient study schedules

## Quick Start Examples:
- "Create a 100-day DSA preparation plan"
- "How to build a strong technical resume?"
- "Explain system design basics"
- "Best strategy for FAANG interviews"

**What would you like to focus on today?**"""

QUICK_QUESTIONS = [
    "Create a 100-day placement preparation roadmap",
    "How to build an ATS-optimized resume?",
    "Explain system design fundamentals",
    "Best DSA practice strategy for interviews",
    "How to prepare for behavioral interviews?",
    "FAANG interview preparation tips",
]


def welcome_session() -> ChatSession:
    return ChatSession(
        id=WELCOME_SESSION_ID,
        title=WELCOME_SESSION_TITLE,
        messages=[Message(role=ROLE_ASSISTANT, content=WELCOME_MESSAGE)],
    )


class ChatSessionManager:
    def __init__(self, client: RelayClient, *, seed_welcome: bool = True):
        self.client = client
        first = welcome_session() if seed_welcome else ChatSession()
        self._sessions: list[ChatSession] = [first]
        self._current_id = first.id

    # --- Read access ---

    @property
    def sessions(self) -> tuple[ChatSession, ...]:
        return tuple(self._sessions)

    @property
    def current_session(self) -> ChatSession:
        return self.get_session(self._current_id)

    @property
    def current_session_id(self) -> str:
        return self._current_id

    @property
    def messages(self) -> list[Message]:
        return self.current_session.messages

    def get_session(self, session_id: str) -> ChatSession | None:
        return next((s for s in self._sessions if s.id == session_id), None)

    def is_busy(self, session_id: str | None = None) -> bool:
        session = self.get_session(session_id or self._current_id)
        return bool(session and session.busy)

    # --- Sessions ---

    def create_session(self) -> ChatSession:
        session = ChatSession()
        self._sessions.insert(0, session)
        self._current_id = session.id
        return session

    def switch_session(self, session_id: str) -> bool:
        if self.get_session(session_id) is None:
            return False
        self._current_id = session_id
        return True

    def delete_session(self, session_id: str) -> bool:
        """Remove a session (stopping its stream). Refused for the only session or an unknown id."""
        session = self.get_session(session_id)
        if session is None or len(self._sessions) <= 1:
            return False
        self.stop_streaming(session_id)
        self._sessions.remove(session)
        if self._current_id == session_id:
            self._current_id = self._sessions[0].id
        return True

    # --- Messages ---

    def send_message(self, text: str) -> asyncio.Task | None:
        """
        Append the user message and start streaming the reply on the current session.
        Returns the running task, or None when text is blank or the session is busy.
        Must be called from a running event loop.
        """
        message = (text or "").strip()
        session = self.current_session
        if not message or session.busy:
            return None
        history = session.messages[-CLIENT_HISTORY_LIMIT:]
        if not session.messages:
            session.title = title_from(message)
        session.messages.append(Message(role=ROLE_USER, content=message))
        return self._start(session, message, history)

    def regenerate_last_response(self) -> asyncio.Task | None:
        """
        Drop the last assistant reply and ask again with the user message before it.
        Only when the current session ends with [user, assistant] and nothing is in flight.
        """
        session = self.current_session
        msgs = session.messages
        if session.busy or len(msgs) < 2:
            return None
        if msgs[-2].role != ROLE_USER or msgs[-1].role != ROLE_ASSISTANT:
            return None
        msgs.pop()
        user_message = msgs[-1]
        history = msgs[:-1][-CLIENT_HISTORY_LIMIT:]
        return self._start(session, user_message.content, history)

    def stop_streaming(self, session_id: str | None = None) -> bool:
        """Abort the in-flight call; streamed text so far stays as the final message."""
        session = self.get_session(session_id or self._current_id)
        if session is None or not session.busy:
            return False
        if session.abort is not None:
            session.abort.set()
        if session.task is not None and not session.task.done():
            session.task.cancel()
        return True

    # --- Stream task ---

    def _start(self, session: ChatSession, message: str, history: list[Message]) -> asyncio.Task:
        session.state = StreamState.AWAITING_FIRST_BYTE
        session.abort = asyncio.Event()
        task = asyncio.get_running_loop().create_task(self._run(session, message, list(history)))
        task.add_done_callback(lambda t: self._settle(session, t))
        session.task = task
        return task

    def _settle(self, session: ChatSession, task: asyncio.Task | None = None) -> None:
        """Back to idle. From the done callback only if _run never got to its own cleanup (cancelled before start)."""
        if task is not None and session.task is not task:
            return
        if session.streaming_message is not None:
            session.streaming_message.is_streaming = False
            session.streaming_message = None
        session.state = StreamState.IDLE
        session.task = None
        session.abort = None

    async def _run(self, session: ChatSession, message: str, history: list[Message]) -> None:
        abort = session.abort
        try:
            try:
                received = await self._read_stream(session, message, history, abort)
            except RelayUnavailable:
                logger.warning("Streaming failed; falling back to a regular call", exc_info=True)
                received = False
            if not received and not abort.is_set():
                self._discard_partial(session)
                text = await self.client.complete(message, history)
                session.messages.append(Message(role=ROLE_ASSISTANT, content=text))
        except TransportAbort:
            logger.info("Streaming aborted by user")
        except asyncio.CancelledError:
            if not abort.is_set():
                raise
            logger.info("Streaming aborted by user while waiting on the relay")
        finally:
            self._settle(session)

    async def _read_stream(
        self,
        session: ChatSession,
        message: str,
        history: list[Message],
        abort: asyncio.Event,
    ) -> bool:
        """Read the stream into the session. True if any content arrived."""
        chunks: list[str] = []
        async with self.client.stream_lines(message, history) as lines:
            async for line in lines:
                if abort.is_set():
                    raise TransportAbort("Stream stopped by user")
                event = decode_line(line)
                if isinstance(event, Done):
                    break
                if not isinstance(event, (Content, Raw)):
                    continue
                if session.streaming_message is None:
                    session.streaming_message = Message(role=ROLE_ASSISTANT, content="", is_streaming=True)
                    session.messages.append(session.streaming_message)
                    session.state = StreamState.STREAMING
                chunks.append(event.text)
                session.streaming_message.content = "".join(chunks)
        return bool(chunks)

    def _discard_partial(self, session: ChatSession) -> None:
        partial = session.streaming_message
        if partial is not None:
            if partial in session.messages:
                session.messages.remove(partial)
            session.streaming_message = None
