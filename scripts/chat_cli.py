#!/usr/bin/env python3
"""
Terminal chat against the AI assistant relay, with multiple sessions and live streaming.

  PREPBUDDY_API_URL=http://localhost:8000 poetry run python scripts/chat_cli.py

Commands: /new, /list, /switch <n>, /delete <n>, /regen, /quick, /export, /quit. Ctrl-C stops a reply in flight.
"""
import asyncio
import json
import signal
import sys

from prepbuddy.client import QUICK_QUESTIONS, ChatSessionManager, RelayClient
from prepbuddy.client.models import ROLE_ASSISTANT

POLL_SECONDS = 0.05


async def _follow(manager: ChatSessionManager, task: asyncio.Task) -> None:
    """Print the reply as it grows. Ctrl-C aborts the stream and keeps what arrived."""
    session = manager.current_session
    start = len(session.messages)
    printed = ""
    loop = asyncio.get_running_loop()
    loop.add_signal_handler(signal.SIGINT, manager.stop_streaming, session.id)
    try:
        while not task.done():
            await asyncio.sleep(POLL_SECONDS)
            partial = session.streaming_message
            if partial is not None and len(partial.content) > len(printed):
                sys.stdout.write(partial.content[len(printed):])
                sys.stdout.flush()
                printed = partial.content
        await asyncio.gather(task, return_exceptions=True)
    finally:
        loop.remove_signal_handler(signal.SIGINT)

    replies = [m for m in session.messages[start:] if m.role == ROLE_ASSISTANT]
    text = replies[-1].content if replies else ""
    if text.startswith(printed):
        sys.stdout.write(text[len(printed):])
    else:
        # The stream failed and its partial text was replaced by a regular answer
        sys.stdout.write("\n" + text)
    print()


def _list(manager: ChatSessionManager) -> None:
    for i, s in enumerate(manager.sessions, 1):
        marker = "*" if s.id == manager.current_session_id else " "
        print(f"{marker} {i}. {s.title} ({len(s.messages)} messages)")


def _pick(manager: ChatSessionManager, arg: str) -> str | None:
    try:
        return manager.sessions[int(arg) - 1].id
    except (ValueError, IndexError):
        print("No such session")
        return None


async def main() -> int:
    manager = ChatSessionManager(RelayClient())
    if manager.messages:
        print(manager.messages[0].content)
    while True:
        try:
            line = (await asyncio.to_thread(input, "\nyou> ")).strip()
        except EOFError:
            return 0
        if not line:
            continue
        cmd, _, arg = line.partition(" ")
        if cmd == "/quit":
            return 0
        if cmd == "/new":
            manager.create_session()
            print("New chat")
            continue
        if cmd == "/list":
            _list(manager)
            continue
        if cmd in ("/switch", "/delete"):
            sid = _pick(manager, arg)
            if sid is None:
                continue
            ok = manager.switch_session(sid) if cmd == "/switch" else manager.delete_session(sid)
            print("OK" if ok else "Not allowed")
            continue
        if cmd == "/export":
            print(json.dumps(manager.current_session.to_dict(), ensure_ascii=False, indent=2))
            continue
        if cmd == "/quick":
            for q in QUICK_QUESTIONS:
                print("-", q)
            continue
        task = manager.regenerate_last_response() if cmd == "/regen" else manager.send_message(line)
        if task is None:
            print("Nothing to send (busy, or nothing to regenerate)")
            continue
        sys.stdout.write("buddy> ")
        await _follow(manager, task)


if __name__ == "__main__":
    try:
        sys.exit(asyncio.run(main()))
    except KeyboardInterrupt:
        sys.exit(0)
