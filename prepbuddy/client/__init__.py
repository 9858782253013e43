"""Async chat client: session state machine over the relay's streaming endpoint."""
from prepbuddy.client.decoder import Content, Done, Raw, Skip, decode_line
from prepbuddy.client.models import ChatSession, Message, StreamState
from prepbuddy.client.relay_client import RelayClient, RelayUnavailable
from prepbuddy.client.session_manager import QUICK_QUESTIONS, ChatSessionManager

__all__ = [
    "ChatSession",
    "ChatSessionManager",
    "Content",
    "Done",
    "Message",
    "QUICK_QUESTIONS",
    "Raw",
    "RelayClient",
    "RelayUnavailable",
    "Skip",
    "StreamState",
    "decode_line",
]
