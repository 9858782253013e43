"""
Chat providers and the relay built on them.
Each provider calls its own endpoint but exposes the same complete/open_stream contract,
so the relay's fallback chain stays provider-agnostic.
"""
from prepbuddy.services.ai.base import ChatProvider
from prepbuddy.services.ai.registry import get_provider, list_providers, provider_chain
from prepbuddy.services.ai.relay import ChatRelay, RelayAnswer
from prepbuddy.services.ai.types import ChatTurn

__all__ = [
    "ChatProvider",
    "ChatRelay",
    "ChatTurn",
    "RelayAnswer",
    "get_provider",
    "list_providers",
    "provider_chain",
]
