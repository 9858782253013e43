"""Registry of chat providers, in fallback order. Add new providers here."""
import logging

from prepbuddy.services.ai.base import ChatProvider

logger = logging.getLogger(__name__)

_providers: dict[str, ChatProvider] = {}


def register(name: str, provider: ChatProvider) -> None:
    """Register (or replace) a provider. Registration order is fallback order."""
    _providers[name] = provider
    logger.info("Registered chat provider: %s", name)


def get_provider(name: str) -> ChatProvider:
    """Get provider by name. Raises KeyError if unknown."""
    if name not in _providers:
        raise KeyError(f"Unknown provider: {name}. Available: {list(_providers.keys())}")
    return _providers[name]


def list_providers() -> list[str]:
    """List registered provider ids in fallback order."""
    return list(_providers.keys())


def provider_chain() -> list[ChatProvider]:
    """Providers in the order the relay should try them."""
    return list(_providers.values())


def _init_registry() -> None:
    from prepbuddy.config import settings
    from prepbuddy.core.constants import (
        PRIMARY_FREQUENCY_PENALTY,
        PRIMARY_HISTORY_LIMIT,
        PRIMARY_PRESENCE_PENALTY,
        SECONDARY_HISTORY_LIMIT,
    )
    from prepbuddy.services.ai.openai_compatible import OpenAICompatibleProvider

    register(
        "openai",
        OpenAICompatibleProvider(
            provider_id="openai",
            api_url=settings.openai_api_url,
            api_key=settings.openai_api_key,
            model=settings.openai_model,
            history_limit=PRIMARY_HISTORY_LIMIT,
            extra_params={
                "frequency_penalty": PRIMARY_FREQUENCY_PENALTY,
                "presence_penalty": PRIMARY_PRESENCE_PENALTY,
            },
            timeout=settings.ai_timeout_seconds,
        ),
    )
    register(
        "groq",
        OpenAICompatibleProvider(
            provider_id="groq",
            api_url=settings.groq_api_url,
            api_key=settings.groq_api_key,
            model=settings.groq_model,
            history_limit=SECONDARY_HISTORY_LIMIT,
            timeout=settings.ai_timeout_seconds,
        ),
    )


# Register built-in providers on first import
_init_registry()
