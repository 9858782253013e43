"""Tests for the chat provider registry."""
import pytest

from prepbuddy.services.ai.registry import get_provider, list_providers, provider_chain


def test_builtin_fallback_order():
    assert list_providers()[:2] == ["openai", "groq"]
    assert [p.provider_id for p in provider_chain()][:2] == ["openai", "groq"]


def test_tier_parameters():
    primary = get_provider("openai")
    secondary = get_provider("groq")
    assert (primary.history_limit, secondary.history_limit) == (10, 8)
    assert primary.extra_params == {"frequency_penalty": 0.1, "presence_penalty": 0.1}
    assert secondary.extra_params == {}


def test_unknown_provider():
    with pytest.raises(KeyError):
        get_provider("nope")
