"""Pytest configuration and fixtures.

Provides environment isolation, client-cell resets and a fake OpenAI SDK.
All fixtures here are autouse unless noted.
"""

from __future__ import annotations

from contextlib import suppress
import os

import pytest

from tests.helpers import FakeOpenAIFactory
from unillm.providers import openai as openai_adapter

OPENAI_MODEL = "gpt-4o-mini"

# =============================================================================
# Environment Isolation (Autouse)
# =============================================================================


@pytest.fixture(autouse=True)
def block_dotenv(monkeypatch):
    """Prevent python-dotenv from loading project .env files during tests."""
    with suppress(Exception):
        monkeypatch.setattr(
            "dotenv.load_dotenv", lambda *_args, **_kwargs: False, raising=False
        )


@pytest.fixture(autouse=True)
def isolate_provider_env(monkeypatch):
    """Clear provider API keys so every test starts without credentials."""
    for key in list(os.environ.keys()):
        if key.startswith(("OPENAI_", "ANTHROPIC_", "GEMINI_")):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture(autouse=True)
def reset_openai_client():
    """Each test gets a fresh process-wide client cell."""
    openai_adapter.reset_client()
    yield
    openai_adapter.reset_client()


# =============================================================================
# Fake SDK (opt-in)
# =============================================================================


@pytest.fixture
def fake_openai(monkeypatch) -> FakeOpenAIFactory:
    """Replace ``AsyncOpenAI`` in the adapter with a scripted fake.

    Also sets ``OPENAI_API_KEY`` so client acquisition succeeds.
    """
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    factory = FakeOpenAIFactory()
    monkeypatch.setattr(openai_adapter, "AsyncOpenAI", factory)
    return factory


@pytest.fixture
def openai_model() -> str:
    return OPENAI_MODEL
