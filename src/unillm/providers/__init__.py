"""Provider adapters and the lookup table the dispatcher routes through.

Adding a backend means adding a `Provider` variant and registering one
adapter here; the dispatcher never changes.
"""

from __future__ import annotations

from unillm.providers.base import ProviderAdapter
from unillm.providers.openai import OpenAIAdapter
from unillm.types import Provider

_ADAPTERS: dict[Provider, ProviderAdapter] = {
    Provider.OPENAI: OpenAIAdapter(),
}


def register_adapter(provider: Provider, adapter: ProviderAdapter) -> None:
    """Register (or replace) the adapter handling *provider*."""
    _ADAPTERS[Provider(provider)] = adapter


def unregister_adapter(provider: Provider) -> None:
    """Remove the adapter for *provider*, if any."""
    _ADAPTERS.pop(Provider(provider), None)


def get_adapter(provider: Provider) -> ProviderAdapter | None:
    """Return the adapter for *provider*, or None when none is registered."""
    return _ADAPTERS.get(provider)


__all__ = [
    "OpenAIAdapter",
    "ProviderAdapter",
    "get_adapter",
    "register_adapter",
    "unregister_adapter",
]
