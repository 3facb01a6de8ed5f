"""Dispatcher facade and one-shot convenience functions."""

from __future__ import annotations

import copy
from typing import TYPE_CHECKING, Any

from unillm.config import LLMConfig, resolve_config
from unillm.errors import ConfigurationError, LLMError, UnsupportedProviderError
from unillm.providers import get_adapter

if TYPE_CHECKING:
    from unillm.types import LLMResponse, Prompt


class LLM:
    """Unified entry point routing `generate()` to the provider's adapter.

    The configuration is resolved once at construction: the provider is
    detected from the model name when not given, and timeout/tracing get
    their defaults. The instance keeps a private copy, so later changes to
    the caller's objects have no effect.

    Example:
        llm = LLM(model="gpt-4o-mini", system_prompt="Be brief.")
        response = await llm.generate("What is 2+2?")
        print(response.content)
    """

    def __init__(self, config: LLMConfig | None = None, **options: Any) -> None:
        """Build from an `LLMConfig` or from keyword options (``model=...``)."""
        if config is None:
            config = LLMConfig(**options)
        elif options:
            raise ConfigurationError(
                "Pass either an LLMConfig or keyword options, not both",
                hint="Use dataclasses.replace(config, ...) to override fields.",
            )
        self._config = resolve_config(copy.deepcopy(config))

    async def generate(self, prompt: Prompt) -> LLMResponse:
        """Generate a non-streaming response for a string or message list.

        Raises:
            UnsupportedProviderError: No adapter is registered for the provider.
            LLMError: Any backend failure, already normalized by the adapter.
        """
        provider = self._config.provider
        if provider is None:
            raise LLMError("Configuration was not resolved: provider is missing")
        adapter = get_adapter(provider)
        if adapter is None:
            raise UnsupportedProviderError(provider.value)
        return await adapter.generate(prompt, copy.deepcopy(self._config))

    def get_config(self) -> LLMConfig:
        """Return a copy of the resolved configuration."""
        return copy.deepcopy(self._config)

    @property
    def config(self) -> LLMConfig:
        return self.get_config()


def create_llm(config: LLMConfig | None = None, **options: Any) -> LLM:
    """Create an `LLM` dispatcher."""
    return LLM(config, **options)


async def generate(model: str, prompt: Prompt, **options: Any) -> str:
    """Generate text with a one-off dispatcher and return only the content.

    Example:
        answer = await generate("gpt-4o-mini", "What is 2+2?", temperature=0)
    """
    llm = create_llm(model=model, **options)
    response = await llm.generate(prompt)
    return response.content


async def generate_structured(
    model: str,
    prompt: Prompt,
    schema: dict[str, Any] | type[Any],
    **options: Any,
) -> dict[str, Any]:
    """Generate JSON matching *schema* and return the parsed object.

    Returns ``{}`` when the backend text could not be parsed as a JSON object,
    so an empty dict means "parse failed or output omitted", not "empty result".
    """
    llm = create_llm(model=model, schema=schema, **options)
    response = await llm.generate(prompt)
    return response.structured_output or {}
