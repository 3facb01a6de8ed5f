"""Configuration: frozen LLMConfig plus default resolution."""

from __future__ import annotations

from dataclasses import dataclass, replace
import os
from typing import Any

from dotenv import load_dotenv
from pydantic import BaseModel

from unillm.detect import detect_provider
from unillm.errors import ConfigurationError, UnsupportedProviderError
from unillm.types import Provider, ReasoningLevel

load_dotenv()

DEFAULT_TIMEOUT_MS = 90_000
DEFAULT_TEMPERATURE = 0.7

# Provider-specific API key environment variable names
API_KEY_ENV_VARS: dict[Provider, str] = {
    Provider.OPENAI: "OPENAI_API_KEY",
    Provider.ANTHROPIC: "ANTHROPIC_API_KEY",
    Provider.GEMINI: "GEMINI_API_KEY",
}


@dataclass(frozen=True)
class LLMConfig:
    """Immutable request intent for one dispatcher.

    Only ``model`` is required. ``provider`` is detected from the model name,
    ``timeout_ms`` and ``tracing_enabled`` are defaulted by `resolve_config`.

    Example:
        config = LLMConfig(model="gpt-4o-mini", temperature=0.2)
    """

    model: str
    provider: Provider | None = None
    #: Sampling temperature, 0.0-2.0. Adapters default to 0.7 when unset.
    temperature: float | None = None
    max_tokens: int | None = None
    top_p: float | None = None
    #: Prepended as a system turn.
    system_prompt: str | None = None
    #: JSON Schema dict, or a pydantic ``BaseModel`` subclass, for structured output.
    schema: dict[str, Any] | None = None
    timeout_ms: int | None = None
    reasoning: ReasoningLevel | None = None
    tracing_enabled: bool | None = None
    #: Free-form trace attributes (conventionally user_id, session_id, tags).
    trace_metadata: dict[str, Any] | None = None

    def __post_init__(self) -> None:
        """Coerce enum-like strings and validate ranges early for clear errors."""
        if not isinstance(self.model, str) or not self.model.strip():
            raise ConfigurationError(
                "model must be a non-empty string",
                hint="Pass model='gpt-4o-mini' or another model identifier.",
            )

        if self.provider is not None and not isinstance(self.provider, Provider):
            try:
                object.__setattr__(self, "provider", Provider(str(self.provider).lower()))
            except ValueError:
                raise UnsupportedProviderError(str(self.provider)) from None

        if self.reasoning is not None and not isinstance(self.reasoning, ReasoningLevel):
            try:
                object.__setattr__(
                    self, "reasoning", ReasoningLevel(str(self.reasoning).lower())
                )
            except ValueError:
                raise ConfigurationError(
                    f"Unknown reasoning level: {self.reasoning!r}",
                    hint="Use one of: " + ", ".join(r.value for r in ReasoningLevel),
                ) from None

        if isinstance(self.schema, type) and issubclass(self.schema, BaseModel):
            object.__setattr__(self, "schema", self.schema.model_json_schema())
        elif self.schema is not None and not isinstance(self.schema, dict):
            raise ConfigurationError(
                "schema must be a dict or a pydantic BaseModel subclass",
                hint="Pass schema={'type': 'object', 'properties': {...}}.",
            )

        if self.temperature is not None and not 0.0 <= self.temperature <= 2.0:
            raise ConfigurationError(
                f"temperature must be between 0.0 and 2.0, got {self.temperature}"
            )
        if self.top_p is not None and not 0.0 <= self.top_p <= 1.0:
            raise ConfigurationError(f"top_p must be between 0.0 and 1.0, got {self.top_p}")
        if self.max_tokens is not None and self.max_tokens < 1:
            raise ConfigurationError(f"max_tokens must be >= 1, got {self.max_tokens}")
        if self.timeout_ms is not None and self.timeout_ms < 0:
            raise ConfigurationError(
                f"timeout_ms must be >= 0, got {self.timeout_ms}",
                hint="Timeouts are in milliseconds; 0 selects the default.",
            )


def resolve_config(config: LLMConfig) -> LLMConfig:
    """Return a copy of *config* with provider, timeout and tracing populated.

    Idempotent: resolving an already-resolved config yields an equal config.
    """
    return replace(
        config,
        provider=config.provider or detect_provider(config.model),
        timeout_ms=config.timeout_ms or DEFAULT_TIMEOUT_MS,
        tracing_enabled=True if config.tracing_enabled is None else config.tracing_enabled,
    )


def resolve_api_key(provider: Provider) -> str | None:
    """Read the provider's API key from the environment, if set."""
    return os.environ.get(API_KEY_ENV_VARS[provider]) or None
