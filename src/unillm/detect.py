"""Provider detection from free-text model identifiers."""

from __future__ import annotations

import logging

from unillm.types import Provider

log = logging.getLogger(__name__)

# Checked in order; the first provider with a matching marker wins.
_MARKERS: tuple[tuple[Provider, tuple[str, ...]], ...] = (
    (Provider.OPENAI, ("gpt", "o1", "o3", "davinci", "curie", "babbage", "ada")),
    (Provider.ANTHROPIC, ("claude",)),
    (Provider.GEMINI, ("gemini", "palm")),
)


def detect_provider(model: str) -> Provider:
    """Infer the provider for *model* by substring match.

    Never raises: unknown identifiers log a warning and fall back to OpenAI.
    """
    model_lower = model.lower()
    for provider, markers in _MARKERS:
        if any(marker in model_lower for marker in markers):
            return provider

    log.warning("Could not detect provider for model %r, defaulting to openai", model)
    return Provider.OPENAI
