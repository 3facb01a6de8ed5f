"""Adapter protocol: the single seam where a backend SDK enters the system."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from unillm.config import LLMConfig
    from unillm.types import LLMResponse, Prompt


@runtime_checkable
class ProviderAdapter(Protocol):
    """Translate a uniform request to one backend and normalize the result.

    Implementations raise only `unillm.errors.LLMError` subclasses.
    """

    async def generate(self, prompt: Prompt, config: LLMConfig) -> LLMResponse:
        """Run one non-streaming generation with a resolved config."""
        ...
