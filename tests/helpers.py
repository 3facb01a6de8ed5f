"""Test helpers (small, reusable doubles).

Keep this file tiny and purpose-built: fake SDK objects shaped like the
OpenAI Responses API, without any network access.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import SimpleNamespace
from typing import Any


def message_output(text: str) -> SimpleNamespace:
    """A ``message`` output item whose first part is ``output_text``."""
    return SimpleNamespace(
        type="message",
        role="assistant",
        content=[SimpleNamespace(type="output_text", text=text, annotations=[])],
    )


def completion(
    *items: Any,
    input_tokens: int | None = 12,
    output_tokens: int = 3,
    total_tokens: int | None = None,
) -> SimpleNamespace:
    """A Responses API completion with the given output items."""
    usage = None
    if input_tokens is not None:
        usage = SimpleNamespace(
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            total_tokens=(
                input_tokens + output_tokens if total_tokens is None else total_tokens
            ),
        )
    return SimpleNamespace(id="resp_123", output=list(items), usage=usage)


def text_completion(text: str, **kwargs: Any) -> SimpleNamespace:
    return completion(message_output(text), **kwargs)


@dataclass
class FakeResponses:
    """Scripted ``client.responses``: returns or raises items in order."""

    script: list[Any] = field(default_factory=list)
    calls: list[dict[str, Any]] = field(default_factory=list)

    async def create(self, **kwargs: Any) -> Any:
        self.calls.append(kwargs)
        if not self.script:
            return text_completion("ok")
        item = self.script.pop(0)
        if isinstance(item, BaseException):
            raise item
        return item


@dataclass
class FakeOpenAI:
    api_key: str
    responses: FakeResponses = field(default_factory=FakeResponses)
    max_retries: int = 2


@dataclass
class FakeOpenAIFactory:
    """Stands in for ``AsyncOpenAI``; records every construction."""

    instances: list[FakeOpenAI] = field(default_factory=list)
    script: list[Any] = field(default_factory=list)

    def __call__(self, *, api_key: str, max_retries: int = 2) -> FakeOpenAI:
        client = FakeOpenAI(
            api_key=api_key,
            responses=FakeResponses(self.script),
            max_retries=max_retries,
        )
        self.instances.append(client)
        return client

    @property
    def calls(self) -> list[dict[str, Any]]:
        return [call for client in self.instances for call in client.responses.calls]

    def queue(self, *items: Any) -> None:
        self.script.extend(items)
