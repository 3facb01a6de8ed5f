"""Provider-neutral data model shared by the dispatcher and every adapter."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any, Literal, TypeAlias

from unillm.errors import LLMError


class Provider(str, Enum):
    """Supported LLM backends."""

    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    GEMINI = "gemini"


class ReasoningLevel(str, Enum):
    """Reasoning-effort hint; adapters without reasoning control ignore it."""

    NONE = "none"
    MINIMAL = "minimal"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


Role = Literal["system", "user", "assistant"]
ImageDetail = Literal["auto", "low", "high"]

_ROLES: frozenset[str] = frozenset({"system", "user", "assistant"})


@dataclass(frozen=True)
class TextPart:
    """Plain text content."""

    text: str


@dataclass(frozen=True)
class ImagePart:
    """Image referenced by URL (remote or ``data:`` URL)."""

    url: str
    detail: ImageDetail | None = None


@dataclass(frozen=True)
class FileURLPart:
    """File referenced by URL."""

    url: str


@dataclass(frozen=True)
class FileIdPart:
    """File previously uploaded to the backend, referenced by its opaque id."""

    file_id: str


@dataclass(frozen=True)
class FileDataPart:
    """Inline file payload."""

    file_data: str  # base64
    filename: str


ContentPart: TypeAlias = TextPart | ImagePart | FileURLPart | FileIdPart | FileDataPart
MessageContent: TypeAlias = str | tuple[ContentPart, ...]


@dataclass(frozen=True)
class Message:
    """A single conversational turn."""

    role: Role
    content: MessageContent

    def __post_init__(self) -> None:
        if self.role not in _ROLES:
            raise LLMError(
                f"Unsupported message role: {self.role!r}",
                status_code=400,
                hint="Use one of 'system', 'user', 'assistant'.",
            )
        if not isinstance(self.content, str):
            object.__setattr__(
                self, "content", tuple(_coerce_part(p) for p in self.content)
            )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Message:
        """Build a message from ``{"role": ..., "content": ...}``."""
        return cls(role=data.get("role"), content=data.get("content", ""))  # type: ignore[arg-type]


Prompt: TypeAlias = str | Sequence[Message | Mapping[str, Any]]


def _coerce_part(part: Any) -> ContentPart:
    """Accept content parts as dataclasses or as plain dicts."""
    if isinstance(part, (TextPart, ImagePart, FileURLPart, FileIdPart, FileDataPart)):
        return part
    if isinstance(part, str):
        return TextPart(part)
    if isinstance(part, Mapping):
        kind = part.get("type")
        try:
            return _part_from_mapping(kind, part)
        except KeyError as e:
            raise LLMError(
                f"Content part {kind!r} missing field {e.args[0]!r}", status_code=400
            ) from e
    raise LLMError(
        f"Unsupported content part: {type(part).__name__}", status_code=400
    )


def _part_from_mapping(kind: Any, part: Mapping[str, Any]) -> ContentPart:
    if kind == "text":
        return TextPart(text=part["text"])
    if kind == "image":
        return ImagePart(url=part["url"], detail=part.get("detail"))
    if kind == "file_url":
        return FileURLPart(url=part["url"])
    if kind == "file_id":
        return FileIdPart(file_id=part["file_id"])
    if kind == "file_data":
        return FileDataPart(file_data=part["file_data"], filename=part["filename"])
    raise LLMError(f"Unsupported content part type: {kind!r}", status_code=400)


def normalize_prompt(prompt: Prompt) -> str | list[Message]:
    """Return the prompt as a string or as a list of `Message` in caller order."""
    if isinstance(prompt, str):
        return prompt
    return [m if isinstance(m, Message) else Message.from_dict(m) for m in prompt]


@dataclass(frozen=True)
class Usage:
    """Token accounting; ``total_tokens`` is input plus output."""

    input_tokens: int
    output_tokens: int
    total_tokens: int

    @classmethod
    def from_counts(
        cls, input_tokens: int, output_tokens: int, total_tokens: int | None = None
    ) -> Usage:
        if total_tokens is None:
            total_tokens = input_tokens + output_tokens
        return cls(input_tokens, output_tokens, total_tokens)


@dataclass(frozen=True)
class LLMResponse:
    """Uniform result of a single `generate()` call."""

    content: str
    provider: Provider
    model: str
    usage: Usage | None = None
    #: Set only when a schema was requested and the text parsed as a JSON object.
    structured_output: dict[str, Any] | None = None
    trace_id: str | None = None
