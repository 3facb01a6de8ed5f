"""OpenAI adapter over the Responses API."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from openai import AsyncOpenAI

from unillm import tracing
from unillm.config import (
    API_KEY_ENV_VARS,
    DEFAULT_TEMPERATURE,
    DEFAULT_TIMEOUT_MS,
    resolve_api_key,
)
from unillm.errors import APIKeyError, LLMError
from unillm.providers._client import ClientCell
from unillm.providers._errors import wrap_provider_error
from unillm.providers._utils import schema_format_name, to_strict_schema
from unillm.types import (
    FileDataPart,
    FileIdPart,
    FileURLPart,
    ImagePart,
    LLMResponse,
    Message,
    Provider,
    TextPart,
    Usage,
    normalize_prompt,
)

if TYPE_CHECKING:
    from unillm.config import LLMConfig
    from unillm.types import ContentPart, Prompt

log = logging.getLogger(__name__)

# One client per process. Whether it is traced is decided by the first call
# that builds it and cannot change afterwards.
_client_cell: ClientCell[Any] = ClientCell()


def _build_client(tracing_enabled: bool) -> Any:
    api_key = resolve_api_key(Provider.OPENAI)
    if not api_key:
        raise APIKeyError(Provider.OPENAI, env_var=API_KEY_ENV_VARS[Provider.OPENAI])
    # One attempt per call so timeout_ms bounds the whole request.
    client = AsyncOpenAI(api_key=api_key, max_retries=0)
    log.debug("Created OpenAI client (tracing=%s)", tracing_enabled)
    return tracing.traced(client) if tracing_enabled else client


def get_client(tracing_enabled: bool) -> Any:
    """Return the process-wide OpenAI client, creating it on first use."""
    return _client_cell.get_or_create(lambda: _build_client(tracing_enabled))


def reset_client() -> None:
    """Forget the cached client so the next call builds a fresh one."""
    _client_cell.reset()


class OpenAIAdapter:
    """Generate with OpenAI and normalize into `LLMResponse`."""

    provider = Provider.OPENAI

    async def generate(self, prompt: Prompt, config: LLMConfig) -> LLMResponse:
        """Run one non-streaming generation through ``responses.create``."""
        timeout_ms = config.timeout_ms or DEFAULT_TIMEOUT_MS
        try:
            client = get_client(
                True if config.tracing_enabled is None else config.tracing_enabled
            )
            params = build_request(prompt, config)

            with tracing.bind_trace(config.trace_metadata):
                completion = await client.responses.create(
                    **params, timeout=timeout_ms / 1000
                )
                trace_id = tracing.current_trace_id()

            content = extract_output_text(completion)
            structured = (
                _parse_structured(content) if config.schema is not None and content else None
            )
            return LLMResponse(
                content=content,
                provider=Provider.OPENAI,
                model=config.model,
                usage=_extract_usage(completion),
                structured_output=structured,
                trace_id=trace_id,
            )
        except LLMError:
            raise
        except Exception as e:
            raise wrap_provider_error(
                e,
                provider=Provider.OPENAI,
                timeout_ms=timeout_ms,
                message="OpenAI generation failed",
            ) from e


def build_request(prompt: Prompt, config: LLMConfig) -> dict[str, Any]:
    """Translate a prompt and resolved config into ``responses.create`` kwargs."""
    params: dict[str, Any] = {
        "model": config.model,
        "input": format_input(prompt, config.system_prompt),
        "temperature": (
            DEFAULT_TEMPERATURE if config.temperature is None else config.temperature
        ),
    }
    if config.top_p is not None:
        params["top_p"] = config.top_p
    if config.max_tokens is not None:
        params["max_output_tokens"] = config.max_tokens
    if config.reasoning is not None:
        params["reasoning"] = {"effort": config.reasoning.value}
    if config.schema is not None:
        params["text"] = {
            "format": {
                "type": "json_schema",
                "name": schema_format_name(config.schema),
                "schema": to_strict_schema(config.schema),
                "strict": True,
            }
        }
    return params


def format_input(prompt: Prompt, system_prompt: str | None = None) -> list[dict[str, Any]]:
    """Build the ordered input item list: system turn, then the conversation."""
    items: list[dict[str, Any]] = []
    if system_prompt:
        items.append({"role": "system", "content": system_prompt})

    turns = normalize_prompt(prompt)
    if isinstance(turns, str):
        items.append({"role": "user", "content": turns})
        return items

    for message in turns:
        items.append(_format_message(message))
    return items


def _format_message(message: Message) -> dict[str, Any]:
    if isinstance(message.content, str):
        return {"role": message.role, "content": message.content}
    return {
        "role": message.role,
        "content": [_format_part(part, message.role) for part in message.content],
    }


def _format_part(part: ContentPart, role: str) -> dict[str, Any]:
    """Convert a content part into a Responses API content item."""
    if isinstance(part, TextPart):
        text_type = "output_text" if role == "assistant" else "input_text"
        return {"type": text_type, "text": part.text}
    if isinstance(part, ImagePart):
        return {
            "type": "input_image",
            "image_url": part.url,
            "detail": part.detail or "auto",
        }
    if isinstance(part, FileURLPart):
        return {"type": "input_file", "file_url": part.url}
    if isinstance(part, FileIdPart):
        return {"type": "input_file", "file_id": part.file_id}
    if isinstance(part, FileDataPart):
        return {
            "type": "input_file",
            "file_data": part.file_data,
            "filename": part.filename,
        }
    raise LLMError(
        f"Unsupported content part type: {type(part).__name__}",
        status_code=400,
        provider=Provider.OPENAI,
    )


def extract_output_text(completion: Any) -> str:
    """Return the text of the first output item.

    Only a ``message`` item whose first content part is ``output_text`` is
    accepted; tool calls, refusals and empty output are rejected.
    """
    output = getattr(completion, "output", None) or []
    first = output[0] if output else None
    if first is not None and getattr(first, "type", None) == "message":
        content = getattr(first, "content", None) or []
        if content and getattr(content[0], "type", None) == "output_text":
            return content[0].text or ""

    raise LLMError(
        "Unsupported OpenAI response format",
        status_code=500,
        provider=Provider.OPENAI,
    )


def _parse_structured(content: str) -> dict[str, Any] | None:
    try:
        parsed = json.loads(content)
    except ValueError as e:
        log.warning("Failed to parse OpenAI structured output: %s", e)
        return None
    if not isinstance(parsed, dict):
        log.warning(
            "OpenAI structured output is %s, expected a JSON object",
            type(parsed).__name__,
        )
        return None
    return parsed


def _extract_usage(completion: Any) -> Usage | None:
    usage = getattr(completion, "usage", None)
    if usage is None:
        return None
    total = getattr(usage, "total_tokens", None)
    return Usage.from_counts(
        int(getattr(usage, "input_tokens", 0) or 0),
        int(getattr(usage, "output_tokens", 0) or 0),
        int(total) if total is not None else None,
    )
