"""Tracing decorator for backend clients.

`traced()` wraps an SDK client so each generation call runs inside an
OpenTelemetry span. The wrapper forwards every argument and return value
untouched. Without a configured OpenTelemetry SDK the spans are no-ops and
no trace id is reported.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any

from opentelemetry import trace

_TRACER_NAME = "unillm"

_metadata_var: ContextVar[Mapping[str, Any] | None] = ContextVar(
    "trace_metadata", default=None
)
_trace_id_var: ContextVar[str | None] = ContextVar("trace_id", default=None)


@contextmanager
def bind_trace(metadata: Mapping[str, Any] | None) -> Iterator[None]:
    """Attach *metadata* to spans opened in this context and reset the last trace id."""
    meta_token = _metadata_var.set(metadata)
    id_token = _trace_id_var.set(None)
    try:
        yield
    finally:
        _metadata_var.reset(meta_token)
        _trace_id_var.reset(id_token)


def current_trace_id() -> str | None:
    """Trace id of the most recent traced call in this context, if any."""
    return _trace_id_var.get()


def _attribute_value(value: Any) -> Any:
    if isinstance(value, (str, bool, int, float)):
        return value
    if isinstance(value, (list, tuple)):
        return [str(v) for v in value]
    return str(value)


def _span_attributes(kwargs: Mapping[str, Any]) -> dict[str, Any]:
    attributes: dict[str, Any] = {"gen_ai.system": "openai"}
    model = kwargs.get("model")
    if isinstance(model, str):
        attributes["gen_ai.request.model"] = model
    for key, value in (_metadata_var.get() or {}).items():
        if value is not None:
            attributes[f"unillm.metadata.{key}"] = _attribute_value(value)
    return attributes


class _TracedResponses:
    __slots__ = ("_inner",)

    def __init__(self, inner: Any) -> None:
        self._inner = inner

    async def create(self, *args: Any, **kwargs: Any) -> Any:
        tracer = trace.get_tracer(_TRACER_NAME)
        with tracer.start_as_current_span(
            "responses.create", attributes=_span_attributes(kwargs)
        ) as span:
            ctx = span.get_span_context()
            if ctx.is_valid:
                _trace_id_var.set(trace.format_trace_id(ctx.trace_id))
            result = await self._inner.create(*args, **kwargs)
            usage = getattr(result, "usage", None)
            if usage is not None:
                span.set_attribute(
                    "gen_ai.usage.input_tokens", getattr(usage, "input_tokens", 0) or 0
                )
                span.set_attribute(
                    "gen_ai.usage.output_tokens", getattr(usage, "output_tokens", 0) or 0
                )
            return result

    def __getattr__(self, name: str) -> Any:
        return getattr(self._inner, name)


class TracedClient:
    """Proxy around an SDK client that traces ``responses.create``."""

    __slots__ = ("_inner", "responses")

    def __init__(self, inner: Any) -> None:
        self._inner = inner
        self.responses = _TracedResponses(inner.responses)

    @property
    def wrapped(self) -> Any:
        return self._inner

    def __getattr__(self, name: str) -> Any:
        return getattr(self._inner, name)


def traced(client: Any) -> TracedClient:
    """Wrap *client* with the tracing decorator."""
    return TracedClient(client)
