"""Shared adapter-side error mapping.

Adapters funnel every SDK exception through `wrap_provider_error` so the
caller only ever sees the `unillm.errors` taxonomy.
"""

from __future__ import annotations

import asyncio

import httpx
import openai

from unillm.errors import LLMError, LLMTimeoutError, _walk_exception_chain
from unillm.types import Provider

_TIMEOUT_TYPES: tuple[type[BaseException], ...] = (
    openai.APITimeoutError,
    httpx.TimeoutException,
    TimeoutError,  # also asyncio.TimeoutError
)


def extract_status_code(exc: BaseException) -> int | None:
    """Walk the exception chain to find an HTTP status code."""
    for e in _walk_exception_chain(exc):
        for attr in ("status_code", "status"):
            value = getattr(e, attr, None)
            if isinstance(value, int) and 100 <= value <= 599:
                return value
        response = getattr(e, "response", None)
        value = getattr(response, "status_code", None)
        if isinstance(value, int) and 100 <= value <= 599:
            return value
    return None


def is_timeout_error(exc: BaseException) -> bool:
    """Return True if *exc* or anything it was raised from is a request timeout.

    Only explicit ``__cause__`` links count. An error raised while a timeout
    was being handled is not itself a timeout.
    """
    seen: set[int] = set()
    cur: BaseException | None = exc
    while cur is not None and id(cur) not in seen:
        if isinstance(cur, _TIMEOUT_TYPES):
            return True
        seen.add(id(cur))
        cur = cur.__cause__
    return False


def wrap_provider_error(
    exc: BaseException,
    *,
    provider: Provider,
    timeout_ms: int,
    message: str | None = None,
) -> LLMError:
    """Map an SDK exception into the unillm error taxonomy.

    Taxonomy errors are returned unchanged. Cancellation is re-raised.
    """
    if isinstance(exc, asyncio.CancelledError):
        raise exc

    if isinstance(exc, LLMError):
        return exc

    if is_timeout_error(exc):
        return LLMTimeoutError(provider, timeout_ms, cause=exc)

    code = getattr(exc, "code", None)
    return LLMError(
        str(exc) or message or f"{provider.value} generation failed",
        status_code=extract_status_code(exc) or 500,
        provider=provider,
        code=code if isinstance(code, str) else None,
        cause=exc,
    )
