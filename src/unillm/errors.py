"""Exception hierarchy for unillm.

Every failure surfaced by `generate()` is an `LLMError` (or a subclass). The
``code`` attribute is the machine-readable kind; ``status_code`` follows HTTP
conventions so callers can map errors onto their own responses.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator

    from unillm.types import Provider


class LLMError(Exception):
    """Base exception for all unillm errors.

    Also raised directly for unclassified backend failures and unsupported
    response shapes.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int = 500,
        provider: Provider | None = None,
        code: str | None = None,
        cause: BaseException | None = None,
        hint: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.provider = provider
        self.code = code
        self.cause = cause
        self.hint = hint


class APIKeyError(LLMError):
    """Backend credential missing at client-acquisition time."""

    def __init__(self, provider: Provider, *, env_var: str | None = None) -> None:
        hint = f"Set the {env_var} environment variable." if env_var else None
        super().__init__(
            f"API key not configured for {provider.value}",
            status_code=401,
            provider=provider,
            code="API_KEY_MISSING",
            hint=hint,
        )


class LLMTimeoutError(LLMError):
    """Backend call exceeded the configured timeout."""

    def __init__(
        self,
        provider: Provider,
        timeout_ms: int,
        *,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(
            f"Request to {provider.value} timed out after {timeout_ms}ms",
            status_code=408,
            provider=provider,
            code="TIMEOUT",
            cause=cause,
            hint="Increase timeout_ms or shorten the prompt.",
        )
        self.timeout_ms = timeout_ms


class UnsupportedProviderError(LLMError):
    """Resolved provider has no registered adapter."""

    def __init__(self, provider: str) -> None:
        super().__init__(
            f"Unsupported LLM provider: {provider}",
            status_code=400,
            code="UNSUPPORTED_PROVIDER",
        )


class ConfigurationError(LLMError):
    """Configuration validation failed."""

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(
            message, status_code=400, code="INVALID_CONFIG", hint=hint
        )


def _walk_exception_chain(exc: BaseException) -> Iterator[BaseException]:
    """Yield *exc* and its ``__cause__``/``__context__`` chain, with cycle protection."""
    seen: set[int] = set()
    stack: list[BaseException] = [exc]
    while stack:
        cur = stack.pop()
        if id(cur) in seen:
            continue
        seen.add(id(cur))
        yield cur

        cause = cur.__cause__
        if isinstance(cause, BaseException):
            stack.append(cause)
        context = cur.__context__
        if isinstance(context, BaseException):
            stack.append(context)
