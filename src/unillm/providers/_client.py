"""Process-wide, once-initialized holder for a backend SDK client."""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING, Generic, TypeVar

if TYPE_CHECKING:
    from collections.abc import Callable

T = TypeVar("T")


class ClientCell(Generic[T]):
    """Lazily build a client exactly once, even under concurrent first use.

    The factory runs under the lock, so racing callers all receive the
    instance built by whichever caller got there first. Factory arguments
    seen by later callers are ignored for the lifetime of the cell.
    """

    def __init__(self) -> None:
        self._value: T | None = None
        self._lock = threading.Lock()

    def get_or_create(self, factory: Callable[[], T]) -> T:
        """Return the cached client, building it with *factory* on first use.

        If *factory* raises, nothing is cached and the next call retries.
        """
        value = self._value
        if value is not None:
            return value
        with self._lock:
            if self._value is None:
                self._value = factory()
            return self._value

    @property
    def is_initialized(self) -> bool:
        return self._value is not None

    def reset(self) -> None:
        """Drop the cached client. Intended for tests."""
        with self._lock:
            self._value = None
