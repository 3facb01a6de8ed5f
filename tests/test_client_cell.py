"""ClientCell: lazy, thread-safe, once-only construction."""

from __future__ import annotations

import threading
import time

import pytest

from unillm.providers._client import ClientCell

pytestmark = pytest.mark.unit


def test_factory_runs_once() -> None:
    cell: ClientCell[object] = ClientCell()
    calls: list[int] = []

    def factory() -> object:
        calls.append(1)
        return object()

    first = cell.get_or_create(factory)
    second = cell.get_or_create(factory)

    assert first is second
    assert calls == [1]
    assert cell.is_initialized


def test_later_factories_are_ignored() -> None:
    cell: ClientCell[str] = ClientCell()

    assert cell.get_or_create(lambda: "first") == "first"
    assert cell.get_or_create(lambda: "second") == "first"


def test_failed_factory_caches_nothing() -> None:
    cell: ClientCell[str] = ClientCell()

    def broken() -> str:
        raise RuntimeError("no key")

    with pytest.raises(RuntimeError):
        cell.get_or_create(broken)

    assert not cell.is_initialized
    assert cell.get_or_create(lambda: "ok") == "ok"


def test_racing_threads_share_one_instance() -> None:
    cell: ClientCell[object] = ClientCell()
    built: list[object] = []
    results: list[object] = []
    barrier = threading.Barrier(16)

    def slow_factory() -> object:
        time.sleep(0.01)
        value = object()
        built.append(value)
        return value

    def worker() -> None:
        barrier.wait()
        results.append(cell.get_or_create(slow_factory))

    threads = [threading.Thread(target=worker) for _ in range(16)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(built) == 1
    assert all(r is built[0] for r in results)


def test_reset_allows_rebuild() -> None:
    cell: ClientCell[str] = ClientCell()
    cell.get_or_create(lambda: "a")

    cell.reset()

    assert not cell.is_initialized
    assert cell.get_or_create(lambda: "b") == "b"
