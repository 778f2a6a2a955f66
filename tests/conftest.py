"""
Pytest configuration for coro tests.

Provides a fresh scheduler per test, a shared event recorder for checking
interleavings, and resets the ``coro`` logger afterwards.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator

import pytest

from coro import RoundRobinScheduler, reset_logging


class Recorder:
    """Ordered log of events emitted by task bodies."""

    def __init__(self) -> None:
        self.events: list[str] = []

    def __call__(self, event: str) -> None:
        self.events.append(event)

    def joined(self, sep: str = "") -> str:
        return sep.join(self.events)


@pytest.fixture
def sched() -> RoundRobinScheduler:
    return RoundRobinScheduler()


@pytest.fixture
def record() -> Recorder:
    return Recorder()


@pytest.fixture(autouse=True)
def _restore_coro_logger() -> Iterator[None]:
    yield
    reset_logging()
    logging.getLogger("coro").setLevel(logging.NOTSET)
