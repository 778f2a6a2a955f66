"""
Driver helpers for running a root task.

Example:
    >>> from coro import RoundRobinScheduler, run_until_complete, task
    >>> sched = RoundRobinScheduler()
    >>> @task
    ... def answer(sched):
    ...     yield "thinking"
    ...     return 42
    >>> run_until_complete(answer(sched)).unwrap()
    42
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any, TypeVar

from coro._vendor import Result
from coro.task import Task

T = TypeVar("T")


def drive(root: Task[T]) -> Iterator[Any]:
    """Resume ``root`` until it finishes, yielding each fetched value.

    The last value yielded is the final one. Stops early if the task is
    closed while being driven.
    """
    while not root.state.finished:
        yield root.resume_and_fetch()


def run_until_complete(root: Task[T]) -> Result[T]:
    """Drive ``root`` to completion and return its outcome."""
    for _ in drive(root):
        pass
    return root.result()


__all__ = [
    "drive",
    "run_until_complete",
]
