"""Suspension directives yielded by task bodies.

A body gives up control in one of three ways::

    @task
    def worker(sched, other):
        yield 1                       # intermediate value
        yield Yield()                 # let the next registered task run
        total = yield Await(other)    # wait for another task's value
        return total                  # final value, deregisters

Anything yielded that is neither a directive nor a task is an intermediate
value. Yielding a task is shorthand for ``Await(task)``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from coro._vendor import NOTHING

if TYPE_CHECKING:
    from coro.task import Task


@dataclass(frozen=True)
class Yield:
    """Cede the turn to the next task in round-robin order.

    ``value`` is stored in the task's result slot first, when given. If
    another task is awaiting this one, a given value goes to that awaiter
    instead of ceding the turn.
    """

    value: Any = NOTHING

    @property
    def has_value(self) -> bool:
        return self.value is not NOTHING


@dataclass(frozen=True)
class Await:
    """Transfer control to ``task`` until it produces a value.

    With ``propagate=True`` a failure that ended ``task`` is raised inside
    the awaiting body instead of resuming it with ``None``.
    """

    task: Task[Any]
    propagate: bool = False


__all__ = [
    "Await",
    "Yield",
]
