"""coro error types.

Only usage errors that are cheap to detect are raised. Failures inside task
bodies are absorbed at the task boundary and reported through
``Task.result()`` instead (see ``coro.task``).
"""

from __future__ import annotations

from typing import Any


class CoroError(Exception):
    """Base class of all errors raised by coro itself."""


class MissingSchedulerError(CoroError, TypeError):
    """Raised when a task is created without a scheduler.

    A task body must take the scheduler as its first positional parameter
    (the second one for methods, after ``self``)::

        @task
        def worker(sched: RoundRobinScheduler, n: int):
            ...

        worker(sched, 3)   # fine
        worker(3)          # MissingSchedulerError
    """

    def __init__(self, func_name: str) -> None:
        self.func_name = func_name
        super().__init__(
            f"{func_name}() needs a scheduler as its first argument\n"
            f"Hint: call it as {func_name}(scheduler, ...)"
        )


class UnknownTokenError(CoroError, KeyError):
    """Raised when a scheduler is given a token it does not hold."""

    def __init__(self, token: Any) -> None:
        self.token = token
        super().__init__(f"Token not registered: {token!r}")

    def __str__(self) -> str:
        return str(self.args[0])


class TaskStateError(CoroError, RuntimeError):
    """Raised when an operation is not valid in the task's current state."""


class AwaitError(CoroError, RuntimeError):
    """Raised inside a task body when an await cannot be set up."""


class InvalidSuspensionError(CoroError, RuntimeError):
    """Raised when a task body suspends while it is being torn down."""


class ConfigError(CoroError, ValueError):
    """Raised for malformed configuration values."""


__all__ = [
    "AwaitError",
    "ConfigError",
    "CoroError",
    "InvalidSuspensionError",
    "MissingSchedulerError",
    "TaskStateError",
    "UnknownTokenError",
]
