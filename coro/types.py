"""Core types shared by the scheduler and tasks.

This module provides:
- Token: opaque registration handle returned by a scheduler
- ERASED: the terminal token value of a deregistered task
- TaskState: lifecycle states of a task
- Continuation: anything a scheduler can hand control to
- Transfer: what a single step returns to the trampoline
"""

from __future__ import annotations

from enum import Enum, auto
from typing import Final, NewType, Optional, Protocol, runtime_checkable

Token = NewType("Token", int)

ERASED: Final[Token] = Token(0)


class TaskState(Enum):
    """Lifecycle state of a task."""

    UNSTARTED = auto()
    """Constructed and registered, body not entered yet."""

    RUNNING = auto()
    """Body is executing right now."""

    SUSPENDED_YIELDED = auto()
    """Body gave up control with a value or a round-robin yield."""

    SUSPENDED_AWAITING = auto()
    """Body is waiting for another task to produce a value."""

    COMPLETED = auto()
    """Body finished; the result slot is frozen."""

    DESTROYED = auto()
    """Task was closed by its owner; the body was torn down."""

    @property
    def finished(self) -> bool:
        return self in (TaskState.COMPLETED, TaskState.DESTROYED)


@runtime_checkable
class Continuation(Protocol):
    """A resumable computation the trampoline can step."""

    name: str

    def step(self) -> Optional[Continuation]:
        """Run until the next suspension point and return who runs next."""
        ...


Transfer = Optional[Continuation]


__all__ = [
    "ERASED",
    "Continuation",
    "TaskState",
    "Token",
    "Transfer",
]
