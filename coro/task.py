"""
Cooperative tasks and the trampoline that drives them.

A task wraps a generator body bound to one scheduler. Each call to
:meth:`Task.step` runs the body up to its next suspension point and returns
the continuation that should run next (or ``None`` when the chain is over).
:func:`trampoline` follows those transfers in a loop, so an arbitrarily long
chain of yields, awaits and completions runs at constant stack depth.

Example::

    sched = RoundRobinScheduler()

    @task
    def count(sched, label, n):
        for i in range(n):
            print(label, i)
            yield Yield()
        return label

    a = count(sched, "a", 2)
    b = count(sched, "b", 2)
    a()             # a 0, b 0, a 1, b 1
    assert a.done and b.done
"""

from __future__ import annotations

import inspect
import logging
import types
from collections.abc import Callable, Generator
from typing import Any, Generic, ParamSpec, TypeVar

from coro._vendor import Err, Ok, Result
from coro.errors import (
    AwaitError,
    InvalidSuspensionError,
    MissingSchedulerError,
    TaskStateError,
)
from coro.scheduler import Scheduler
from coro.suspend import Await, Yield
from coro.types import ERASED, Continuation, TaskState, Token, Transfer

logger = logging.getLogger(__name__)

P = ParamSpec("P")
T = TypeVar("T")

TaskBody = Generator[Any, Any, T]


def trampoline(start: Continuation) -> None:
    """Step continuations until one of them ends the chain."""
    current: Transfer = start
    while current is not None:
        current = current.step()


class Task(Generic[T]):
    """A suspendable computation registered with one scheduler.

    The task registers itself on construction and stays registered until its
    body completes or the task is closed. The result slot holds the latest
    intermediate value, then the final one; it is ``None`` before the first
    value and after a failed body.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        body: TaskBody[T],
        *,
        name: str | None = None,
    ) -> None:
        if not inspect.isgenerator(body):
            raise TypeError(f"body must be a generator, got {type(body).__name__}")
        self.name: str = name or body.__qualname__
        if not isinstance(scheduler, Scheduler):
            raise MissingSchedulerError(self.name)
        self._scheduler = scheduler
        self._body = body
        self._state = TaskState.UNSTARTED
        self._current: Any = None
        self._outcome: Result[Any] | None = None
        self._inbox: Result[Any] = Ok(None)
        self._awaiting: Task[Any] | None = None
        self._awaiter: Task[Any] | None = None
        self._propagate = False
        self._token: Token = ERASED
        self._token = scheduler.insert(self)

    # ------------------------------------------------------------------
    # Driver API
    # ------------------------------------------------------------------

    def resume_and_fetch(self) -> Any:
        """Run this task's chain to its end and return the result slot.

        A completed or closed task is not resumed; its frozen slot is
        returned as is.
        """
        if self._state.finished:
            return self._current
        if self._state is TaskState.RUNNING:
            raise TaskStateError(f"task {self.name} cannot resume itself")
        trampoline(self)
        return self._current

    __call__ = resume_and_fetch

    def is_done(self) -> bool:
        return self._state is TaskState.COMPLETED

    @property
    def done(self) -> bool:
        return self.is_done()

    @property
    def closed(self) -> bool:
        return self._state is TaskState.DESTROYED

    @property
    def state(self) -> TaskState:
        return self._state

    @property
    def current(self) -> Any:
        """The result slot, read without resuming."""
        return self._current

    @property
    def token(self) -> Token:
        return self._token

    @property
    def scheduler(self) -> Scheduler:
        return self._scheduler

    @property
    def exception(self) -> BaseException | None:
        """The failure or interruption that ended the body, if any."""
        if self._outcome is not None:
            return self._outcome.err()
        return None

    def result(self) -> Result[T]:
        """Outcome of the body: ``Ok(final value)`` or ``Err(failure)``.

        Raises:
            TaskStateError: the body has not completed.
        """
        if self._outcome is None:
            raise TaskStateError(f"task {self.name} has not completed")
        return self._outcome

    def close(self) -> None:
        """Deregister the task, then tear down its body.

        ``finally`` blocks of a suspended body run here and must not suspend
        again. Closing an already closed task does nothing.
        """
        if self._state is TaskState.RUNNING:
            raise TaskStateError(f"task {self.name} cannot be closed while running")
        if self._state is TaskState.DESTROYED:
            return
        if self._token != ERASED:
            token, self._token = self._token, ERASED
            self._scheduler.erase(token)
        self._state = TaskState.DESTROYED
        if self._awaiting is not None:
            self._awaiting._awaiter = None
            self._awaiting = None
        self._hand_back()
        logger.debug("task %s closed", self.name)
        try:
            self._body.throw(GeneratorExit)
        except (GeneratorExit, StopIteration):
            pass
        else:
            message = f"task {self.name} suspended while being closed"
            try:
                self._body.close()
            except RuntimeError as exc:
                raise InvalidSuspensionError(message) from exc
            raise InvalidSuspensionError(message)

    def __enter__(self) -> Task[T]:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"Task({self.name!r}, state={self._state.name}, token={self._token})"

    # ------------------------------------------------------------------
    # Trampoline step
    # ------------------------------------------------------------------

    def step(self) -> Transfer:
        """Run the body to its next suspension point and pick a successor."""
        state = self._state
        if state is TaskState.SUSPENDED_AWAITING:
            # keep the awaited task moving when our turn comes up
            return self._awaiting
        if state is TaskState.RUNNING or state.finished:
            logger.debug("task %s is %s, chain ends", self.name, state.name)
            return None
        return self._run()

    def _run(self) -> Transfer:
        self._state = TaskState.RUNNING
        inbox, self._inbox = self._inbox, Ok(None)
        while True:
            try:
                if isinstance(inbox, Err):
                    directive = self._body.throw(inbox.error)
                else:
                    directive = self._body.send(inbox.value)
            except StopIteration as stop:
                return self._complete(Ok(stop.value))
            except Exception as exc:
                logger.exception("task %s failed", self.name)
                return self._complete(Err(exc))
            except BaseException as exc:
                # interrupted: record it, deregister, let the driver see it
                self._complete(Err(exc))
                raise

            if isinstance(directive, Task):
                directive = Await(directive)
            if isinstance(directive, Await):
                pending = self._start_await(directive)
                if pending is None:
                    return directive.task
                inbox = pending
                continue
            if isinstance(directive, Yield):
                return self._yield(directive)
            return self._produce(directive)

    def _yield(self, directive: Yield) -> Transfer:
        if directive.has_value:
            self._current = directive.value
            if self._awaiter is not None:
                self._state = TaskState.SUSPENDED_YIELDED
                return self._hand_back()
        self._state = TaskState.SUSPENDED_YIELDED
        following, _ = self._scheduler.resume(self._token)
        return following

    def _produce(self, value: Any) -> Transfer:
        self._current = value
        self._state = TaskState.SUSPENDED_YIELDED
        return self._hand_back()

    def _start_await(self, directive: Await) -> Result[Any] | None:
        """Link this task to the awaited one.

        Returns ``None`` when control must transfer to the awaited task, or
        the value to resume the body with right away.
        """
        other = directive.task
        if not isinstance(other, Task):
            return Err(AwaitError(f"cannot await {other!r}: not a task"))
        if other is self:
            return Err(AwaitError(f"task {self.name} cannot await itself"))
        if other._state.finished:
            return other._outcome_for(directive.propagate)
        if other._state is TaskState.RUNNING:
            return Err(AwaitError(f"task {other.name} is running"))
        if other._awaiter is not None:
            return Err(
                AwaitError(f"task {other.name} is already awaited by {other._awaiter.name}")
            )
        link = other._awaiting
        while link is not None:
            if link is self:
                return Err(AwaitError(f"awaiting {other.name} would form a cycle"))
            link = link._awaiting
        other._awaiter = self
        self._awaiting = other
        self._propagate = directive.propagate
        self._state = TaskState.SUSPENDED_AWAITING
        logger.debug("task %s awaits %s", self.name, other.name)
        return None

    def _complete(self, outcome: Result[Any]) -> Transfer:
        self._outcome = outcome
        self._current = outcome.ok()
        self._state = TaskState.COMPLETED
        token, self._token = self._token, ERASED
        following, multiple = self._scheduler.resume(token)
        self._scheduler.erase(token)
        logger.debug("task %s completed", self.name)
        awaiter = self._hand_back()
        if awaiter is not None:
            return awaiter
        return following if multiple else None

    def _hand_back(self) -> Transfer:
        """Release the awaiting task, if any, and return it as successor."""
        awaiter = self._awaiter
        if awaiter is None:
            return None
        self._awaiter = None
        awaiter._awaiting = None
        awaiter._inbox = self._outcome_for(awaiter._propagate)
        awaiter._state = TaskState.SUSPENDED_YIELDED
        return awaiter

    def _outcome_for(self, propagate: bool) -> Result[Any]:
        if propagate:
            if self._outcome is not None and self._outcome.is_err():
                return self._outcome
            if self._outcome is None and self._state is TaskState.DESTROYED:
                return Err(TaskStateError(f"task {self.name} was closed"))
        return Ok(self._current)


class TaskFunction(Generic[P, T]):
    """Callable produced by :func:`task`; every call builds a registered Task."""

    def __init__(self, func: Callable[P, TaskBody[T] | T]) -> None:
        self.original_func = func
        for attr in ("__doc__", "__module__", "__name__", "__qualname__", "__annotations__"):
            value = getattr(func, attr, None)
            if value is not None:
                setattr(self, attr, value)
        self.__wrapped__ = func

    def __get__(self, instance: Any, owner: type | None = None) -> Any:
        if instance is None:
            return self
        return types.MethodType(self._call_bound, instance)

    def __call__(self, *args: P.args, **kwargs: P.kwargs) -> Task[T]:
        return self._build(args, kwargs, scheduler_at=0)

    def _call_bound(self, instance: Any, *args: Any, **kwargs: Any) -> Task[T]:
        return self._build((instance, *args), kwargs, scheduler_at=1)

    def _build(
        self, args: tuple[Any, ...], kwargs: dict[str, Any], *, scheduler_at: int
    ) -> Task[T]:
        name = getattr(self, "__qualname__", repr(self.original_func))
        scheduler = args[scheduler_at] if len(args) > scheduler_at else None
        if not isinstance(scheduler, Scheduler):
            raise MissingSchedulerError(name)
        if inspect.isgeneratorfunction(self.original_func):
            body = self.original_func(*args, **kwargs)
        else:
            body = _deferred(self.original_func, args, kwargs)
        return Task(scheduler, body, name=name)


def task(func: Callable[P, TaskBody[T] | T]) -> TaskFunction[P, T]:
    """
    Turn a generator function into a task factory.

    The scheduler is the first positional parameter (the second for methods,
    after ``self``). Calling the decorated function registers a new task and
    returns it without running the body::

        @task
        def producer(sched, items):
            for item in items:
                yield item
            return len(items)

        t = producer(sched, ["a", "b"])
        t()   # "a"
        t()   # "b"
        t()   # 2, t.done is True

    A plain function is accepted too; its body runs on the first resume.
    """

    return TaskFunction(func)


def _deferred(func: Callable[..., Any], args: tuple[Any, ...], kwargs: dict[str, Any]) -> TaskBody[Any]:
    result = func(*args, **kwargs)
    if inspect.isgenerator(result):
        result = yield from result
    return result


__all__ = [
    "Task",
    "TaskFunction",
    "task",
    "trampoline",
]
