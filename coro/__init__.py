"""
coro - cooperative round-robin tasks on plain Python generators.

Tasks are generator bodies bound to a scheduler. They interleave at explicit
suspension points (``yield value``, ``yield Yield()``, ``yield Await(t)``,
``return``) and hand control to each other through a trampoline, so long
chains of transfers never grow the call stack.
"""

from coro._vendor import NOTHING, Err, FrozenDict, Nothing, Ok, Result
from coro.config import LogConfig
from coro.errors import (
    AwaitError,
    ConfigError,
    CoroError,
    InvalidSuspensionError,
    MissingSchedulerError,
    TaskStateError,
    UnknownTokenError,
)
from coro.log import configure_logging, reset_logging
from coro.run import drive, run_until_complete
from coro.scheduler import RoundRobinScheduler, Scheduler
from coro.suspend import Await, Yield
from coro.task import Task, TaskFunction, task, trampoline
from coro.types import ERASED, Continuation, TaskState, Token, Transfer

__version__ = "0.1.0"

__all__ = [
    "ERASED",
    "NOTHING",
    "Await",
    "AwaitError",
    "ConfigError",
    "Continuation",
    "CoroError",
    "Err",
    "FrozenDict",
    "InvalidSuspensionError",
    "LogConfig",
    "MissingSchedulerError",
    "Nothing",
    "Ok",
    "Result",
    "RoundRobinScheduler",
    "Scheduler",
    "Task",
    "TaskFunction",
    "TaskState",
    "TaskStateError",
    "Token",
    "Transfer",
    "UnknownTokenError",
    "Yield",
    "configure_logging",
    "drive",
    "reset_logging",
    "run_until_complete",
    "task",
    "trampoline",
]
