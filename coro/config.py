"""Logging configuration read from environment variables.

``CORO_LOG_OUTPUT``
    Where messages go: empty disables output, ``stdout``/``cout`` and
    ``stderr``/``cerr`` select a stream, anything else is a file path opened
    for appending. Defaults to ``stderr``.

``CORO_LOG_FORMAT``
    Zero or more flags, ``p`` (process id) and ``t`` (thread id), optionally
    followed by a space or colon and a prefix for every message, e.g.
    ``"pt:worker-3"``.

``CORO_LOG_LEVEL``
    A logging level name, ``WARNING`` by default.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass

from coro.errors import ConfigError

OUTPUT_ENV = "CORO_LOG_OUTPUT"
FORMAT_ENV = "CORO_LOG_FORMAT"
LEVEL_ENV = "CORO_LOG_LEVEL"

_STREAM_ALIASES = {
    "stdout": "stdout",
    "cout": "stdout",
    "stderr": "stderr",
    "cerr": "stderr",
}


@dataclass(frozen=True)
class LogConfig:
    """Resolved logging settings; ``output=None`` disables output."""

    output: str | None = "stderr"
    pid: bool = False
    tid: bool = False
    prefix: str = ""
    level: int = logging.WARNING

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> LogConfig:
        env = os.environ if environ is None else environ
        raw_output = env.get(OUTPUT_ENV, "stderr")
        output = _STREAM_ALIASES.get(raw_output, raw_output) or None
        pid, tid, prefix = parse_format(env.get(FORMAT_ENV, ""))
        level = parse_level(env.get(LEVEL_ENV, "WARNING"))
        return cls(output=output, pid=pid, tid=tid, prefix=prefix, level=level)


def parse_format(spec: str) -> tuple[bool, bool, str]:
    """Split a format spec into (pid flag, tid flag, prefix).

    Parsing stops at the first character that is not a flag; only a space
    or colon introduces the prefix.
    """
    pid = tid = False
    prefix = ""
    for i, char in enumerate(spec):
        if char == "p":
            pid = True
        elif char == "t":
            tid = True
        elif char in (" ", ":"):
            prefix = spec[i + 1 :]
            break
        else:
            break
    return pid, tid, prefix


def parse_level(name: str) -> int:
    level = logging.getLevelName(name.strip().upper())
    if not isinstance(level, int):
        raise ConfigError(f"Unknown log level in {LEVEL_ENV}: {name!r}")
    return level


__all__ = [
    "FORMAT_ENV",
    "LEVEL_ENV",
    "LogConfig",
    "OUTPUT_ENV",
    "parse_format",
    "parse_level",
]
