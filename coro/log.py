"""Logging setup for the ``coro`` logger hierarchy.

Every module logs through ``logging.getLogger(__name__)``; nothing is
configured on import. Applications (or tests) call :func:`configure_logging`
to attach one handler to the ``coro`` logger according to a
:class:`~coro.config.LogConfig`.
"""

from __future__ import annotations

import logging
import sys

from coro.config import LogConfig

ROOT_LOGGER = "coro"

_OWNED_ATTR = "_coro_owned"


def build_format(config: LogConfig) -> str:
    parts: list[str] = []
    if config.prefix:
        parts.append(config.prefix.replace("%", "%%"))
    if config.pid:
        parts.append("%(process)d")
    if config.tid:
        parts.append("%(thread)d")
    parts.append("%(asctime)s.%(msecs)03d")
    parts.append("%(filename)s:%(lineno)d")
    parts.append("%(message)s")
    return " ".join(parts)


def _make_handler(output: str | None) -> logging.Handler:
    if output is None:
        return logging.NullHandler()
    if output == "stdout":
        return logging.StreamHandler(sys.stdout)
    if output == "stderr":
        return logging.StreamHandler(sys.stderr)
    return logging.FileHandler(output, mode="a", encoding="utf-8")


def reset_logging() -> None:
    """Remove the handler installed by :func:`configure_logging`, if any."""
    logger = logging.getLogger(ROOT_LOGGER)
    for handler in list(logger.handlers):
        if getattr(handler, _OWNED_ATTR, False):
            logger.removeHandler(handler)
            handler.close()


def configure_logging(config: LogConfig | None = None) -> logging.Handler:
    """Install a handler on the ``coro`` logger.

    Calling it again replaces the previously installed handler.

    Args:
        config: Settings to apply. Read from the environment when omitted.

    Returns:
        The installed handler.
    """
    config = config or LogConfig.from_env()
    reset_logging()
    handler = _make_handler(config.output)
    handler.setFormatter(logging.Formatter(build_format(config), datefmt="%H:%M:%S"))
    setattr(handler, _OWNED_ATTR, True)
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(config.level)
    logger.addHandler(handler)
    return handler


__all__ = [
    "ROOT_LOGGER",
    "build_format",
    "configure_logging",
    "reset_logging",
]
