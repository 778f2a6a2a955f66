"""Tests for installing the coro log handler."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from coro import LogConfig, RoundRobinScheduler, Yield, configure_logging, reset_logging, task
from coro.config import OUTPUT_ENV
from coro.log import ROOT_LOGGER, build_format


def _owned_handlers() -> list[logging.Handler]:
    return [
        h for h in logging.getLogger(ROOT_LOGGER).handlers if getattr(h, "_coro_owned", False)
    ]


def test_build_format_includes_requested_fields() -> None:
    fmt = build_format(LogConfig(pid=True, tid=True, prefix="DBG"))

    assert fmt.startswith("DBG %(process)d %(thread)d ")
    assert fmt.endswith("%(filename)s:%(lineno)d %(message)s")


def test_build_format_escapes_percent_in_prefix() -> None:
    assert build_format(LogConfig(prefix="100%")).startswith("100%% ")


def test_file_output_receives_scheduler_events(tmp_path: Path) -> None:
    path = tmp_path / "coro.log"
    configure_logging(LogConfig(output=str(path), prefix="DBG", level=logging.DEBUG))

    sched = RoundRobinScheduler()

    @task
    def worker(sched):
        yield Yield()
        return "ok"

    worker(sched)()
    reset_logging()

    lines = path.read_text(encoding="utf-8").splitlines()
    assert lines
    assert all(line.startswith("DBG ") for line in lines)
    assert any("scheduler.py:" in line and "insert" in line for line in lines)
    assert any("task.py:" in line and "completed" in line for line in lines)


def test_reconfiguring_replaces_handler(tmp_path: Path) -> None:
    first = configure_logging(LogConfig(output=str(tmp_path / "a.log")))
    second = configure_logging(LogConfig(output="stderr"))

    assert _owned_handlers() == [second]
    assert first is not second
    assert isinstance(second, logging.StreamHandler)


def test_disabled_output_installs_null_handler() -> None:
    handler = configure_logging(LogConfig(output=None))

    assert isinstance(handler, logging.NullHandler)


def test_configuration_read_from_environment(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    path = tmp_path / "env.log"
    monkeypatch.setenv(OUTPUT_ENV, str(path))

    handler = configure_logging()

    assert isinstance(handler, logging.FileHandler)
    assert Path(handler.baseFilename) == path


def test_reset_leaves_foreign_handlers_alone() -> None:
    foreign = logging.NullHandler()
    logger = logging.getLogger(ROOT_LOGGER)
    logger.addHandler(foreign)
    try:
        configure_logging(LogConfig(output=None))
        reset_logging()

        assert foreign in logger.handlers
        assert _owned_handlers() == []
    finally:
        logger.removeHandler(foreign)
