"""Tests for centralized logging setup."""

from __future__ import annotations

import logging
from typing import Iterator

import pytest

from core.logging_config import _ColorFormatter, setup_logging


@pytest.fixture(autouse=True)
def _restore_root() -> Iterator[None]:
    root = logging.getLogger()
    level = root.level
    yield
    for handler in list(root.handlers):
        if isinstance(handler.formatter, _ColorFormatter):
            root.removeHandler(handler)
    root.setLevel(level)


class TestSetupLogging:
    def test_default_level_is_warning(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("SNOUTY_LOG_LEVEL", raising=False)
        setup_logging()
        assert logging.getLogger().level == logging.WARNING

    def test_verbose_sets_debug(self) -> None:
        setup_logging(verbose=True)
        assert logging.getLogger().level == logging.DEBUG

    def test_level_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SNOUTY_LOG_LEVEL", "info")
        setup_logging()
        assert logging.getLogger().level == logging.INFO

    def test_unknown_env_level_falls_back(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SNOUTY_LOG_LEVEL", "chatty")
        setup_logging(level=logging.ERROR)
        assert logging.getLogger().level == logging.ERROR

    def test_noisy_loggers_quieted(self) -> None:
        setup_logging(verbose=True)
        assert logging.getLogger("httpx").level >= logging.WARNING
        assert logging.getLogger("httpcore").level >= logging.WARNING

    def test_repeated_calls_no_duplicate_handlers(self) -> None:
        setup_logging()
        setup_logging()
        stream_handlers = [h for h in logging.getLogger().handlers if isinstance(h, logging.StreamHandler)]
        assert len(stream_handlers) == 1
