"""
Logging Test Suite

Coverage:
  LogManager singleton and reconfiguration
  resolve_log_format fallback
  TerminalSafeFormatter sanitization
  GovernanceLogHighlighter patterns
"""

import logging
import os
import sys

import pytest

# ── Path setup ────────────────────────────────────────────────────────
ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from rich.text import Text

from tokenvote.constants import LOG_FORMAT, parse_bool
from tokenvote.logger import (
    GovernanceLogHighlighter,
    LogManager,
    TerminalSafeFormatter,
    get_logger,
)


@pytest.fixture
def manager():
    """Singleton manager, restored to a configured state afterwards."""
    mgr = LogManager()
    yield mgr
    mgr.reset()
    mgr.configure()


class TestLogManager:

    def test_singleton(self):
        assert LogManager() is LogManager()

    def test_configured_on_import(self):
        assert LogManager().is_configured

    def test_get_logger(self):
        log = get_logger("tokenvote.test")
        assert isinstance(log, logging.Logger)
        assert log.name == "tokenvote.test"

    def test_configure_is_idempotent(self, manager):
        handlers = list(logging.getLogger().handlers)
        manager.configure(log_level="DEBUG")
        assert logging.getLogger().handlers == handlers

    def test_reset_and_file_output(self, manager, tmp_path):
        log_file = tmp_path / "logs" / "tokenvote.log"
        manager.reset()
        assert not manager.is_configured
        manager.configure(log_level="INFO", log_file=log_file, console_output=False, file_output=True)

        get_logger("tokenvote.test").info("Proposal #3 \x1b[31mOPENED\x1b[0m")
        for handler in logging.getLogger().handlers:
            handler.flush()

        content = log_file.read_text(encoding="utf-8")
        assert "Proposal #3 OPENED" in content
        assert "\x1b" not in content
        assert "tokenvote.test" in content


class TestResolveLogFormat:

    def test_valid_format_kept(self):
        fmt = "%(levelname)s %(message)s"
        assert LogManager.resolve_log_format(fmt) == fmt

    @pytest.mark.parametrize("fmt", ["", "%(missing)s", "%(message"])
    def test_invalid_format_falls_back(self, fmt):
        assert LogManager.resolve_log_format(fmt) == LOG_FORMAT.default()


class TestTerminalSafeFormatter:

    @pytest.mark.parametrize("raw,clean", [
        ("plain", "plain"),
        ("\x1b[31mred\x1b[0m", "red"),
        ("line\rbreak", "linebreak"),
        ("bell\x07", "bell"),
        ("tab\tand\nnewline", "tab\tand\nnewline"),
        ("", ""),
    ])
    def test_sanitize(self, raw, clean):
        assert TerminalSafeFormatter.sanitize(raw) == clean

    def test_format_sanitizes_message(self):
        formatter = TerminalSafeFormatter(fmt="%(message)s")
        record = logging.LogRecord(
            name="t", level=logging.INFO, pathname="", lineno=0,
            msg="title\x1b[2J\x00", args=(), exc_info=None,
        )
        assert formatter.format(record) == "title"


class TestGovernanceLogHighlighter:

    def _styles(self, message):
        text = Text(message)
        GovernanceLogHighlighter().highlight(text)
        return {str(span.style) for span in text.spans}

    def test_status_and_proposal(self):
        styles = self._styles("Proposal #0 (Budget): WAITING → OPENED | Voting window opened")
        assert "tokenvote.proposal" in styles
        assert "tokenvote.status_idle" in styles
        assert "tokenvote.status_open" in styles
        assert "tokenvote.arrow" in styles

    def test_terminal_statuses(self):
        assert "tokenvote.status_failed" in self._styles("OPENED → FAILED")
        assert "tokenvote.status_closed" in self._styles("OPENED → CLOSED")

    def test_hex_address(self):
        assert "tokenvote.address" in self._styles("Vote: 0xdeadbeef01 → choice 1")


class TestParseBool:

    @pytest.mark.parametrize("raw,expected", [
        ("True", True), (" false ", False), ("TRUE", True), ("yes", "yes"), (1, 1),
    ])
    def test_parse_bool(self, raw, expected):
        assert parse_bool(raw) == expected
