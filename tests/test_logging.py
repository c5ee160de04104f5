"""
Tests for logging setup — levels, formats, file output.
"""

import logging
from pathlib import Path

import pytest

from witdart.core.observability.logging_config import level_from_flags, parse_level, setup_logging


@pytest.fixture(autouse=True)
def _restore_root_logger():
    root = logging.getLogger()
    lark = logging.getLogger("lark")
    handlers, level, lark_level = root.handlers[:], root.level, lark.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)
    lark.setLevel(lark_level)


class TestParseLevel:
    @pytest.mark.parametrize("name, expected", [
        ("DEBUG", logging.DEBUG),
        ("info", logging.INFO),
        ("Error", logging.ERROR),
        ("", logging.WARNING),
        (None, logging.WARNING),
        ("LOUD", logging.WARNING),
        ("getLogger", logging.WARNING),
    ])
    def test_levels(self, name, expected):
        assert parse_level(name) == expected


class TestSetupLogging:
    def test_console_level(self):
        setup_logging("INFO")
        root = logging.getLogger()
        assert root.level == logging.INFO
        assert len(root.handlers) == 1
        assert root.handlers[0].level == logging.INFO

    def test_replaces_previous_handlers(self):
        setup_logging("WARNING")
        setup_logging("WARNING")
        assert len(logging.getLogger().handlers) == 1

    def test_minimal_format_at_warning(self):
        setup_logging("WARNING")
        assert logging.getLogger().handlers[0].formatter._fmt == "%(message)s"

    def test_debug_format_has_line_numbers(self):
        setup_logging("DEBUG")
        assert "%(lineno)d" in logging.getLogger().handlers[0].formatter._fmt

    def test_file_output(self, tmp_path: Path):
        log_file = tmp_path / "witdart.log"
        setup_logging("ERROR", log_file=str(log_file), log_file_level="DEBUG")
        root = logging.getLogger()
        assert root.level == logging.DEBUG
        logging.getLogger("witdart.test").debug("written to file only")
        for handler in root.handlers:
            handler.flush()
        assert "written to file only" in log_file.read_text(encoding="utf-8")

    def test_quiets_lark(self):
        setup_logging("INFO")
        assert logging.getLogger("lark").level == logging.WARNING

    def test_lark_left_alone_at_debug(self):
        logging.getLogger("lark").setLevel(logging.NOTSET)
        setup_logging("DEBUG")
        assert logging.getLogger("lark").level == logging.NOTSET


class TestLevelFromFlags:
    def test_flags_win_over_env(self):
        env = {"WITDART_LOG_LEVEL": "ERROR"}
        assert level_from_flags(debug=True, verbose=True, environ=env) == "DEBUG"
        assert level_from_flags(verbose=True, quiet=True, environ=env) == "INFO"
        assert level_from_flags(quiet=True, environ={}) == "ERROR"

    def test_env_then_default(self):
        assert level_from_flags(environ={"WITDART_LOG_LEVEL": "info"}) == "info"
        assert level_from_flags(environ={}) == "WARNING"
