"""Tests for logging setup."""

import logging

from calendar_assistant.utils.logging import parse_verbosity, setup_logging


def test_parse_verbosity():
    assert parse_verbosity(["prog"]) == 0
    assert parse_verbosity(["prog", "-v"]) == 1
    assert parse_verbosity(["prog", "config.yaml", "-vv"]) == 2
    assert parse_verbosity(["prog", "-vvv"]) == 3


def test_setup_logging_levels(tmp_path):
    setup_logging(verbosity=1, log_file=str(tmp_path / "test.log"))

    root = logging.getLogger()
    console, file_handler = root.handlers
    assert console.level == logging.INFO
    assert file_handler.level == logging.DEBUG

    setup_logging(verbosity=0, log_file=str(tmp_path / "test.log"))
    assert logging.getLogger().handlers[0].level == logging.WARNING

    setup_logging(verbosity=2, log_file=str(tmp_path / "test.log"))
    assert logging.getLogger().handlers[0].level == logging.DEBUG


def test_setup_logging_writes_file(tmp_path):
    log_file = tmp_path / "nested" / "assistant.log"
    setup_logging(verbosity=0, log_file=str(log_file))

    logging.getLogger("calendar_assistant.test").debug("debug line")
    for handler in logging.getLogger().handlers:
        handler.flush()

    assert "debug line" in log_file.read_text(encoding="utf-8")


def test_setup_logging_default_file_in_log_dir(tmp_path):
    setup_logging(verbosity=0, log_dir=str(tmp_path / "logs"))

    files = list((tmp_path / "logs").glob("assistant_*.log"))
    assert len(files) == 1


def test_third_party_loggers_quieted(tmp_path):
    setup_logging(verbosity=2, log_file=str(tmp_path / "test.log"))

    assert logging.getLogger("httpx").level == logging.WARNING
    assert logging.getLogger("apscheduler").level == logging.WARNING
