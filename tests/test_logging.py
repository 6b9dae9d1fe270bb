from __future__ import annotations

import logging
from pathlib import Path

import pytest

from declshell.logging import configure_logging, console_level, get_logger


def test_get_logger_uses_package_hierarchy() -> None:
    assert get_logger().name == "declshell"
    assert get_logger("provider").name == "declshell.provider"


@pytest.mark.parametrize(
    "verbose, quiet, expected",
    [
        (False, False, logging.INFO),
        (True, False, logging.DEBUG),
        (False, True, logging.WARNING),
        (True, True, logging.WARNING),
    ],
)
def test_console_level(verbose: bool, quiet: bool, expected: int) -> None:
    assert console_level(verbose=verbose, quiet=quiet) == expected


def test_configure_logging_replaces_handlers_and_writes_file(tmp_path: Path) -> None:
    log_file = tmp_path / "declshell.log"

    configure_logging(verbose=False)
    logger = configure_logging(verbose=True, log_file=log_file)
    get_logger("provider").debug("Binding referenced library Core")
    for handler in logger.handlers:
        handler.flush()

    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 2
    assert "Binding referenced library Core" in log_file.read_text(encoding="utf-8")


def test_log_file_records_debug_even_when_console_is_quiet(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    log_file = tmp_path / "nested" / "declshell.log"

    logger = configure_logging(quiet=True, log_file=log_file)
    get_logger("members").debug("Skipping get accessor get_Name on Acme.Widget")
    get_logger("orchestrator").info("Ignoring 1 types: Acme.Hidden")
    for handler in logger.handlers:
        handler.flush()

    logged = log_file.read_text(encoding="utf-8")
    assert "Skipping get accessor get_Name" in logged
    assert "Ignoring 1 types" in logged
    assert capsys.readouterr().err == ""


def test_console_only_logger_filters_at_console_level() -> None:
    logger = configure_logging(quiet=True)

    assert logger.level == logging.WARNING
    assert [handler.level for handler in logger.handlers] == [logging.WARNING]
