"""
Tests for the diagnostics channel.
"""

import logging

from rich.console import Console
from rich.logging import RichHandler

from autoimpl.utils.console import (
  SUCCESS_LEVEL_NUM,
  console,
  log_error,
  log_info,
  log_success,
  log_warning,
  reset_console,
  set_console,
)


def test_set_console_captures_logs() -> None:
  rec = Console(record=True, width=120)
  set_console(rec)
  try:
    log_info("info line")
    log_success("wrote [path]a/b.py[/path]")
    log_warning("careful")
    log_error("broken")
    console.print("plain")

    text = rec.export_text()
    for expected in ("info line", "wrote a/b.py", "careful", "broken", "plain"):
      assert expected in text
  finally:
    reset_console()

  log_info("after reset")
  assert "after reset" not in rec.export_text()


def test_single_rich_handler() -> None:
  set_console(Console(record=True))
  set_console(Console(record=True))
  try:
    handlers = [h for h in logging.getLogger().handlers if isinstance(h, RichHandler)]
    assert len(handlers) == 1
  finally:
    reset_console()


def test_success_level_name() -> None:
  assert logging.getLevelName(SUCCESS_LEVEL_NUM) == "SUCCESS"
