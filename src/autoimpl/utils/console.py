"""
Diagnostics Channel.

Everything a generation round reports (written artifacts, skipped or
deferred declarations, fatal errors) goes through the root `logging` logger,
rendered by a single `rich` handler.

A host build tool that wants the diagnostics of a round somewhere other than
the terminal calls `set_console` with its own Rich console; the CLI tables
printed through `console` follow the same redirection.

Attributes:
    console (_ConsoleProxy): Module-level handle on the active Rich console.
"""

import logging
from typing import Any

from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme

# Reported for every artifact written; sits between INFO and WARNING
SUCCESS_LEVEL_NUM = 25
logging.addLevelName(SUCCESS_LEVEL_NUM, "SUCCESS")

_THEME = Theme(
  {
    "logging.level.success": "green",
    "path": "bold blue",
    "symbol": "bold magenta",
  }
)


class _ConsoleProxy:
  """
  Stable handle whose Rich backend can be swapped at runtime.

  Swapping re-targets the root logger's `RichHandler` as well, so log lines and
  direct prints always land on the same console.
  """

  def __init__(self) -> None:
    self._backend = self._attach(Console(theme=_THEME))

  def redirect(self, target: Console) -> None:
    target.push_theme(_THEME)
    self._backend = self._attach(target)

  def reset(self) -> None:
    self._backend = self._attach(Console(theme=_THEME))

  def print(self, *args: Any, **kwargs: Any) -> None:
    self._backend.print(*args, **kwargs)

  @staticmethod
  def _attach(target: Console) -> Console:
    root = logging.getLogger()
    for handler in [h for h in root.handlers if isinstance(h, RichHandler)]:
      root.removeHandler(handler)

    root.setLevel(logging.INFO)
    root.addHandler(RichHandler(console=target, show_time=False, show_path=False, markup=True))
    return target


console = _ConsoleProxy()


def set_console(target: Console) -> None:
  """
  Sends diagnostics and CLI output to `target`.

  Args:
      target (Console): Rich console to use; the project theme is pushed onto it.
  """
  console.redirect(target)


def reset_console() -> None:
  """Sends diagnostics back to standard output."""
  console.reset()


def log_info(msg: str) -> None:
  """
  Logs a progress message.

  Args:
      msg (str): Message text; may use rich markup such as `[path]...[/path]`.
  """
  logging.info(f"ℹ️  {msg}", extra={"markup": True})


def log_success(msg: str) -> None:
  logging.log(SUCCESS_LEVEL_NUM, f"✅ {msg}", extra={"markup": True})


def log_warning(msg: str) -> None:
  logging.warning(f"⚠️  {msg}", extra={"markup": True})


def log_error(msg: str) -> None:
  logging.error(f"❌ {msg}", extra={"markup": True})
