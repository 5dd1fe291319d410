"""
Console and Logging Setup.

Library modules log through ``logging.getLogger(__name__)``; the CLI reports
progress through the ``log_*`` helpers below. Both end up in a single
``RichHandler`` attached to the root logger and bound to the active console.

The active console sits behind ``console``, a stable proxy object. Tests and
embedding tools call ``set_console`` to redirect everything (log records,
report tables) into their own ``rich.console.Console``, e.g. one recording
into an ``io.StringIO``.
"""

import logging
from typing import Any, Union

from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme

from hydrant.enums import Severity

SUCCESS_LEVEL_NUM = 25
logging.addLevelName(SUCCESS_LEVEL_NUM, "SUCCESS")

_THEME = Theme(
  {
    "logging.level.success": "green",
    "info": "dim cyan",
    "warning": "yellow",
    "error": "bold red",
    "success": "green",
    "path": "bold blue",
    "diag.error": "bold red",
    "diag.warning": "yellow",
  }
)

_log_level = logging.INFO


def _default_console() -> Console:
  return Console(theme=_THEME)


def _bind_root_logger(target: Console) -> None:
  """Replaces any previous RichHandler on the root logger with one writing to ``target``."""
  root = logging.getLogger()
  for handler in [h for h in root.handlers if isinstance(h, RichHandler)]:
    root.removeHandler(handler)

  root.addHandler(
    RichHandler(
      console=target,
      show_time=False,
      show_path=False,
      markup=True,
      rich_tracebacks=True,
    )
  )
  root.setLevel(_log_level)


class _ConsoleProxy:
  """
  Stable stand-in for the active ``Console``.

  Attribute access is forwarded, so ``console.print`` and
  ``console.export_text`` behave exactly like the backend's.
  """

  def __init__(self) -> None:
    self._backend = _default_console()
    _bind_root_logger(self._backend)

  @property
  def backend(self) -> Console:
    return self._backend

  def swap(self, new_console: Console) -> None:
    """Routes printing and log records to ``new_console``."""
    self._backend = new_console
    _bind_root_logger(new_console)

  def restore(self) -> None:
    """Goes back to a fresh stdout console."""
    self.swap(_default_console())

  def print(self, *args: Any, **kwargs: Any) -> None:
    self._backend.print(*args, **kwargs)

  def __getattr__(self, name: str) -> Any:
    return getattr(self._backend, name)


console = _ConsoleProxy()


def set_console(new_console: Console) -> None:
  """
  Redirects all hydrant output to ``new_console``.

  Args:
      new_console (Console): The Rich console to write to.
  """
  console.swap(new_console)


def reset_console() -> None:
  """Restores output to standard output."""
  console.restore()


def set_log_level(level: Union[int, str]) -> None:
  """
  Changes the root log level, e.g. ``logging.DEBUG`` to see per-module pass logs.

  The level survives later ``set_console`` calls.
  """
  global _log_level
  _log_level = logging.getLevelName(level) if isinstance(level, str) else level
  logging.getLogger().setLevel(_log_level)


def severity_markup(level: Severity) -> str:
  """Renders a diagnostic severity as themed markup for report tables."""
  return f"[diag.{level.value}]{level.value}[/diag.{level.value}]"


def log_info(msg: str) -> None:
  """
  Logs an informational message.

  Args:
      msg (str): The message content. Can include rich markup like [path].
  """
  logging.info(f"ℹ️  {msg}", extra={"markup": True})


def log_success(msg: str) -> None:
  """Logs a completed step at the SUCCESS level."""
  logging.log(SUCCESS_LEVEL_NUM, f"✅ {msg}", extra={"markup": True})


def log_warning(msg: str) -> None:
  logging.warning(f"⚠️  {msg}", extra={"markup": True})


def log_error(msg: str) -> None:
  logging.error(f"❌ {msg}", extra={"markup": True})
