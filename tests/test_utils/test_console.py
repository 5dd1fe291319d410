"""
Tests for Centralized Logging Utility and Injection Mechanics.

Verifies:
1. Proxy forwarding to the active backend.
2. Injection capabilities (`set_console`).
3. Standard logging wrappers.
"""

import io
import logging

import pytest
from rich.console import Console

from hydrant.enums import Severity
from hydrant.utils.console import (
  console,
  log_error,
  log_info,
  log_success,
  log_warning,
  reset_console,
  set_console,
  set_log_level,
  severity_markup,
)


def _capture() -> Console:
  return Console(record=True, file=io.StringIO(), width=200)


def test_console_proxy_forwards():
  """
  Verify `console` acts as a proxy to a real Rich console.
  """
  assert callable(console.print)
  assert hasattr(console, "export_text")
  assert isinstance(console.backend, Console)


def test_custom_console_injection():
  capture = _capture()
  set_console(capture)

  log_info("Captured Log")
  log_success("Done")
  log_warning("Careful")
  log_error("Broken")
  console.print("direct")

  output = capture.export_text()
  assert "Captured Log" in output
  assert "Done" in output
  assert "Careful" in output
  assert "Broken" in output
  assert "direct" in output


def test_reset_functionality():
  temp = _capture()
  set_console(temp)
  assert console.backend is temp

  reset_console()
  assert console.backend is not temp


def test_log_level_survives_console_swap():
  set_log_level(logging.DEBUG)
  set_console(_capture())
  assert logging.getLogger().level == logging.DEBUG

  set_log_level("WARNING")
  assert logging.getLogger().level == logging.WARNING


def test_debug_records_reach_console():
  capture = _capture()
  set_console(capture)
  set_log_level(logging.DEBUG)

  logging.getLogger("hydrant.core.engine").debug("pass trace")
  assert "pass trace" in capture.export_text()


@pytest.mark.parametrize("level", list(Severity))
def test_severity_markup(level):
  capture = _capture()
  capture.print(severity_markup(level))
  assert capture.export_text().strip() == level.value
