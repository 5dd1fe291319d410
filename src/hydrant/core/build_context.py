"""
Build Context.

Long-lived state shared by reference across every transform of one build:
the abort veto and the diagnostics sink. The context is passed explicitly to
each call; it is never stored globally and never reset by the pipeline.
"""

import threading
from typing import Optional

from hydrant.core.diagnostics import DiagnosticsSink


class BuildContext:
  """
  Build-scoped coordination state.

  Attributes:
      diagnostics (DiagnosticsSink): Shared, append-only diagnostics.
  """

  def __init__(self, diagnostics: Optional[DiagnosticsSink] = None) -> None:
    self.diagnostics = diagnostics if diagnostics is not None else DiagnosticsSink()
    self._abort = threading.Event()

  @property
  def should_abort(self) -> bool:
    """True once any stage has requested the build to stop."""
    return self._abort.is_set()

  @should_abort.setter
  def should_abort(self, value: bool) -> None:
    if value:
      self._abort.set()
    else:
      self._abort.clear()

  def request_abort(self) -> None:
    """Vetoes any transform that has not started yet."""
    self._abort.set()

  @property
  def has_error(self) -> bool:
    """True iff the sink holds at least one error diagnostic."""
    return self.diagnostics.has_error
