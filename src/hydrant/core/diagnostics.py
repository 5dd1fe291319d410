"""
Diagnostics Model and Shared Sink.

A ``Diagnostic`` is one reported build condition. Diagnostics are collected in
a ``DiagnosticsSink``: an append-only, lock-guarded sequence shared by every
transform running in the same build. A batch of diagnostics from one call is
appended atomically, so blocks from concurrent callers never interleave.

Helpers:
- ``catch_error``: converts an exception into a single ``build`` error.
- ``load_engine_diagnostics``: merges the diagnostics returned by the engine.
"""

import logging
import threading
from typing import Iterable, Iterator, List, Optional

import libcst as cst
from pydantic import BaseModel, ConfigDict, Field

from hydrant.enums import DiagnosticCategory, Severity

logger = logging.getLogger(__name__)


class Diagnostic(BaseModel):
  """
  A structured, severity-tagged report of a build-time condition.

  Instances are frozen: once appended to a sink they are never mutated.
  """

  model_config = ConfigDict(frozen=True)

  level: Severity = Field(Severity.ERROR, description="Severity of the condition.")
  category: DiagnosticCategory = Field(DiagnosticCategory.BUILD, description="Stage that produced it.")
  header: str = Field("Build Error", description="Short title.")
  message: str = Field(..., description="Human readable description.")
  file_path: Optional[str] = Field(None, description="File the condition refers to.")
  line_number: Optional[int] = Field(None, description="1-based line number, if known.")
  column_number: Optional[int] = Field(None, description="1-based column number, if known.")

  @property
  def is_error(self) -> bool:
    """True if this diagnostic has error severity."""
    return self.level == Severity.ERROR

  def format(self) -> str:
    """
    Renders a single-line summary, e.g. ``error[build] cmp.py:3:5 bad token``.

    Returns:
        str: The formatted diagnostic.
    """
    location = ""
    if self.file_path:
      location = self.file_path
      if self.line_number is not None:
        location += f":{self.line_number}"
        if self.column_number is not None:
          location += f":{self.column_number}"
      location += " "
    return f"{self.level.value}[{self.category.value}] {location}{self.message}"


class DiagnosticsSink:
  """
  Append-only, thread-safe sequence of diagnostics.

  Supports concurrent ``extend`` and concurrent ``has_error`` reads. Items are
  never removed or reordered once appended.
  """

  def __init__(self) -> None:
    self._items: List[Diagnostic] = []
    self._lock = threading.Lock()
    self._error_count = 0

  def append(self, diagnostic: Diagnostic) -> None:
    """
    Appends a single diagnostic.

    Args:
        diagnostic: The diagnostic to record.
    """
    self.extend([diagnostic])

  def extend(self, diagnostics: Iterable[Diagnostic]) -> None:
    """
    Appends a batch of diagnostics as one contiguous block.

    Args:
        diagnostics: Diagnostics to record, in order.
    """
    batch = list(diagnostics)
    if not batch:
      return
    errors = sum(1 for d in batch if d.is_error)
    with self._lock:
      self._items.extend(batch)
      self._error_count += errors

  @property
  def has_error(self) -> bool:
    """True iff any diagnostic in the sink has error severity."""
    with self._lock:
      return self._error_count > 0

  def snapshot(self) -> List[Diagnostic]:
    """
    Returns a consistent copy of the current contents.

    Returns:
        List[Diagnostic]: Diagnostics in append order.
    """
    with self._lock:
      return list(self._items)

  def errors(self) -> List[Diagnostic]:
    """Returns the error-severity diagnostics recorded so far."""
    return [d for d in self.snapshot() if d.is_error]

  def __len__(self) -> int:
    with self._lock:
      return len(self._items)

  def __iter__(self) -> Iterator[Diagnostic]:
    return iter(self.snapshot())


def catch_error(sink: DiagnosticsSink, exc: BaseException, file_path: Optional[str] = None) -> Diagnostic:
  """
  Converts an exception into exactly one error diagnostic and records it.

  Syntax errors raised by LibCST carry their position, which is copied onto
  the diagnostic as the one-indexed line and column LibCST itself reports.

  Args:
      sink: The shared sink to append to.
      exc: The exception caught at the pipeline boundary.
      file_path: The module the exception relates to.

  Returns:
      Diagnostic: The recorded diagnostic.
  """
  line_number = None
  column_number = None
  header = "Build Error"

  if isinstance(exc, cst.ParserSyntaxError):
    header = "Syntax Error"
    message = exc.message
    line_number = exc.editor_line
    column_number = exc.editor_column
  else:
    message = str(exc) or type(exc).__name__

  diagnostic = Diagnostic(
    level=Severity.ERROR,
    category=DiagnosticCategory.BUILD,
    header=header,
    message=message,
    file_path=file_path,
    line_number=line_number,
    column_number=column_number,
  )
  sink.append(diagnostic)
  logger.debug("Recorded build error for %s: %s", file_path or "<module>", message)
  return diagnostic


def load_engine_diagnostics(sink: DiagnosticsSink, diagnostics: Iterable[Diagnostic]) -> None:
  """
  Merges engine diagnostics into the sink, in order, without deduplication.

  Args:
      sink: The shared sink.
      diagnostics: Diagnostics returned by one engine call.
  """
  sink.extend(diagnostics)
