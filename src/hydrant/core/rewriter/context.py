"""
Rewriter Context Module.

Holds the per-call state visible to every pass of one engine invocation: the
file being transformed and the compile options. Nothing here outlives the
call.
"""

from typing import NamedTuple, Optional, Sequence

import libcst as cst

from hydrant.config import CompileOptions
from hydrant.core.diagnostics import Diagnostic
from hydrant.enums import DiagnosticCategory, Severity


class TransformContext:
  """
  Read-only inputs shared by the passes of one transpile call.
  """

  def __init__(self, options: CompileOptions, file_name: Optional[str] = None) -> None:
    """
    Args:
        options: Compile options for this module.
        file_name: Path of the module. Falls back to ``options.file_name``.
    """
    self.options = options
    self.file_name = file_name or options.file_name or "<module>"

  def diagnostic(
    self,
    message: str,
    level: Severity = Severity.WARNING,
    category: DiagnosticCategory = DiagnosticCategory.HYDRATE,
    header: str = "Hydrate",
  ) -> Diagnostic:
    """
    Creates a diagnostic bound to the current file.

    Returns:
        Diagnostic: The new, unrecorded diagnostic.
    """
    return Diagnostic(level=level, category=category, header=header, message=message, file_path=self.file_name)


class PassResult(NamedTuple):
  """
  Outcome of one pass: the transformed module and what it reported.
  """

  module: cst.Module
  diagnostics: Sequence[Diagnostic] = ()
