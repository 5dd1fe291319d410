"""
Tests for the Rewriter Pipeline Infrastructure.
"""

import libcst as cst
import pytest
from unittest.mock import MagicMock

from hydrant.config import CompileOptions
from hydrant.core.rewriter.context import PassResult, TransformContext
from hydrant.core.rewriter.interface import RewriterPass
from hydrant.core.rewriter.pipeline import RewriterPipeline
from hydrant.enums import DiagnosticCategory, Severity


class MockPass(RewriterPass):
  """Simple pass that injects a comment and reports one warning."""

  def __init__(self, label: str) -> None:
    self.label = label

  def transform(self, module: cst.Module, context: TransformContext) -> PassResult:
    """Appends a comment to the module header."""
    header = list(module.header)
    header.append(
      cst.EmptyLine(
        comment=cst.Comment(f"# Pass: {self.label}"),
        newline=cst.Newline(),
      )
    )
    return PassResult(module.with_changes(header=header), [context.diagnostic(f"ran {self.label}")])


def test_pipeline_execution_sequence() -> None:
  """
  Verify that passes are executed in the order provided.
  """
  ctx = TransformContext(CompileOptions(), file_name="m.py")
  pipeline = RewriterPipeline([MockPass("A"), MockPass("B")])

  result = pipeline.run(cst.parse_module("x = 1"), ctx)
  code = result.module.code

  assert code.find("# Pass: A") < code.find("# Pass: B")
  assert [d.message for d in result.diagnostics] == ["ran A", "ran B"]
  assert all(d.file_path == "m.py" for d in result.diagnostics)


def test_pipeline_empty() -> None:
  """
  Verify pipeline works with no passes (Identity).
  """
  ctx = MagicMock(spec=TransformContext)
  module = cst.parse_module("x = 1")
  result = RewriterPipeline([]).run(module, ctx)

  assert result.module.code == module.code
  assert list(result.diagnostics) == []


def test_pipeline_rejects_non_pass() -> None:
  with pytest.raises(TypeError):
    RewriterPipeline([object()])


def test_interface_enforcement() -> None:
  """
  Verify abstract base class enforcement.
  """
  with pytest.raises(TypeError):

    class InvalidPass(RewriterPass):
      pass

    InvalidPass()


def test_context_file_name_fallbacks() -> None:
  assert TransformContext(CompileOptions(), "a.py").file_name == "a.py"
  assert TransformContext(CompileOptions(file_name="b.py")).file_name == "b.py"
  assert TransformContext(CompileOptions()).file_name == "<module>"


def test_context_diagnostic_defaults() -> None:
  d = TransformContext(CompileOptions(), "a.py").diagnostic("hello")
  assert d.level == Severity.WARNING
  assert d.category == DiagnosticCategory.HYDRATE
  assert d.header == "Hydrate"
  assert d.file_path == "a.py"
