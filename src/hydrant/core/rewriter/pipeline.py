"""
Orchestration logic for executing sequential rewriter passes.
"""

from typing import List, Sequence

import libcst as cst

from hydrant.core.diagnostics import Diagnostic
from hydrant.core.rewriter.context import PassResult, TransformContext
from hydrant.core.rewriter.interface import RewriterPass


class RewriterPipeline:
  """
  Runs a sequence of passes in order, threading the module through each and
  aggregating their diagnostics.
  """

  def __init__(self, passes: Sequence[RewriterPass]) -> None:
    """
    Args:
        passes: Sequenced list of passes to execute.

    Raises:
        TypeError: If an entry does not implement ``RewriterPass``.
    """
    for pass_instance in passes:
      if not isinstance(pass_instance, RewriterPass):
        raise TypeError(f"Expected a RewriterPass, got {type(pass_instance).__name__}")
    self.passes = list(passes)

  def run(self, module: cst.Module, context: TransformContext) -> PassResult:
    """
    Executes all registered passes sequentially on the module.

    Args:
        module: The parsed module.
        context: Per-call inputs shared by the passes.

    Returns:
        PassResult: The final module and all diagnostics, in pass order.
    """
    current_module = module
    diagnostics: List[Diagnostic] = []
    for pass_instance in self.passes:
      result = pass_instance.transform(current_module, context)
      current_module = result.module
      diagnostics.extend(result.diagnostics)

    return PassResult(current_module, diagnostics)
