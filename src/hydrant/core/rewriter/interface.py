"""
Interface definition for Rewriter Passes.

Passes report problems through the ``PassResult`` they return instead of
raising, so a traversal never unwinds abnormally.
"""

from abc import ABC, abstractmethod

import libcst as cst

from hydrant.core.rewriter.context import PassResult, TransformContext


class RewriterPass(ABC):
  """
  Abstract contract for a transformation pass run by the engine.
  """

  @abstractmethod
  def transform(self, module: cst.Module, context: TransformContext) -> PassResult:
    """
    Executes the transformation logic on the given CST module.

    Args:
        module: The input LibCST module.
        context: Per-call inputs (file name, options).

    Returns:
        PassResult: The transformed module and any diagnostics produced.
    """
    pass
