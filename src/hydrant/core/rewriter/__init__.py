"""
Rewriter Package.

Pass infrastructure run by the engine and the Hydration Rewrite Pass.
"""

from hydrant.core.rewriter.context import PassResult, TransformContext
from hydrant.core.rewriter.hydrate import HydrateComponentPass
from hydrant.core.rewriter.interface import RewriterPass
from hydrant.core.rewriter.pipeline import RewriterPipeline

__all__ = [
  "HydrateComponentPass",
  "PassResult",
  "RewriterPass",
  "RewriterPipeline",
  "TransformContext",
]
