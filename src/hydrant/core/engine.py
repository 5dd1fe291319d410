"""
Source Compiler Engine.

A thin adapter over LibCST behaving as a pure function::

    (text, options, passes) -> TranspileOutput(output_text, diagnostics)

The engine parses the text, runs the passes in order through a
``RewriterPipeline`` and re-emits the module. Code no pass touches is
reproduced byte for byte. Malformed input raises
``libcst.ParserSyntaxError``; converting that into a diagnostic is the
caller's job.
"""

import logging
from typing import List, Optional, Sequence

import libcst as cst
from pydantic import BaseModel, Field

from hydrant.config import CompileOptions
from hydrant.core.diagnostics import Diagnostic
from hydrant.core.rewriter.context import TransformContext
from hydrant.core.rewriter.interface import RewriterPass
from hydrant.core.rewriter.pipeline import RewriterPipeline

logger = logging.getLogger(__name__)


class TranspileOutput(BaseModel):
  """
  Result of one engine invocation.
  """

  output_text: Optional[str] = Field(None, description="Re-emitted module text.")
  diagnostics: List[Diagnostic] = Field(default_factory=list, description="Diagnostics reported by the passes.")


class SourceCompilerEngine:
  """
  Parses, transforms and re-emits one module.
  """

  def parser_config(self, options: CompileOptions) -> cst.PartialParserConfig:
    """
    Builds the LibCST parser configuration for the requested grammar.

    Args:
        options: Compile options; ``target_version`` selects the grammar.

    Returns:
        cst.PartialParserConfig: The parser configuration.

    Raises:
        ValueError: If LibCST does not support the requested version.
    """
    if options.target_version:
      return cst.PartialParserConfig(python_version=options.target_version)
    return cst.PartialParserConfig()

  def parse(self, text: str, options: CompileOptions) -> cst.Module:
    """
    Parses source text into a LibCST Module.

    Raises:
        libcst.ParserSyntaxError: If the input code is invalid Python.
    """
    return cst.parse_module(text, config=self.parser_config(options))

  def transpile(
    self,
    text: str,
    options: CompileOptions,
    passes: Sequence[RewriterPass],
    file_name: Optional[str] = None,
  ) -> TranspileOutput:
    """
    Runs the passes over the module and re-emits it.

    Args:
        text: Module source.
        options: Compile options (grammar, import style, hydration settings).
        passes: Post-parse transforms, applied in order.
        file_name: Path of the module, used to locate components and in diagnostics.

    Returns:
        TranspileOutput: Emitted text and pass diagnostics.
    """
    context = TransformContext(options, file_name=file_name)
    pipeline = RewriterPipeline(passes)

    tree = self.parse(text, options)
    result = pipeline.run(tree, context)
    logger.debug("Transpiled %s with %d pass(es)", context.file_name, len(pipeline.passes))

    return TranspileOutput(output_text=result.module.code, diagnostics=list(result.diagnostics))
