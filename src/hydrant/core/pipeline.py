"""
Pipeline Orchestrator.

``transform_component_module`` is the public entry point: it produces the
hydration-capable variant of one component module, or ``None``.

Failures never unwind past this boundary. They are recorded in the shared
``BuildContext`` sink and signalled to the caller by a ``None`` result:

- **Abort requested**: ``None``, nothing recorded, the engine is not invoked.
- **Parse/emit failure**: exactly one ``build`` error diagnostic.
- **No output**: ``None``, logged only.
- **Errors in the sink**: ``None``. The sink is build-wide, so an error
  recorded by any transform of the build vetoes further output.

Batch helpers run many independent modules concurrently against the same
context.
"""

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import List, NamedTuple, Optional, Sequence, Union

from hydrant.config import CompileOptions
from hydrant.core.build_context import BuildContext
from hydrant.core.diagnostics import catch_error, load_engine_diagnostics
from hydrant.core.engine import SourceCompilerEngine, TranspileOutput
from hydrant.core.locator import ComponentIndex
from hydrant.core.rewriter.hydrate import HydrateComponentPass
from hydrant.metadata.schema import ComponentMetadata

logger = logging.getLogger(__name__)

MetadataArg = Union[ComponentMetadata, Sequence[ComponentMetadata]]


class ModuleJob(NamedTuple):
  """One module of a batch run."""

  source_text: str
  components: Sequence[ComponentMetadata]
  file_name: Optional[str] = None


def _as_list(component_metadata: MetadataArg) -> List[ComponentMetadata]:
  if isinstance(component_metadata, ComponentMetadata):
    return [component_metadata]
  return list(component_metadata)


def transform_component_module(
  build_ctx: BuildContext,
  source_text: str,
  component_metadata: MetadataArg,
  compile_options: Optional[CompileOptions] = None,
  engine: Optional[SourceCompilerEngine] = None,
) -> Optional[str]:
  """
  Transforms a component module into its hydration-capable variant.

  Args:
      build_ctx: Shared build state. Only its diagnostics sink is modified.
      source_text: The module source. Never modified.
      component_metadata: Metadata of the component(s) declared by the module.
      compile_options: Engine options. ``file_name`` defaults to the first
          component's ``source_path``.
      engine: Engine override, mainly for tests.

  Returns:
      Optional[str]: The transformed module text, or None when aborted or failed.
  """
  if build_ctx.should_abort:
    return None

  components = _as_list(component_metadata)
  options = compile_options or CompileOptions()
  file_name = options.file_name or (components[0].source_path if components else None)
  engine = engine or SourceCompilerEngine()

  output: TranspileOutput
  try:
    index = ComponentIndex.build(components)
    output = engine.transpile(source_text, options, [HydrateComponentPass(index)], file_name=file_name)
  except Exception as e:
    catch_error(build_ctx.diagnostics, e, file_path=file_name)
    return None

  load_engine_diagnostics(build_ctx.diagnostics, output.diagnostics)

  if build_ctx.has_error:
    return None

  if build_ctx.should_abort:
    logger.debug("Discarding output for %s: build aborted during transpile", file_name)
    return None

  if not output.output_text:
    logger.warning("Engine produced no output for %s", file_name)
    return None

  return output.output_text


def transform_component_modules(
  build_ctx: BuildContext,
  jobs: Sequence[ModuleJob],
  compile_options: Optional[CompileOptions] = None,
  max_workers: int = 4,
) -> List[Optional[str]]:
  """
  Transforms independent modules concurrently on a thread pool.

  Each module's diagnostics reach the shared sink as one contiguous block.

  The error veto is build-wide: once any module records an error, modules
  finishing after it return None as well. Which of them finished first depends
  on thread scheduling, so with errors present the set of returned texts can
  vary between runs. Check ``build_ctx.has_error`` rather than the results.

  Args:
      build_ctx: Shared build state.
      jobs: Modules to transform.
      compile_options: Options shared by every job; ``file_name`` is taken per job.
      max_workers: Thread pool size.

  Returns:
      List[Optional[str]]: Results in job order.
  """
  base_options = compile_options or CompileOptions()

  def run(job: ModuleJob) -> Optional[str]:
    options = base_options
    if job.file_name:
      options = base_options.model_copy(update={"file_name": job.file_name})
    return transform_component_module(build_ctx, job.source_text, job.components, options)

  with ThreadPoolExecutor(max_workers=max_workers) as pool:
    return list(pool.map(run, jobs))


async def transform_component_module_async(
  build_ctx: BuildContext,
  source_text: str,
  component_metadata: MetadataArg,
  compile_options: Optional[CompileOptions] = None,
) -> Optional[str]:
  """
  Runs ``transform_component_module`` in a worker thread.

  Returns:
      Optional[str]: Same contract as the synchronous call.
  """
  return await asyncio.to_thread(
    transform_component_module, build_ctx, source_text, component_metadata, compile_options
  )
