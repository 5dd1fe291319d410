"""
Hydrate Command Handler.

Implements ``hydrant hydrate``:
1. Configuration loading (pyproject.toml + CLI overrides).
2. Manifest loading and grouping of components per module.
3. Concurrent transformation of every selected module against one build context.
4. Output writing and the diagnostics report.
"""

from pathlib import Path
from typing import Dict, List, Optional

from rich.markup import escape
from rich.table import Table

from hydrant.config import RuntimeConfig
from hydrant.core.build_context import BuildContext
from hydrant.core.diagnostics import Diagnostic
from hydrant.core.pipeline import ModuleJob, transform_component_modules
from hydrant.enums import DiagnosticCategory, Severity
from hydrant.metadata.loader import ManifestError, group_by_source, load_manifest
from hydrant.metadata.schema import ComponentMetadata
from hydrant.utils.console import console, log_error, log_info, log_success, log_warning, severity_markup

HYDRATE_SUFFIX = ".hydrate.py"


def handle_hydrate(
  input_path: Path,
  manifest_path: Optional[Path],
  output_dir: Optional[Path],
  module_format: Optional[str],
  target_version: Optional[str],
  workers: Optional[int],
) -> int:
  """
  Handles the 'hydrate' command execution.

  Args:
      input_path: A component module, or a directory whose modules are selected.
      manifest_path: Component manifest. Falls back to ``[tool.hydrant] manifest``.
      output_dir: Destination directory. Defaults to writing ``*.hydrate.py`` beside each source.
      module_format: Import style override ('named' or 'namespace').
      target_version: Grammar version override.
      workers: Worker thread override.

  Returns:
      int: Exit code (0 for success, 1 for failure).
  """
  if not input_path.exists():
    log_error(f"Input not found: {input_path}")
    return 1

  try:
    config = RuntimeConfig.load(
      module_format=module_format,
      target_version=target_version,
      manifest=manifest_path,
      max_workers=workers,
      search_path=input_path if input_path.is_dir() else input_path.parent,
    )
  except ValueError as e:
    log_error(f"Invalid configuration: {escape(str(e))}")
    return 1

  if config.manifest is None:
    log_error("No component manifest given (use --manifest or [tool.hydrant] manifest).")
    return 1

  try:
    manifest = load_manifest(config.manifest)
  except ManifestError as e:
    log_error(escape(str(e)))
    return 1

  grouped = _select_modules(
    group_by_source(manifest.components, base_dir=config.manifest.parent),
    input_path.resolve(),
  )
  if not grouped:
    log_warning(f"No manifest components are declared under {input_path}")
    return 0

  ctx = BuildContext()
  jobs: List[ModuleJob] = []
  for path, components in grouped.items():
    try:
      code = path.read_text(encoding="utf-8")
    except OSError as e:
      ctx.diagnostics.append(
        Diagnostic(
          level=Severity.ERROR,
          category=DiagnosticCategory.BUILD,
          message=f"Cannot read component module: {e}",
          file_path=str(path),
        )
      )
      continue
    jobs.append(ModuleJob(code, components, str(path)))

  log_info(f"Hydrating {len(jobs)} module(s) with {config.max_workers} worker(s)...")
  results = transform_component_modules(ctx, jobs, config.compile_options, max_workers=config.max_workers)

  written = 0
  for job, output in zip(jobs, results):
    if output is None:
      continue
    dest = _destination(Path(job.file_name), output_dir)
    dest.parent.mkdir(parents=True, exist_ok=True)
    dest.write_text(output, encoding="utf-8")
    written += 1
    log_success(f"Hydrated: [path]{job.file_name}[/path] -> [path]{dest}[/path]")

  _print_diagnostics(ctx.diagnostics.snapshot())

  if ctx.has_error:
    log_error(f"Hydration failed: {written}/{len(grouped)} module(s) written.")
    return 1

  log_success(f"Build Complete: {written}/{len(grouped)} module(s) hydrated.")
  return 0


def _select_modules(
  grouped: Dict[Path, List[ComponentMetadata]], input_path: Path
) -> Dict[Path, List[ComponentMetadata]]:
  """Keeps the modules equal to, or located under, ``input_path``."""
  if input_path.is_file():
    return {p: c for p, c in grouped.items() if p.resolve() == input_path}
  return {p: c for p, c in grouped.items() if input_path in p.resolve().parents}


def _destination(source: Path, output_dir: Optional[Path]) -> Path:
  name = source.stem + HYDRATE_SUFFIX
  if output_dir:
    return output_dir / name
  return source.with_name(name)


def _print_diagnostics(diagnostics: List[Diagnostic]) -> None:
  """
  Renders the build diagnostics as a table.

  Args:
      diagnostics: Diagnostics in append order.
  """
  if not diagnostics:
    return

  table = Table(title="Hydration Report")
  table.add_column("Level", justify="center")
  table.add_column("Category", style="cyan")
  table.add_column("File", style="blue")
  table.add_column("Message")

  for d in diagnostics:
    location = Path(d.file_path).name if d.file_path else ""
    if location and d.line_number is not None:
      location += f":{d.line_number}"
    table.add_row(severity_markup(d.level), d.category.value, location, escape(d.message))

  console.print(table)
