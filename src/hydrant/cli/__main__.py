"""
Main Entry Point for the hydrant CLI.

This module handles argument parsing and dispatches to the command handlers
defined in `hydrant.cli.handlers`.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from hydrant import __version__
from hydrant.cli import handlers
from hydrant.enums import ModuleFormat
from hydrant.utils.console import set_log_level


def main(argv: Optional[List[str]] = None) -> int:
  """
  Main CLI entry point.

  Parses arguments via argparse and calls the appropriate handler function.

  Args:
      argv: Optional list of command line arguments (defaults to sys.argv).

  Returns:
      int: Exit code (0 for success, non-zero for failure).
  """
  parser = argparse.ArgumentParser(description="hydrant: Hydration-capable component module builder")
  parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
  parser.add_argument("-v", "--verbose", action="store_true", help="Show debug logs from every pipeline stage")

  subparsers = parser.add_subparsers(dest="command", required=True)

  # --- Command: HYDRATE ---
  cmd_hyd = subparsers.add_parser("hydrate", help="Emit hydration-capable variants of component modules")
  cmd_hyd.add_argument("path", type=Path, help="Component module or directory")
  cmd_hyd.add_argument("--manifest", type=Path, default=None, help="Component manifest (default: from toml)")
  cmd_hyd.add_argument("--out", type=Path, default=None, help="Output directory (default: beside each source)")
  cmd_hyd.add_argument(
    "--format",
    dest="module_format",
    choices=[f.value for f in ModuleFormat],
    default=None,
    help="Runtime import style (default: from toml, else named)",
  )
  cmd_hyd.add_argument("--target-version", default=None, help="Python grammar version, e.g. 3.8")
  cmd_hyd.add_argument("--workers", type=int, default=None, help="Worker threads (default: from toml, else 4)")

  args = parser.parse_args(argv)

  if args.verbose:
    set_log_level(logging.DEBUG)

  if args.command == "hydrate":
    return handlers.handle_hydrate(
      args.path, args.manifest, args.out, args.module_format, args.target_version, args.workers
    )

  return 0


if __name__ == "__main__":
  sys.exit(main())
