"""
Main Entry Point for the autoimpl CLI.

Handles argument parsing and dispatches to the command handlers defined in
`autoimpl.cli.commands`.
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from autoimpl import __version__
from autoimpl.cli import commands
from autoimpl.enums import NamingStrategy


def main(argv: Optional[List[str]] = None) -> int:
  """
  Main CLI entry point.

  Args:
      argv: Optional list of command line arguments (defaults to sys.argv).

  Returns:
      int: Exit code (0 for success, non-zero for failure).
  """
  parser = argparse.ArgumentParser(description="autoimpl: Interface Implementation Generator")
  parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

  subparsers = parser.add_subparsers(dest="command", required=True)

  # --- Command: GENERATE ---
  cmd_gen = subparsers.add_parser("generate", help="Generate implementations for marked interfaces")
  cmd_gen.add_argument("source", type=Path, help="Source directory")
  cmd_gen.add_argument("--out", type=Path, default=None, help="Output directory (default: from toml)")
  cmd_gen.add_argument(
    "--naming",
    choices=[s.value for s in NamingStrategy],
    default=None,
    help="Generated class naming strategy (default: from toml, else 'declaration')",
  )
  cmd_gen.add_argument(
    "--allow-non-numeric",
    action="store_true",
    help="Skip the numeric type check on marked functions",
  )
  cmd_gen.add_argument(
    "--warn-non-interface",
    action="store_true",
    help="Warn about marked declarations that are not interfaces",
  )
  cmd_gen.add_argument("--max-rounds", type=int, default=10, help="Maximum number of generation rounds")
  cmd_gen.add_argument("--json-trace", type=Path, default=None, help="Dump round results and traces to a JSON file.")

  # --- Command: INSPECT ---
  cmd_insp = subparsers.add_parser("inspect", help="List marked declarations and their resolution state")
  cmd_insp.add_argument("source", type=Path, help="Source directory")

  # --- Command: STALE ---
  cmd_stale = subparsers.add_parser("stale", help="List generated artifacts invalidated by changed sources")
  cmd_stale.add_argument("out", type=Path, help="Output directory holding the dependency manifest")
  cmd_stale.add_argument("changed", nargs="+", help="Changed source paths, relative to the source root")

  args = parser.parse_args(argv)

  if args.command == "generate":
    return commands.handle_generate(
      args.source,
      out=args.out,
      naming=args.naming,
      allow_non_numeric=args.allow_non_numeric,
      warn_non_interface=args.warn_non_interface,
      max_rounds=args.max_rounds,
      json_trace=args.json_trace,
    )

  elif args.command == "inspect":
    return commands.handle_inspect(args.source)

  elif args.command == "stale":
    return commands.handle_stale(args.out, args.changed)

  return 0


if __name__ == "__main__":
  sys.exit(main())
