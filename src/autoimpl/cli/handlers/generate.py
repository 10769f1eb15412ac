"""
Generate Command Handler.

Runs generation rounds over a source tree until every marked declaration is
generated or no further progress is possible. The output directory is fed
back into the graph between rounds, so declarations that reference generated
types resolve in a later round. Afterwards, artifacts recorded in the manifest
that no marked interface produces any more are removed.
"""

import json
from pathlib import Path
from typing import Optional

from autoimpl.config import GeneratorConfig
from autoimpl.errors import GenerationError
from autoimpl.frontend import SourceSymbolGraph
from autoimpl.processor import Processor
from autoimpl.symbols import SymbolGraph
from autoimpl.utils.console import log_error, log_info, log_success
from autoimpl.writer import FileSystemCodeGenerator


def handle_generate(
  source: Path,
  out: Optional[Path] = None,
  naming: Optional[str] = None,
  allow_non_numeric: bool = False,
  warn_non_interface: bool = False,
  max_rounds: int = 10,
  json_trace: Optional[Path] = None,
) -> int:
  """
  Generates implementations for every marked interface under `source`.

  Args:
      source: Root of the Python source tree.
      out: Output root (default: `[tool.autoimpl] output_dir`).
      naming: Naming strategy override ('declaration' or 'file').
      allow_non_numeric: Disables the numeric type check on marked functions.
      warn_non_interface: Logs a warning for marked non-interfaces.
      max_rounds: Upper bound on generation rounds.
      json_trace: If set, dumps every round's result to this JSON file.

  Returns:
      int: 0 on success (deferred leftovers included), 1 on a fatal error.
  """
  if not source.is_dir():
    log_error(f"Source directory not found: {source}")
    return 1

  config = GeneratorConfig.load(
    naming=naming,
    require_numeric_types=False if allow_non_numeric else None,
    warn_non_interface=True if warn_non_interface else None,
    output_dir=out,
    search_path=source,
  )
  if config.output_dir is None:
    log_error("No output directory: pass --out or set output_dir under [tool.autoimpl].")
    return 1

  out_dir = config.output_dir
  roots = [source]
  if not out_dir.resolve().is_relative_to(source.resolve()):
    roots.append(out_dir)

  def graph_for_round(round_no: int) -> SymbolGraph:
    return SourceSymbolGraph.from_directories(*roots)

  log_info(f"Generating from [path]{source}[/path] into [path]{out_dir}[/path]")
  processor = Processor(FileSystemCodeGenerator(out_dir), config=config)
  try:
    results = processor.run_rounds(graph_for_round, max_rounds=max_rounds, prune=True)
  except GenerationError as e:
    log_error(str(e))
    return 1

  if json_trace:
    json_trace.parent.mkdir(parents=True, exist_ok=True)
    json_trace.write_text(json.dumps([r.model_dump() for r in results], indent=2), encoding="utf-8")

  written = sum(len(r.artifacts) for r in results)
  log_success(f"{written} artifact(s) written in {len(results)} round(s).")
  return 0
