"""
Inspect Command Handler.

Lists the declarations a round would consider, without writing anything.
"""

from pathlib import Path

from rich.table import Table

from autoimpl.config import GeneratorConfig
from autoimpl.errors import GenerationError
from autoimpl.frontend import SourceSymbolGraph
from autoimpl.processor import Processor
from autoimpl.utils.console import console, log_error, log_info
from autoimpl.writer import InMemoryCodeGenerator


def handle_inspect(source: Path) -> int:
  """
  Prints a table of marked declarations with their kind and resolution state.

  Args:
      source: Root of the Python source tree.

  Returns:
      int: 0 on success, 1 if the tree cannot be read.
  """
  if not source.is_dir():
    log_error(f"Source directory not found: {source}")
    return 1

  config = GeneratorConfig.load(search_path=source)
  try:
    graph = SourceSymbolGraph.from_directories(source)
  except GenerationError as e:
    log_error(str(e))
    return 1

  candidates = Processor(InMemoryCodeGenerator(), config=config).collect(graph)
  if not candidates:
    log_info(f"No declarations marked with @{config.class_marker} or @{config.function_marker}.")
    return 0

  table = Table(title="Marked Declarations")
  table.add_column("Declaration", style="magenta")
  table.add_column("Kind", style="cyan")
  table.add_column("Marked Functions", justify="right")
  table.add_column("Status")

  for declaration in candidates:
    marked = sum(1 for f in declaration.functions if f.annotations_named(config.function_marker))
    missing = graph.unresolved_names(declaration)
    status = "[green]ready[/green]" if not missing else f"[yellow]deferred ({', '.join(sorted(missing))})[/yellow]"
    table.add_row(declaration.qualified_name, declaration.kind.value, str(marked), status)

  console.print(table)
  return 0
