"""
autoimpl Package.

A compile-time code generator: given a graph of declarations and their
annotations, it finds interfaces marked for synthesis, derives a concrete
implementation for each, and writes the generated modules plus dependency
metadata for incremental rebuilds.

Usage
-----

Generate From a Source Tree
^^^^^^^^^^^^^^^^^^^^^^^^^^^

.. code-block:: python

    import autoimpl
    from autoimpl.frontend import SourceSymbolGraph

    graph = SourceSymbolGraph.from_directories(Path("src"))
    deferred = autoimpl.generate(graph, output_dir=Path("build/generated"))

Driving the Processor Directly
^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^

.. code-block:: python

    from autoimpl import GeneratorConfig, Processor
    from autoimpl.writer import InMemoryCodeGenerator

    code_gen = InMemoryCodeGenerator()
    processor = Processor(code_gen, config=GeneratorConfig(require_numeric_types=False))
    result = processor.run_round(graph)
    print(code_gen.files)
"""

from pathlib import Path
from typing import List, Optional

from autoimpl.config import GeneratorConfig
from autoimpl.processor import Processor, RoundResult
from autoimpl.symbols import ClassDeclaration, SymbolGraph
from autoimpl.writer import FileSystemCodeGenerator

__version__ = "0.1.0"


def generate(
  graph: SymbolGraph,
  output_dir: Optional[Path] = None,
  config: Optional[GeneratorConfig] = None,
) -> List[ClassDeclaration]:
  """
  Runs one generation round and writes artifacts to disk.

  Args:
      graph (SymbolGraph): Declarations for this round.
      output_dir (Path, optional): Output root. Falls back to `config.output_dir`.
      config (GeneratorConfig, optional): Settings. Loaded from pyproject.toml if None.

  Returns:
      List[ClassDeclaration]: Declarations deferred to a later round.

  Raises:
      ValueError: If no output directory is given or configured.
      GenerationError: If a precondition fails during the round.
  """
  config = config or GeneratorConfig.load(output_dir=output_dir)
  root = output_dir or config.output_dir
  if root is None:
    raise ValueError("No output directory given and none configured under [tool.autoimpl].")

  processor = Processor(FileSystemCodeGenerator(root), config=config)
  return processor.process(graph)


__all__ = [
  "generate",
  "GeneratorConfig",
  "Processor",
  "RoundResult",
  "__version__",
]
