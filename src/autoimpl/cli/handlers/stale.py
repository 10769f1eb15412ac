"""
Stale Command Handler.

Reads the dependency manifest of an output directory and lists the artifacts
invalidated by a set of changed source files.
"""

from pathlib import Path
from typing import List

from autoimpl.utils.console import console, log_error
from autoimpl.writer import FileSystemCodeGenerator


def handle_stale(out: Path, changed: List[str]) -> int:
  """
  Prints one stale artifact path per line.

  Args:
      out: Output root holding the manifest.
      changed: Changed source paths, relative to the source root.

  Returns:
      int: 0 on success, 1 if the manifest is missing.
  """
  code_gen = FileSystemCodeGenerator(out)
  if not code_gen.manifest_path.is_file():
    log_error(f"No dependency manifest in {out}")
    return 1

  for path in code_gen.stale_artifacts(Path(c).as_posix() for c in changed):
    console.print(path, highlight=False)
  return 0
