"""
Pytest Configuration and Fixtures.

Includes:
- Syspath patching for local imports.
- The Calculator declaration fixture.
- A source tree fixture plus an importer for generated modules.
"""

import importlib
import sys
from pathlib import Path
from typing import Callable, Dict

import pytest

# Add src to path so we can import 'autoimpl' without installing it
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from autoimpl.symbols import ClassDeclaration
from tests.builders import make_interface


@pytest.fixture
def calculator() -> ClassDeclaration:
  return make_interface()


@pytest.fixture
def write_tree(tmp_path: Path) -> Callable[[Dict[str, str]], Path]:
  """Writes {relative path: source} under tmp_path/src and returns the root."""

  def _write(files: Dict[str, str]) -> Path:
    root = tmp_path / "src"
    for rel, code in files.items():
      target = root / rel
      target.parent.mkdir(parents=True, exist_ok=True)
      target.write_text(code, encoding="utf-8")
    return root

  return _write


@pytest.fixture
def import_generated(monkeypatch: pytest.MonkeyPatch):
  """
  Imports a module from source and output roots merged as namespace packages.

  Modules imported through this fixture are dropped from sys.modules afterwards.
  """
  imported = []

  def _import(module: str, *roots: Path):
    for root in roots:
      monkeypatch.syspath_prepend(str(root))
    importlib.invalidate_caches()
    imported.append(module.split(".")[0])
    return importlib.import_module(module)

  yield _import

  for top in imported:
    for name in [m for m in sys.modules if m == top or m.startswith(f"{top}.")]:
      del sys.modules[name]
