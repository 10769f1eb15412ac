"""
Tests for the CLI commands: generate, inspect and stale.
"""

import json
from pathlib import Path

import pytest
from rich.console import Console

from autoimpl.cli.__main__ import main
from autoimpl.utils.console import reset_console, set_console
from autoimpl.writer import MANIFEST_NAME
from tests.builders import CALCULATOR_SOURCE


@pytest.fixture
def recorded():
  """Routes console and log output into a recording console."""
  rec = Console(record=True, width=200)
  set_console(rec)
  yield rec
  reset_console()


@pytest.fixture
def source_tree(write_tree) -> Path:
  return write_tree({"calculators/calculator.py": CALCULATOR_SOURCE})


def test_generate_writes_artifact_and_manifest(tmp_path: Path, source_tree: Path, recorded: Console) -> None:
  out = tmp_path / "out"

  assert main(["generate", str(source_tree), "--out", str(out)]) == 0

  assert (out / "calculators" / "CalculatorImpl.py").is_file()
  manifest = json.loads((out / MANIFEST_NAME).read_text(encoding="utf-8"))
  assert manifest["calculators/CalculatorImpl.py"]["sources"] == ["calculators/calculator.py"]
  assert "CalculatorImpl.py" in recorded.export_text()


def test_generate_json_trace(tmp_path: Path, source_tree: Path, recorded: Console) -> None:
  trace = tmp_path / "trace" / "rounds.json"

  assert main(["generate", str(source_tree), "--out", str(tmp_path / "out"), "--json-trace", str(trace)]) == 0

  rounds = json.loads(trace.read_text(encoding="utf-8"))
  assert rounds[0]["artifacts"] == ["calculators/CalculatorImpl.py"]


def test_generate_missing_source(tmp_path: Path, recorded: Console) -> None:
  assert main(["generate", str(tmp_path / "nope"), "--out", str(tmp_path / "out")]) == 1
  assert "not found" in recorded.export_text()


def test_generate_fatal_error(tmp_path: Path, write_tree, recorded: Console) -> None:
  src = write_tree(
    {
      "bad/api.py": (
        "from typing import Protocol\n"
        "from autoimpl.markers import generate_impl, sum_of\n"
        "\n"
        "@generate_impl()\n"
        "class Api(Protocol):\n"
        '  @sum_of("Adding")\n'
        "  def add(self, a: int, b: int) -> int: ...\n"
      )
    }
  )
  out = tmp_path / "out"

  assert main(["generate", str(src), "--out", str(out)]) == 1
  assert not (out / "bad" / "ApiImpl.py").exists()
  assert "bad.api.Api" in recorded.export_text()


def test_generate_non_numeric_flag(tmp_path: Path, write_tree, recorded: Console) -> None:
  src = write_tree(
    {
      "text/joiner.py": (
        "from typing import Protocol\n"
        "from autoimpl.markers import generate_impl, sum_of\n"
        "\n"
        '@generate_impl("Joiner")\n'
        "class Joiner(Protocol):\n"
        '  @sum_of("Joining")\n'
        "  def join(self, a: str, b: str) -> str: ...\n"
      )
    }
  )
  out = tmp_path / "out"

  assert main(["generate", str(src), "--out", str(out)]) == 1
  assert main(["generate", str(src), "--out", str(out), "--allow-non-numeric"]) == 0
  assert (out / "text" / "JoinerImpl.py").is_file()


def test_generate_leaves_deferred_without_failing(tmp_path: Path, write_tree, recorded: Console) -> None:
  src = write_tree(
    {
      "vec/math.py": (
        "from typing import Protocol\n"
        "from autoimpl.markers import generate_impl, sum_of\n"
        "\n"
        '@generate_impl("Vectors")\n'
        "class VectorMath(Protocol):\n"
        '  @sum_of("Adding")\n'
        '  def add(self, a: "Vector", b: "Vector") -> "Vector": ...\n'
      )
    }
  )
  out = tmp_path / "out"

  assert main(["generate", str(src), "--out", str(out), "--allow-non-numeric"]) == 0
  assert not (out / "vec" / "VectorMathImpl.py").exists()
  assert "vec.math.VectorMath" in recorded.export_text()


def test_inspect(source_tree: Path, recorded: Console) -> None:
  assert main(["inspect", str(source_tree)]) == 0

  text = recorded.export_text()
  assert "calculators.calculator.Calculator" in text
  assert "ready" in text


def test_stale(tmp_path: Path, source_tree: Path, recorded: Console) -> None:
  out = tmp_path / "out"
  main(["generate", str(source_tree), "--out", str(out)])
  recorded.export_text()

  assert main(["stale", str(out), "calculators/calculator.py"]) == 0
  assert "calculators/CalculatorImpl.py" in recorded.export_text()

  assert main(["stale", str(out), "other/file.py"]) == 0
  assert "CalculatorImpl" not in recorded.export_text()


def test_stale_without_manifest(tmp_path: Path, recorded: Console) -> None:
  assert main(["stale", str(tmp_path), "a.py"]) == 1


def test_generate_top_level_package_interface(tmp_path: Path, write_tree, recorded: Console) -> None:
  src = write_tree({"__init__.py": CALCULATOR_SOURCE})

  assert main(["generate", str(src), "--out", str(tmp_path / "out")]) == 1
  assert "Cannot import the interface" in recorded.export_text()


def test_generate_removes_artifacts_of_deleted_interfaces(tmp_path: Path, write_tree, recorded: Console) -> None:
  src = write_tree(
    {
      "calculators/calculator.py": CALCULATOR_SOURCE,
      "calculators/extra.py": CALCULATOR_SOURCE.replace("Calculator", "Extra"),
    }
  )
  out = tmp_path / "out"
  assert main(["generate", str(src), "--out", str(out)]) == 0
  assert (out / "calculators" / "ExtraImpl.py").is_file()

  (src / "calculators" / "extra.py").unlink()
  assert main(["generate", str(src), "--out", str(out)]) == 0

  assert not (out / "calculators" / "ExtraImpl.py").exists()
  assert (out / "calculators" / "CalculatorImpl.py").is_file()
  manifest = json.loads((out / MANIFEST_NAME).read_text(encoding="utf-8"))
  assert list(manifest) == ["calculators/CalculatorImpl.py"]

  recorded.export_text()
  assert main(["stale", str(out), "calculators/extra.py"]) == 0
  assert "ExtraImpl" not in recorded.export_text()
