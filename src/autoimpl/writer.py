"""
Artifact Writer.

Serializes synthesized classes through the host's file-creation side channel
(`CodeGenerator`) and tags each artifact with a `DependencyDescriptor` so the
host build can invalidate it when its originating source changes.

Two side channels ship with the library:

- `FileSystemCodeGenerator`: writes under an output root and maintains a JSON
  dependency manifest (`autoimpl-deps.json`).
- `InMemoryCodeGenerator`: keeps artifacts in a dict, for embedding hosts.
"""

import hashlib
import io
import json
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import IO, Dict, Iterable, List, Optional, Tuple

from autoimpl.synthesizer import SynthesizedClass

MANIFEST_NAME = "autoimpl-deps.json"


@dataclass(frozen=True)
class DependencyDescriptor:
  """
  Links a generated artifact to the source files it was derived from.
  """

  sources: Tuple[str, ...]
  """Originating source paths, '/' separated."""

  aggregating: bool = False
  """True if the artifact depends on sources beyond `sources` (never set by this generator)."""


@dataclass(frozen=True)
class WriteResult:
  path: str
  """Artifact path relative to the output root."""

  changed: bool
  """False if the artifact already held exactly this text."""

  descriptor: DependencyDescriptor
  sha256: str
  """Digest of the written text."""


def artifact_path(package: str, file_name: str, extension: str) -> str:
  """
  Builds `<package dirs>/<file_name>.<extension>`.

  Args:
      package (str): Dotted package ('' for top level).
      file_name (str): Base name without extension.
      extension (str): Extension without the dot.

  Returns:
      str: '/' separated relative path.
  """
  parts = package.split(".") if package else []
  return "/".join(parts + [f"{file_name}.{extension}"])


class CodeGenerator(ABC):
  """
  File-creation side channel provided by the host.
  """

  @abstractmethod
  def create_new_file(
    self,
    dependencies: DependencyDescriptor,
    package: str,
    file_name: str,
    extension: str = "py",
  ) -> IO[str]:
    """
    Opens a writable text sink for a new (or replaced) artifact.

    Returns:
        IO[str]: Sink; the caller closes it.
    """

  def existing_text(self, package: str, file_name: str, extension: str = "py") -> Optional[str]:
    """Current content of an artifact, or None if unknown or absent."""
    return None

  def prune(self, keep: Iterable[str]) -> List[str]:
    """
    Forgets recorded artifacts whose paths are not in `keep`.

    Returns:
        List[str]: Sorted paths that were dropped.
    """
    return []

  def finish(self) -> None:
    """Called once at the end of a round."""


class FileSystemCodeGenerator(CodeGenerator):
  """
  Writes artifacts below `root` and records their dependencies.

  Attributes:
      root (Path): Output directory.
      dependencies (Dict[str, DependencyDescriptor]): Artifact path -> descriptor,
          seeded from an existing manifest so it survives across rounds.
  """

  def __init__(self, root: Path, manifest_name: str = MANIFEST_NAME) -> None:
    self.root = Path(root)
    self.manifest_path = self.root / manifest_name
    self.dependencies: Dict[str, DependencyDescriptor] = self._read_manifest()

  def create_new_file(
    self,
    dependencies: DependencyDescriptor,
    package: str,
    file_name: str,
    extension: str = "py",
  ) -> IO[str]:
    rel_path = artifact_path(package, file_name, extension)
    target = self.root / rel_path
    target.parent.mkdir(parents=True, exist_ok=True)
    self.dependencies[rel_path] = dependencies
    return open(target, "w", encoding="utf-8", newline="\n")

  def existing_text(self, package: str, file_name: str, extension: str = "py") -> Optional[str]:
    target = self.root / artifact_path(package, file_name, extension)
    if not target.is_file():
      return None
    with open(target, encoding="utf-8", newline="") as f:
      return f.read()

  def prune(self, keep: Iterable[str]) -> List[str]:
    """
    Drops manifest entries outside `keep` and deletes their artifact files.

    Entries left behind by removed or renamed interfaces would otherwise be
    reported as stale forever.

    Args:
        keep (Iterable[str]): Artifact paths still produced by the generator.

    Returns:
        List[str]: Sorted paths that were dropped.
    """
    kept = set(keep)
    dropped = sorted(path for path in self.dependencies if path not in kept)
    for path in dropped:
      del self.dependencies[path]
      (self.root / path).unlink(missing_ok=True)
    return dropped

  def finish(self) -> None:
    self.write_manifest()

  def write_manifest(self) -> None:
    """Dumps the dependency map as sorted, stable JSON."""
    data = {
      path: {"sources": list(desc.sources), "aggregating": desc.aggregating}
      for path, desc in sorted(self.dependencies.items())
    }
    self.root.mkdir(parents=True, exist_ok=True)
    self.manifest_path.write_text(json.dumps(data, indent=2, sort_keys=True) + "\n", encoding="utf-8")

  def stale_artifacts(self, changed_sources: Iterable[str]) -> List[str]:
    """
    Lists artifacts that must be regenerated after `changed_sources` changed.

    Aggregating artifacts are always stale.

    Args:
        changed_sources (Iterable[str]): Source paths, '/' separated.

    Returns:
        List[str]: Sorted artifact paths.
    """
    changed = set(changed_sources)
    return sorted(
      path for path, desc in self.dependencies.items() if desc.aggregating or changed.intersection(desc.sources)
    )

  def _read_manifest(self) -> Dict[str, DependencyDescriptor]:
    if not self.manifest_path.is_file():
      return {}
    raw = json.loads(self.manifest_path.read_text(encoding="utf-8"))
    return {
      path: DependencyDescriptor(sources=tuple(entry.get("sources", [])), aggregating=entry.get("aggregating", False))
      for path, entry in raw.items()
    }


class _CapturingBuffer(io.StringIO):
  def __init__(self, files: Dict[str, str], key: str) -> None:
    super().__init__()
    self._files = files
    self._key = key

  def close(self) -> None:
    if not self.closed:
      self._files[self._key] = self.getvalue()
    super().close()


class InMemoryCodeGenerator(CodeGenerator):
  """
  Collects artifacts in `files` (relative path -> text).
  """

  def __init__(self) -> None:
    self.files: Dict[str, str] = {}
    self.dependencies: Dict[str, DependencyDescriptor] = {}

  def create_new_file(
    self,
    dependencies: DependencyDescriptor,
    package: str,
    file_name: str,
    extension: str = "py",
  ) -> IO[str]:
    rel_path = artifact_path(package, file_name, extension)
    self.dependencies[rel_path] = dependencies
    return _CapturingBuffer(self.files, rel_path)

  def existing_text(self, package: str, file_name: str, extension: str = "py") -> Optional[str]:
    return self.files.get(artifact_path(package, file_name, extension))

  def prune(self, keep: Iterable[str]) -> List[str]:
    kept = set(keep)
    dropped = sorted(path for path in self.dependencies if path not in kept)
    for path in dropped:
      del self.dependencies[path]
      self.files.pop(path, None)
    return dropped


class ArtifactWriter:
  """
  Writes one artifact per SynthesizedClass through a CodeGenerator.
  """

  def __init__(self, code_generator: CodeGenerator, extension: str = "py") -> None:
    self.code_generator = code_generator
    self.extension = extension

  def write(self, synthesized: SynthesizedClass, descriptor: DependencyDescriptor) -> WriteResult:
    """
    Renders and writes a synthesized class.

    Rendering is deterministic, so writing the same class twice produces
    byte-identical output and reports `changed=False` the second time.

    Args:
        synthesized (SynthesizedClass): The class model.
        descriptor (DependencyDescriptor): Dependencies to record.

    Returns:
        WriteResult: Where the artifact went, whether its content changed, and its digest.
    """
    text = synthesized.render()
    previous = self.code_generator.existing_text(synthesized.package, synthesized.file_name, self.extension)
    with self.code_generator.create_new_file(
      descriptor, synthesized.package, synthesized.file_name, self.extension
    ) as sink:
      sink.write(text)

    return WriteResult(
      path=artifact_path(synthesized.package, synthesized.file_name, self.extension),
      changed=previous != text,
      descriptor=descriptor,
      sha256=hashlib.sha256(text.encode("utf-8")).hexdigest(),
    )
