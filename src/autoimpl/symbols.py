"""
Symbol Graph Model.

Defines the read-only view over parsed declarations that the generator
consumes. The host (a compiler integration, the source frontend, or a test)
builds the graph; the generator queries it and never mutates it.

It acts as the contract between the host and the Processor.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Iterable, List, Optional, Set, Tuple

from autoimpl.enums import DeclarationKind, ParameterKind


@dataclass(frozen=True)
class AnnotationInstance:
  """
  A named tag attached to a declaration or function.
  """

  name: str
  """Short annotation name (e.g. 'generate_impl')."""

  arguments: Tuple[Any, ...] = ()
  """Argument values in declaration order."""


@dataclass(frozen=True)
class ParameterDeclaration:
  """
  A single function parameter (the receiver is never included).
  """

  name: str
  """Parameter name."""

  type: Optional[str] = None
  """Declared type as written in source (e.g. 'int'), None when omitted."""

  kind: ParameterKind = ParameterKind.POSITIONAL
  """Binding kind; anything but positional is rejected for marked functions."""


@dataclass(frozen=True)
class FunctionDeclaration:
  """
  A function declared inside a class-like declaration.
  """

  name: str
  """Function name."""

  parameters: Tuple[ParameterDeclaration, ...] = ()
  """Ordered parameters."""

  return_type: Optional[str] = None
  """Declared return type, None when omitted."""

  annotations: Tuple[AnnotationInstance, ...] = ()
  """Ordered annotation instances."""

  def annotations_named(self, name: str) -> List[AnnotationInstance]:
    return [a for a in self.annotations if a.name == name]


@dataclass(frozen=True)
class ClassDeclaration:
  """
  A class-like declaration and its members.
  """

  name: str
  """Simple declaration name (e.g. 'Calculator')."""

  package: str = ""
  """Dotted package of the containing file ('' for top level)."""

  file_name: str = ""
  """Containing file name including extension (e.g. 'calculator.py')."""

  kind: DeclarationKind = DeclarationKind.CLASS
  """Structural category."""

  functions: Tuple[FunctionDeclaration, ...] = ()
  """Ordered member functions."""

  annotations: Tuple[AnnotationInstance, ...] = field(default=())
  """Ordered annotation instances on the declaration itself."""

  @property
  def module_name(self) -> str:
    """Containing file base name (extension stripped)."""
    return self.file_name.rsplit(".", 1)[0] if self.file_name else self.name.lower()

  @property
  def module_path(self) -> str:
    """Dotted import path of the containing module."""
    if self.module_name == "__init__":
      return self.package
    return ".".join(p for p in (self.package, self.module_name) if p)

  @property
  def qualified_name(self) -> str:
    """Declaration identity used for de-duplication."""
    return f"{self.module_path}.{self.name}"

  @property
  def source_path(self) -> str:
    """Containing file path relative to the source root, '/' separated."""
    parts = self.package.split(".") if self.package else []
    return "/".join(parts + [self.file_name or f"{self.module_name}.py"])

  def annotations_named(self, name: str) -> List[AnnotationInstance]:
    return [a for a in self.annotations if a.name == name]

  def carries(self, name: str) -> bool:
    """
    Checks whether the annotation appears on the declaration or any member.

    Args:
        name (str): Annotation name.

    Returns:
        bool: True if found on the declaration or one of its functions.
    """
    if self.annotations_named(name):
      return True
    return any(f.annotations_named(name) for f in self.functions)


class SymbolGraph(ABC):
  """
  Read-only view over the host's resolved declarations.
  """

  @abstractmethod
  def declarations(self) -> Iterable[ClassDeclaration]:
    """
    Enumerates every class-like declaration known to the host.

    Returns:
        Iterable[ClassDeclaration]: All declarations in definition order.
    """

  @abstractmethod
  def is_resolved(self, declaration: ClassDeclaration) -> bool:
    """
    Reports whether every symbol the declaration refers to is available.

    Args:
        declaration (ClassDeclaration): The declaration to check.

    Returns:
        bool: False if the declaration must be deferred to a later round.
    """

  def declarations_annotated_with(self, name: str) -> Set[ClassDeclaration]:
    """
    Finds declarations carrying `name` on themselves or on a member function.

    Args:
        name (str): Annotation name.

    Returns:
        Set[ClassDeclaration]: Matching declarations.
    """
    return {d for d in self.declarations() if d.carries(name)}


class InMemorySymbolGraph(SymbolGraph):
  """
  Graph over an explicit list of declarations.

  Resolution is controlled by the caller through `unresolved`, a set of
  qualified names the host has not finished compiling.
  """

  def __init__(
    self,
    declarations: Iterable[ClassDeclaration] = (),
    unresolved: Iterable[str] = (),
  ) -> None:
    self._declarations = list(declarations)
    self.unresolved = set(unresolved)

  def declarations(self) -> Iterable[ClassDeclaration]:
    return list(self._declarations)

  def is_resolved(self, declaration: ClassDeclaration) -> bool:
    return declaration.qualified_name not in self.unresolved
