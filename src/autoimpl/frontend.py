"""
Python Source Frontend.

Builds a `SymbolGraph` from Python source files using LibCST, so the
generator can run over a real source tree (batch CLI, tests) without a
compiler plugin host.

Mapping rules:

- A top-level class deriving from `Protocol` or `ABC` (or declared with
  `metaclass=ABCMeta`) is an interface, and so is any class deriving from an
  ABC interface declared elsewhere in the graph. Enum, NamedTuple and
  TypedDict subclasses are `other`. Everything else is a plain class.
- Parameters keep their binding kind: `*args`, keyword-only parameters and
  `**kwargs` are recorded so signature checks see the full arity.
- Decorators become annotation instances, named by the last segment of the
  decorator (`@markers.generate_impl(...)` -> `generate_impl`). Call
  arguments, positional then keyword in source order, become the argument
  values; literals are evaluated, anything else is kept as source text.
- A declaration is unresolved when a type named in one of its function
  signatures is neither a builtin, defined or imported in its module, nor
  declared anywhere else in the graph. Such declarations are deferred until a
  later round supplies the missing type.
"""

import builtins
from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Set, Tuple

import libcst as cst
from libcst.helpers import get_full_name_for_node

from autoimpl.enums import DeclarationKind, ParameterKind
from autoimpl.errors import SourceParseError
from autoimpl.symbols import (
  AnnotationInstance,
  ClassDeclaration,
  FunctionDeclaration,
  ParameterDeclaration,
  SymbolGraph,
)

INTERFACE_BASES = {
  "Protocol",
  "typing.Protocol",
  "typing_extensions.Protocol",
  "ABC",
  "abc.ABC",
}
ABC_BASES = {"ABC", "abc.ABC"}
INTERFACE_METACLASSES = {"ABCMeta", "abc.ABCMeta"}
OTHER_BASES = {
  "Enum",
  "enum.Enum",
  "IntEnum",
  "enum.IntEnum",
  "StrEnum",
  "enum.StrEnum",
  "NamedTuple",
  "typing.NamedTuple",
  "TypedDict",
  "typing.TypedDict",
}
BUILTIN_NAMES = set(dir(builtins))

_EMPTY = cst.Module(body=[])


def _code(node: cst.CSTNode) -> str:
  return _EMPTY.code_for_node(node)


def _literal(expr: cst.BaseExpression) -> Any:
  """Evaluates simple literals; falls back to source text."""
  if isinstance(expr, (cst.SimpleString, cst.ConcatenatedString, cst.Integer, cst.Float)):
    value = expr.evaluated_value
    if value is not None:
      return value
  if isinstance(expr, cst.Name) and expr.value in ("True", "False", "None"):
    return {"True": True, "False": False, "None": None}[expr.value]
  if isinstance(expr, cst.UnaryOperation) and isinstance(expr.operator, cst.Minus):
    inner = _literal(expr.expression)
    if isinstance(inner, (int, float)):
      return -inner
  return _code(expr)


def _annotation(decorator: cst.Decorator) -> Optional[AnnotationInstance]:
  full_name = get_full_name_for_node(decorator.decorator)
  if not full_name:
    return None
  name = full_name.split(".")[-1]
  args: Tuple[Any, ...] = ()
  if isinstance(decorator.decorator, cst.Call):
    positional = [a for a in decorator.decorator.args if a.keyword is None and not a.star]
    keyword = [a for a in decorator.decorator.args if a.keyword is not None]
    args = tuple(_literal(a.value) for a in positional + keyword)
  return AnnotationInstance(name=name, arguments=args)


def _annotations(decorators: Iterable[cst.Decorator]) -> Tuple[AnnotationInstance, ...]:
  found = (_annotation(d) for d in decorators)
  return tuple(a for a in found if a is not None)


def _type_text(annotation: Optional[cst.Annotation]) -> Optional[str]:
  if annotation is None:
    return None
  return _code(annotation.annotation)


def _parameter(param: cst.Param, kind: ParameterKind) -> ParameterDeclaration:
  return ParameterDeclaration(name=param.name.value, type=_type_text(param.annotation), kind=kind)


def referenced_names(type_text: Optional[str]) -> Set[str]:
  """
  Root names referenced by a type expression.

  String annotations ("Vector") are parsed and inspected too.

  Args:
      type_text (Optional[str]): Source text of a type annotation.

  Returns:
      Set[str]: Root identifiers ('numbers.Real' -> {'numbers'}).
  """
  if not type_text:
    return set()
  try:
    expr = cst.parse_expression(type_text)
  except cst.ParserSyntaxError:
    return set()

  collector = _NameCollector()
  expr.visit(collector)
  return collector.names


class _NameCollector(cst.CSTVisitor):
  def __init__(self) -> None:
    self.names: Set[str] = set()

  def visit_Attribute(self, node: cst.Attribute) -> bool:
    root = get_full_name_for_node(node)
    if root:
      self.names.add(root.split(".")[0])
      return False
    return True

  def visit_Name(self, node: cst.Name) -> None:
    self.names.add(node.value)

  def visit_SimpleString(self, node: cst.SimpleString) -> None:
    value = node.evaluated_value
    if isinstance(value, str):
      self.names |= referenced_names(value)


class _ModuleCollector(cst.CSTVisitor):
  """
  Collects top-level class declarations and module-level bindings.
  """

  def __init__(self, package: str, file_name: str) -> None:
    self.package = package
    self.file_name = file_name
    self.classes: List[ClassDeclaration] = []
    self.bindings: Set[str] = set()
    self.wildcard_import = False
    self.base_names: Dict[str, Set[str]] = {}
    self.abc_rooted: Set[str] = set()

  def visit_ClassDef(self, node: cst.ClassDef) -> bool:
    # Members are read directly; nested classes are not declarations
    self.bindings.add(node.name.value)
    self.classes.append(self._declaration(node))
    return False

  def visit_FunctionDef(self, node: cst.FunctionDef) -> bool:
    self.bindings.add(node.name.value)
    return False

  def visit_Import(self, node: cst.Import) -> None:
    for alias in node.names:
      if alias.asname:
        self.bindings.add(_code(alias.asname.name))
      else:
        self.bindings.add(_code(alias.name).split(".")[0])

  def visit_ImportFrom(self, node: cst.ImportFrom) -> None:
    if isinstance(node.names, cst.ImportStar):
      self.wildcard_import = True
      return
    for alias in node.names:
      self.bindings.add(_code(alias.asname.name) if alias.asname else _code(alias.name))

  def visit_AssignTarget(self, node: cst.AssignTarget) -> None:
    if isinstance(node.target, cst.Name):
      self.bindings.add(node.target.value)

  def visit_AnnAssign(self, node: cst.AnnAssign) -> None:
    if isinstance(node.target, cst.Name):
      self.bindings.add(node.target.value)

  def _kind(self, node: cst.ClassDef) -> DeclarationKind:
    bases = {get_full_name_for_node(arg.value) for arg in node.bases}
    bases.discard(None)
    metaclasses = {
      get_full_name_for_node(arg.value) for arg in node.keywords if arg.keyword and arg.keyword.value == "metaclass"
    }
    name = node.name.value
    self.base_names[name] = {b.split(".")[-1] for b in bases}
    if bases & ABC_BASES or metaclasses & INTERFACE_METACLASSES:
      self.abc_rooted.add(name)
    if bases & INTERFACE_BASES or metaclasses & INTERFACE_METACLASSES:
      return DeclarationKind.INTERFACE
    if bases & OTHER_BASES:
      return DeclarationKind.OTHER
    return DeclarationKind.CLASS

  def _declaration(self, node: cst.ClassDef) -> ClassDeclaration:
    functions = []
    if isinstance(node.body, cst.IndentedBlock):
      for stmt in node.body.body:
        if isinstance(stmt, cst.FunctionDef):
          functions.append(self._function(stmt))

    return ClassDeclaration(
      name=node.name.value,
      package=self.package,
      file_name=self.file_name,
      kind=self._kind(node),
      functions=tuple(functions),
      annotations=_annotations(node.decorators),
    )

  def _function(self, node: cst.FunctionDef) -> FunctionDeclaration:
    annotations = _annotations(node.decorators)
    params = list(node.params.posonly_params) + list(node.params.params)
    is_static = any(a.name == "staticmethod" for a in annotations)
    if params and not is_static and params[0].name.value in ("self", "cls"):
      params = params[1:]

    declared = [_parameter(p, ParameterKind.POSITIONAL) for p in params]
    if isinstance(node.params.star_arg, cst.Param):
      declared.append(_parameter(node.params.star_arg, ParameterKind.VAR_POSITIONAL))
    declared.extend(_parameter(p, ParameterKind.KEYWORD_ONLY) for p in node.params.kwonly_params)
    if node.params.star_kwarg is not None:
      declared.append(_parameter(node.params.star_kwarg, ParameterKind.VAR_KEYWORD))

    return FunctionDeclaration(
      name=node.name.value,
      parameters=tuple(declared),
      return_type=_type_text(node.returns),
      annotations=annotations,
    )


class SourceSymbolGraph(SymbolGraph):
  """
  Symbol graph over a set of Python source files.

  Attributes:
      sources (Dict[str, str]): Relative path ('pkg/mod.py') -> source text.
      known_names (Set[str]): Extra names treated as resolved (supplied by the host).
  """

  def __init__(self, sources: Dict[str, str], known_names: Iterable[str] = ()) -> None:
    self.sources = dict(sources)
    self.known_names = set(known_names)
    self._declarations: List[ClassDeclaration] = []
    self._bindings: Dict[str, Set[str]] = {}
    self._wildcards: Set[str] = set()
    self._base_names: Dict[str, Set[str]] = {}
    self._abc_rooted: Set[str] = set()
    for rel_path in sorted(self.sources):
      self._ingest(rel_path, self.sources[rel_path])
    self._promote_abc_subclasses()
    self._global_names = {d.name for d in self._declarations}

  @classmethod
  def from_directories(cls, *roots: Path, known_names: Iterable[str] = ()) -> "SourceSymbolGraph":
    """
    Reads every `*.py` file below the given roots.

    Paths are keyed relative to their own root, so a source root and an output
    root merge into one package namespace.

    Args:
        *roots (Path): Source directories. Missing directories are ignored.
        known_names (Iterable[str]): Extra resolvable names.

    Returns:
        SourceSymbolGraph: The parsed graph.
    """
    sources: Dict[str, str] = {}
    for root in roots:
      root = Path(root)
      if not root.is_dir():
        continue
      for path in sorted(root.rglob("*.py")):
        rel = path.relative_to(root)
        if any(part.startswith(".") or part == "__pycache__" for part in rel.parts):
          continue
        sources[rel.as_posix()] = path.read_text(encoding="utf-8")
    return cls(sources, known_names=known_names)

  def _ingest(self, rel_path: str, code: str) -> None:
    parts = rel_path.split("/")
    package = ".".join(parts[:-1])
    try:
      module = cst.parse_module(code)
    except cst.ParserSyntaxError as e:
      raise SourceParseError(f"Cannot parse {rel_path}: {e.message}", symbol=rel_path) from e

    collector = _ModuleCollector(package, parts[-1])
    module.visit(collector)
    self._declarations.extend(collector.classes)
    self._bindings[rel_path] = collector.bindings
    for declaration in collector.classes:
      self._base_names[declaration.qualified_name] = collector.base_names.get(declaration.name, set())
      if declaration.name in collector.abc_rooted:
        self._abc_rooted.add(declaration.qualified_name)
    if collector.wildcard_import:
      self._wildcards.add(rel_path)

  def _promote_abc_subclasses(self) -> None:
    """
    Marks classes deriving from an ABC interface of the graph as interfaces.

    Bases are matched by simple name, transitively. Protocol subclasses are
    not promoted: a class that does not list `Protocol` itself is concrete.
    """
    abstract = {d.name for d in self._declarations if d.qualified_name in self._abc_rooted}
    changed = True
    while changed:
      changed = False
      for i, declaration in enumerate(self._declarations):
        if declaration.kind != DeclarationKind.CLASS:
          continue
        if self._base_names.get(declaration.qualified_name, set()) & abstract:
          self._declarations[i] = replace(declaration, kind=DeclarationKind.INTERFACE)
          abstract.add(declaration.name)
          changed = True

  def declarations(self) -> Iterable[ClassDeclaration]:
    return list(self._declarations)

  def unresolved_names(self, declaration: ClassDeclaration) -> Set[str]:
    """
    Type names in the declaration's signatures that nothing provides.

    Args:
        declaration (ClassDeclaration): Declaration parsed by this graph.

    Returns:
        Set[str]: Missing names (empty when resolved).
    """
    if declaration.source_path in self._wildcards:
      return set()

    available = BUILTIN_NAMES | self.known_names | self._global_names
    available |= self._bindings.get(declaration.source_path, set())

    referenced: Set[str] = set()
    for func in declaration.functions:
      for param in func.parameters:
        referenced |= referenced_names(param.type)
      referenced |= referenced_names(func.return_type)
    return referenced - available

  def is_resolved(self, declaration: ClassDeclaration) -> bool:
    return not self.unresolved_names(declaration)
