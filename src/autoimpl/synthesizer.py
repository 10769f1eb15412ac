"""
Code Synthesizer.

Builds the in-memory model of a class implementing a marked interface, using
LibCST nodes so the output can be rendered deterministically.

For an interface `Calculator` in `calculators/calculator.py` the rendered
module looks like::

    # Generated by autoimpl from calculators/calculator.py. Do not edit.
    import typing

    from calculators.calculator import Calculator


    class CalculatorImpl(Calculator):
        def __init__(self, sink: typing.Optional[typing.Callable[[str], None]] = None) -> None:
            self._sink = sink if sink is not None else print

        def report(self) -> None:
            self._sink('Generated')

        def sum(self, x: int, y: int) -> int:
            self._sink('Adding')
            return x + y

Messages are emitted through the injectable `sink` (standard output by
default), never returned.
"""

import keyword
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import libcst as cst

from autoimpl.config import GeneratorConfig
from autoimpl.directives import ReportDirective, SumDirective, resolve_directives
from autoimpl.enums import DeclarationKind, ParameterKind
from autoimpl.errors import SignatureError, UnimportableInterface
from autoimpl.naming import NamingPolicy, get_naming_policy
from autoimpl.symbols import ClassDeclaration, ParameterDeclaration

REPORT_METHOD = "report"
SINK_ATTR = "_sink"

# Members every generated class defines itself
RESERVED_NAMES = {"__init__", REPORT_METHOD, SINK_ATTR}

NUMERIC_TYPES = {
  "int",
  "float",
  "complex",
  "Decimal",
  "decimal.Decimal",
  "Fraction",
  "fractions.Fraction",
  "Number",
  "Complex",
  "Real",
  "Rational",
  "Integral",
  "numbers.Number",
  "numbers.Complex",
  "numbers.Real",
  "numbers.Rational",
  "numbers.Integral",
}


@dataclass
class SynthesizedClass:
  """
  Transient model of one generated implementation.
  """

  package: str
  """Target package (same as the interface's)."""

  name: str
  """Target class name."""

  interface: ClassDeclaration
  """The interface being implemented."""

  methods: List[cst.FunctionDef] = field(default_factory=list)
  """Generated methods in emission order."""

  @property
  def file_name(self) -> str:
    return self.name

  def method_names(self) -> List[str]:
    return [m.name.value for m in self.methods]

  def to_module(self) -> cst.Module:
    """
    Assembles the full LibCST module for this class.

    Returns:
        cst.Module: Header comment, imports and the class definition.
    """
    body: List[cst.BaseStatement] = [
      cst.parse_statement("import typing"),
      cst.parse_statement(f"from {self.interface.module_path} import {self.interface.name}").with_changes(
        leading_lines=[cst.EmptyLine()]
      ),
    ]

    members = [m if i == 0 else m.with_changes(leading_lines=[cst.EmptyLine()]) for i, m in enumerate(self.methods)]

    body.append(
      cst.ClassDef(
        name=cst.Name(self.name),
        bases=[cst.Arg(value=cst.Name(self.interface.name))],
        leading_lines=[cst.EmptyLine(), cst.EmptyLine()],
        body=cst.IndentedBlock(body=members),
      )
    )

    header = [cst.EmptyLine(comment=cst.Comment(f"# Generated by autoimpl from {self.interface.source_path}. Do not edit."))]
    return cst.Module(body=body, header=header)

  def render(self) -> str:
    return self.to_module().code


class CodeSynthesizer:
  """
  Produces one SynthesizedClass per eligible interface declaration.
  """

  def __init__(self, config: Optional[GeneratorConfig] = None, naming: Optional[NamingPolicy] = None) -> None:
    """
    Initialize the synthesizer.

    Args:
        config (GeneratorConfig, optional): Marker names and type checking switches.
        naming (NamingPolicy, optional): Overrides the policy selected by `config.naming`.
    """
    self.config = config or GeneratorConfig()
    self.naming = naming or get_naming_policy(self.config.naming)

  def target_name(self, declaration: ClassDeclaration) -> str:
    return self.naming(declaration)

  def synthesize(self, declaration: ClassDeclaration) -> Optional[SynthesizedClass]:
    """
    Builds the implementation model for an interface.

    Args:
        declaration (ClassDeclaration): Candidate declaration.

    Returns:
        Optional[SynthesizedClass]: None if the declaration is not an interface.

    Raises:
        GenerationError: If the markers or signatures violate a precondition.
    """
    if declaration.kind != DeclarationKind.INTERFACE:
      return None

    self._check_importable(declaration)
    report, sums = resolve_directives(declaration, self.config)

    synthesized = SynthesizedClass(
      package=declaration.package,
      name=self.target_name(declaration),
      interface=declaration,
    )
    synthesized.methods.append(self._build_init())
    synthesized.methods.append(self._build_report(report))
    for directive in sums:
      synthesized.methods.append(self._build_sum(declaration, directive))
    return synthesized

  def _check_importable(self, declaration: ClassDeclaration) -> None:
    """
    Raises:
        UnimportableInterface: If the module path is empty (a top-level
            `__init__.py`) or a segment is not a valid identifier.
    """
    path = declaration.module_path
    segments = path.split(".") if path else []
    if not segments or any(not s.isidentifier() or keyword.iskeyword(s) for s in segments):
      raise UnimportableInterface(
        f"Cannot import the interface from module path '{path}' ({declaration.source_path})",
        symbol=declaration.qualified_name,
        annotation=self.config.class_marker,
      )

  def _build_init(self) -> cst.FunctionDef:
    return cst.FunctionDef(
      name=cst.Name("__init__"),
      params=cst.Parameters(
        params=[
          cst.Param(name=cst.Name("self")),
          cst.Param(
            name=cst.Name("sink"),
            annotation=cst.Annotation(cst.parse_expression("typing.Optional[typing.Callable[[str], None]]")),
            default=cst.Name("None"),
          ),
        ]
      ),
      returns=cst.Annotation(cst.Name("None")),
      body=cst.IndentedBlock(body=[cst.parse_statement(f"self.{SINK_ATTR} = sink if sink is not None else print")]),
    )

  def _emit(self, message: str) -> cst.SimpleStatementLine:
    call = cst.Call(
      func=cst.Attribute(value=cst.Name("self"), attr=cst.Name(SINK_ATTR)),
      args=[cst.Arg(value=cst.SimpleString(repr(message)))],
    )
    return cst.SimpleStatementLine(body=[cst.Expr(value=call)])

  def _build_report(self, directive: ReportDirective) -> cst.FunctionDef:
    return cst.FunctionDef(
      name=cst.Name(REPORT_METHOD),
      params=cst.Parameters(params=[cst.Param(name=cst.Name("self"))]),
      returns=cst.Annotation(cst.Name("None")),
      body=cst.IndentedBlock(body=[self._emit(directive.message)]),
    )

  def _build_sum(self, declaration: ClassDeclaration, directive: SumDirective) -> cst.FunctionDef:
    func = directive.function
    symbol = f"{declaration.qualified_name}.{func.name}"
    if func.name in RESERVED_NAMES:
      raise SignatureError(
        f"'{func.name}' is reserved for the generated class and cannot be a marked function",
        symbol=symbol,
        annotation=self.config.function_marker,
      )
    self._check_signature(func.parameters, func.return_type, symbol)

    first, second = func.parameters
    params = [cst.Param(name=cst.Name("self"))]
    params.extend(self._param(p) for p in (first, second))

    return cst.FunctionDef(
      name=cst.Name(func.name),
      params=cst.Parameters(params=params),
      returns=cst.Annotation(cst.parse_expression(func.return_type)) if func.return_type else None,
      body=cst.IndentedBlock(
        body=[
          self._emit(directive.message),
          cst.parse_statement(f"return {first.name} + {second.name}"),
        ]
      ),
    )

  def _param(self, parameter: ParameterDeclaration) -> cst.Param:
    annotation = cst.Annotation(cst.parse_expression(parameter.type)) if parameter.type else None
    return cst.Param(name=cst.Name(parameter.name), annotation=annotation)

  def _check_signature(
    self,
    parameters: Tuple[ParameterDeclaration, ...],
    return_type: Optional[str],
    symbol: str,
  ) -> None:
    """
    Validates that a marked function can be implemented as `first + second`.

    Raises:
        SignatureError: On arity other than two, on a keyword-only or variadic
            parameter, or on a non-numeric annotated type while
            `require_numeric_types` is enabled.
    """
    if len(parameters) != 2:
      raise SignatureError(
        f"Marked functions must take exactly two parameters, found {len(parameters)}",
        symbol=symbol,
        annotation=self.config.function_marker,
      )

    for param in parameters:
      if param.kind != ParameterKind.POSITIONAL:
        raise SignatureError(
          f"Parameter '{param.name}' is {param.kind.value}; marked functions take two positional parameters",
          symbol=symbol,
          annotation=self.config.function_marker,
        )

    if not self.config.require_numeric_types:
      return

    declared = [p.type for p in parameters] + [return_type]
    for type_name in declared:
      if type_name is None:
        continue
      if type_name.strip("'\" ") not in NUMERIC_TYPES:
        raise SignatureError(
          f"Type '{type_name}' does not support numeric addition",
          symbol=symbol,
          annotation=self.config.function_marker,
        )
