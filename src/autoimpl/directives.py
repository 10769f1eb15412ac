"""
Annotation Resolver.

Turns the marker annotations found on a declaration into a closed set of
generation directives, resolved once per declaration:

- `ReportDirective(message)`: from the class-level marker.
- `SumDirective(function, message)`: one per function carrying the
  function-level marker.

The synthesizer only ever sees directives, so annotation names are matched
here and nowhere else.

When a symbol carries the same marker more than once, the first instance in
declaration order wins and the rest are reported with a warning. Hosts do not
guarantee annotation order, so generated behaviour must not depend on which
duplicate comes first.
"""

from dataclasses import dataclass
from typing import Any, List, Optional, Sequence, Tuple, Union

from autoimpl.config import GeneratorConfig
from autoimpl.errors import InvalidArgument, MissingAnnotation, MissingArgument
from autoimpl.symbols import AnnotationInstance, ClassDeclaration, FunctionDeclaration
from autoimpl.utils.console import log_warning


@dataclass(frozen=True)
class ReportDirective:
  message: str


@dataclass(frozen=True)
class SumDirective:
  function: FunctionDeclaration
  message: str


Directive = Union[ReportDirective, SumDirective]


def first_argument(annotation: AnnotationInstance, index: int = 0, symbol: Optional[str] = None) -> Any:
  """
  Returns the argument at `index` of an annotation instance.

  Args:
      annotation (AnnotationInstance): The instance to read.
      index (int): Argument position (default: first).
      symbol (Optional[str]): Owning symbol, used in error context.

  Returns:
      Any: The argument value.

  Raises:
      MissingArgument: If the instance has no argument at `index`.
  """
  if index >= len(annotation.arguments):
    raise MissingArgument(
      f"Annotation requires at least {index + 1} argument(s), found {len(annotation.arguments)}",
      symbol=symbol,
      annotation=annotation.name,
    )
  return annotation.arguments[index]


def select_first(instances: Sequence[AnnotationInstance], symbol: str) -> Optional[AnnotationInstance]:
  """
  Picks the first instance in declaration order.

  Args:
      instances (Sequence[AnnotationInstance]): Instances sharing one name.
      symbol (str): Owning symbol, for the duplicate warning.

  Returns:
      Optional[AnnotationInstance]: The selected instance, or None if empty.
  """
  if not instances:
    return None
  if len(instances) > 1:
    log_warning(
      f"[symbol]{symbol}[/symbol] carries @{instances[0].name} {len(instances)} times; "
      f"using the first and ignoring {len(instances) - 1}."
    )
  return instances[0]


def _message(annotation: AnnotationInstance, symbol: str) -> str:
  value = first_argument(annotation, symbol=symbol)
  if not isinstance(value, str):
    raise InvalidArgument(
      f"Message argument must be a string, got {type(value).__name__}",
      symbol=symbol,
      annotation=annotation.name,
    )
  return value


def resolve_report(declaration: ClassDeclaration, config: GeneratorConfig) -> ReportDirective:
  """
  Resolves the class-level marker into a ReportDirective.

  Raises:
      MissingAnnotation: If the declaration has no class-level marker.
      MissingArgument: If the marker has no message.
  """
  symbol = declaration.qualified_name
  annotation = select_first(declaration.annotations_named(config.class_marker), symbol)
  if annotation is None:
    raise MissingAnnotation(
      "Interface has marked functions but no class-level marker",
      symbol=symbol,
      annotation=config.class_marker,
    )
  return ReportDirective(message=_message(annotation, symbol))


def resolve_sums(declaration: ClassDeclaration, config: GeneratorConfig) -> List[SumDirective]:
  """
  Resolves every function-level marker of a declaration, in function order.

  Functions without the marker produce no directive.
  """
  directives = []
  for func in declaration.functions:
    symbol = f"{declaration.qualified_name}.{func.name}"
    annotation = select_first(func.annotations_named(config.function_marker), symbol)
    if annotation is None:
      continue
    directives.append(SumDirective(function=func, message=_message(annotation, symbol)))
  return directives


def resolve_directives(
  declaration: ClassDeclaration, config: GeneratorConfig
) -> Tuple[ReportDirective, List[SumDirective]]:
  """
  Resolves all directives for one declaration.

  Args:
      declaration (ClassDeclaration): An interface declaration.
      config (GeneratorConfig): Supplies the marker names.

  Returns:
      Tuple[ReportDirective, List[SumDirective]]: The report directive and the
      ordered sum directives.
  """
  return resolve_report(declaration, config), resolve_sums(declaration, config)
