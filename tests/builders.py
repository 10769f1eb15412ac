"""
Declaration builders shared by the test modules.
"""

from autoimpl.enums import DeclarationKind
from autoimpl.symbols import (
  AnnotationInstance,
  ClassDeclaration,
  FunctionDeclaration,
  ParameterDeclaration,
)

CALCULATOR_SOURCE = """\
from typing import Protocol

from autoimpl.markers import generate_impl, sum_of


@generate_impl("Generated")
class Calculator(Protocol):
  @sum_of("Adding")
  def sum(self, x: int, y: int) -> int: ...

  def describe(self) -> str:
    return "calculator"
"""


def make_sum(name: str = "sum", message: str = "Adding", type_name: str = "int") -> FunctionDeclaration:
  return FunctionDeclaration(
    name=name,
    parameters=(ParameterDeclaration("x", type_name), ParameterDeclaration("y", type_name)),
    return_type=type_name,
    annotations=(AnnotationInstance("sum_of", (message,)),),
  )


def make_interface(
  name: str = "Calculator",
  package: str = "calculators",
  file_name: str = "calculator.py",
  message: str = "Generated",
  functions=None,
  kind: DeclarationKind = DeclarationKind.INTERFACE,
) -> ClassDeclaration:
  return ClassDeclaration(
    name=name,
    package=package,
    file_name=file_name,
    kind=kind,
    functions=tuple(functions) if functions is not None else (make_sum(),),
    annotations=(AnnotationInstance("generate_impl", (message,)),),
  )
