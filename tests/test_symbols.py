"""
Tests for the symbol graph model.
"""

from autoimpl.enums import DeclarationKind
from autoimpl.symbols import AnnotationInstance, ClassDeclaration, FunctionDeclaration, InMemorySymbolGraph
from tests.builders import make_interface, make_sum


def test_identity() -> None:
  decl = make_interface(name="Calculator", package="com.example", file_name="calculator.py")

  assert decl.module_name == "calculator"
  assert decl.module_path == "com.example.calculator"
  assert decl.qualified_name == "com.example.calculator.Calculator"
  assert decl.source_path == "com/example/calculator.py"


def test_identity_top_level_and_init() -> None:
  top = make_interface(package="", file_name="calc.py")
  init = make_interface(package="calculators", file_name="__init__.py")

  assert top.module_path == "calc"
  assert top.source_path == "calc.py"
  assert init.module_path == "calculators"
  assert init.source_path == "calculators/__init__.py"


def test_carries_on_member() -> None:
  decl = ClassDeclaration(name="Plain", functions=(make_sum(),))

  assert decl.carries("sum_of")
  assert not decl.carries("generate_impl")


def test_annotated_with_queries() -> None:
  marked = make_interface(name="Marked")
  member_only = ClassDeclaration(
    name="MemberOnly",
    package="calculators",
    file_name="calculator.py",
    kind=DeclarationKind.CLASS,
    functions=(make_sum(),),
  )
  unmarked = ClassDeclaration(
    name="Unmarked",
    functions=(FunctionDeclaration(name="f", annotations=(AnnotationInstance("other"),)),),
  )
  graph = InMemorySymbolGraph([marked, member_only, unmarked])

  assert graph.declarations_annotated_with("generate_impl") == {marked}
  assert graph.declarations_annotated_with("sum_of") == {marked, member_only}
  assert graph.declarations_annotated_with("missing") == set()


def test_in_memory_resolution() -> None:
  decl = make_interface()
  graph = InMemorySymbolGraph([decl], unresolved=[decl.qualified_name])

  assert not graph.is_resolved(decl)
  graph.unresolved.clear()
  assert graph.is_resolved(decl)
