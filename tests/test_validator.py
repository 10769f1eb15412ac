"""
Tests for the resolution Validator.
"""

from autoimpl.symbols import InMemorySymbolGraph
from autoimpl.validator import partition
from tests.builders import make_interface


def test_partition_preserves_order() -> None:
  a = make_interface(name="A")
  b = make_interface(name="B")
  c = make_interface(name="C")
  graph = InMemorySymbolGraph([a, b, c], unresolved={b.qualified_name})

  ready, deferred = partition([c, b, a], graph)

  assert ready == [c, a]
  assert deferred == [b]


def test_partition_all_resolved() -> None:
  a = make_interface()
  ready, deferred = partition([a], InMemorySymbolGraph([a]))

  assert ready == [a]
  assert deferred == []


def test_partition_empty() -> None:
  assert partition([], InMemorySymbolGraph()) == ([], [])
