"""
Tests for the runtime marker decorators.
"""

from typing import Protocol

from autoimpl.markers import generate_impl, markers_of, sum_of


def test_markers_are_recorded_and_transparent() -> None:
  @generate_impl("Generated")
  class Calculator(Protocol):
    @sum_of("Adding")
    def sum(self, x: int, y: int) -> int: ...

  assert markers_of(Calculator) == (("generate_impl", "Generated"),)
  assert markers_of(Calculator.sum) == (("sum_of", "Adding"),)
  assert Calculator.__name__ == "Calculator"


def test_stacked_markers_in_source_order() -> None:
  @sum_of("First")
  @sum_of("Second")
  def add(a, b): ...

  # Matches the order the generator reads, where the first marker wins
  assert markers_of(add) == (("sum_of", "First"), ("sum_of", "Second"))


def test_unmarked_object() -> None:
  assert markers_of(object()) == ()
