"""
Resolution Validator.

Splits a round's candidates into declarations that can be generated now and
declarations the host has not finished resolving. Deferred declarations are
handed back unchanged for a later round; they are not errors.
"""

from typing import Iterable, List, Tuple

from autoimpl.symbols import ClassDeclaration, SymbolGraph


def partition(
  candidates: Iterable[ClassDeclaration], graph: SymbolGraph
) -> Tuple[List[ClassDeclaration], List[ClassDeclaration]]:
  """
  Partitions candidates by the graph's resolution check, preserving order.

  Args:
      candidates (Iterable[ClassDeclaration]): Declarations collected this round.
      graph (SymbolGraph): Answers `is_resolved`.

  Returns:
      Tuple[List[ClassDeclaration], List[ClassDeclaration]]: (ready, deferred).
  """
  ready: List[ClassDeclaration] = []
  deferred: List[ClassDeclaration] = []
  for declaration in candidates:
    if graph.is_resolved(declaration):
      ready.append(declaration)
    else:
      deferred.append(declaration)
  return ready, deferred
