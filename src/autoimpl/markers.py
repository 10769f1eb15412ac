"""
Marker Decorators.

Place these on interface sources. They have no runtime behaviour beyond
recording their arguments on the decorated object; the generator reads them
statically from source.

.. code-block:: python

    from typing import Protocol
    from autoimpl.markers import generate_impl, sum_of

    @generate_impl("Generated")
    class Calculator(Protocol):
        @sum_of("Adding")
        def sum(self, x: int, y: int) -> int: ...
"""

from typing import Any, Callable, TypeVar

T = TypeVar("T")

MARKERS_ATTR = "__autoimpl_markers__"


def _marker(name: str, message: str) -> Callable[[T], T]:
  def decorate(target: T) -> T:
    # Stacked decorators apply bottom-up; prepending keeps source order
    setattr(target, MARKERS_ATTR, ((name, message),) + tuple(getattr(target, MARKERS_ATTR, ())))
    return target

  return decorate


def generate_impl(message: str) -> Callable[[T], T]:
  """
  Marks an interface for synthesis.

  Args:
      message (str): Emitted by the generated `report()` method.
  """
  return _marker("generate_impl", message)


def sum_of(message: str) -> Callable[[T], T]:
  """
  Marks a two-parameter interface method to be implemented as `first + second`.

  Args:
      message (str): Emitted on every call, before the result is computed.
  """
  return _marker("sum_of", message)


def markers_of(target: Any) -> tuple:
  """Returns the (name, message) pairs recorded on `target`, top to bottom as written in source."""
  return getattr(target, MARKERS_ATTR, ())
