"""
Error Taxonomy.

Every fatal condition of a generation round derives from `GenerationError`.
Raising one aborts the round; the host reports it as a diagnostic for the
offending source.

Unresolved symbols are not represented here: they are deferred and returned
from `Processor.process`, never raised.
"""

from typing import Optional


class GenerationError(Exception):
  """
  Base class for fatal generation failures.

  Attributes:
      symbol (Optional[str]): Qualified name of the offending declaration or function.
      annotation (Optional[str]): Name of the annotation involved, if any.
  """

  def __init__(self, message: str, symbol: Optional[str] = None, annotation: Optional[str] = None) -> None:
    self.symbol = symbol
    self.annotation = annotation
    context = []
    if symbol:
      context.append(f"symbol={symbol}")
    if annotation:
      context.append(f"annotation=@{annotation}")
    if context:
      message = f"{message} ({', '.join(context)})"
    super().__init__(message)


class MissingArgument(GenerationError):
  """A marker annotation that must carry a message has no argument."""


class InvalidArgument(GenerationError):
  """A marker annotation argument has the wrong type (messages must be strings)."""


class MissingAnnotation(GenerationError):
  """An interface reached synthesis without its class-level marker."""


class SignatureError(GenerationError):
  """A marked function cannot be implemented as a sum of two parameters."""


class NameCollision(GenerationError):
  """Two eligible interfaces derive the same target artifact."""


class SourceParseError(GenerationError):
  """A source file handed to the frontend is not valid Python."""


class UnimportableInterface(GenerationError):
  """The interface's module has no dotted path a generated sibling can import from."""
