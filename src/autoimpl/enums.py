"""
Enumerations for autoimpl.

Standard enumerations used across the codebase for declaration
categorization and naming strategy selection.
"""

from enum import Enum


class DeclarationKind(str, Enum):
  """
  Structural category of a class-like declaration in the symbol graph.

  Only `INTERFACE` declarations are eligible for synthesis.
  """

  INTERFACE = "interface"  # Protocol / ABC
  CLASS = "class"
  OTHER = "other"  # Enums, dataclass records, ...


class NamingStrategy(str, Enum):
  """
  Selects how the generated class name is derived from its source.
  """

  DECLARATION = "declaration"  # <InterfaceName>Impl
  FILE = "file"  # <containingFileBaseName>Impl


class ParameterKind(str, Enum):
  """
  How a parameter binds its argument.

  Only `POSITIONAL` parameters can take part in a generated sum.
  """

  POSITIONAL = "positional"  # positional-only or positional-or-keyword
  VAR_POSITIONAL = "var_positional"  # *args
  KEYWORD_ONLY = "keyword_only"
  VAR_KEYWORD = "var_keyword"  # **kwargs
