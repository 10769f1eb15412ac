"""
Naming Policies.

A naming policy is a pure function from a declaration to the simple name of
its generated class. Policies are injectable so collisions can be prevented
(and tested) independently of synthesis.
"""

from typing import Callable

from autoimpl.enums import NamingStrategy
from autoimpl.symbols import ClassDeclaration

NamingPolicy = Callable[[ClassDeclaration], str]

IMPL_SUFFIX = "Impl"


def declaration_naming(declaration: ClassDeclaration) -> str:
  """'Calculator' -> 'CalculatorImpl'. Unique per declaration within a package."""
  return f"{declaration.name}{IMPL_SUFFIX}"


def file_naming(declaration: ClassDeclaration) -> str:
  """
  'calculator.py' -> 'calculatorImpl'.

  Interfaces sharing one containing file collide under this policy.
  """
  return f"{declaration.module_name}{IMPL_SUFFIX}"


_POLICIES = {
  NamingStrategy.DECLARATION: declaration_naming,
  NamingStrategy.FILE: file_naming,
}


def get_naming_policy(strategy: NamingStrategy) -> NamingPolicy:
  return _POLICIES[NamingStrategy(strategy)]
