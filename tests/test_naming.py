"""
Tests for naming policies.
"""

from autoimpl.enums import NamingStrategy
from autoimpl.naming import declaration_naming, file_naming, get_naming_policy
from tests.builders import make_interface


def test_declaration_naming() -> None:
  assert declaration_naming(make_interface(name="Adder", file_name="ops.py")) == "AdderImpl"


def test_file_naming() -> None:
  assert file_naming(make_interface(name="Adder", file_name="ops.py")) == "opsImpl"


def test_file_naming_collides_for_shared_file() -> None:
  first = make_interface(name="Adder", file_name="ops.py")
  second = make_interface(name="Summer", file_name="ops.py")

  assert file_naming(first) == file_naming(second)
  assert declaration_naming(first) != declaration_naming(second)


def test_get_naming_policy() -> None:
  assert get_naming_policy(NamingStrategy.DECLARATION) is declaration_naming
  assert get_naming_policy("file") is file_naming
