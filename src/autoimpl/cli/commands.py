"""
CLI Command Handlers Facade.

Re-exports handlers from `autoimpl.cli.handlers`.
"""

from autoimpl.cli.handlers.generate import handle_generate
from autoimpl.cli.handlers.inspect import handle_inspect
from autoimpl.cli.handlers.stale import handle_stale

__all__ = ["handle_generate", "handle_inspect", "handle_stale"]
