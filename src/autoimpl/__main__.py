"""
Entry point for module execution (``python -m autoimpl``).

Delegates to the CLI dispatcher in ``autoimpl.cli.__main__``.
"""

import sys
from autoimpl.cli.__main__ import main

if __name__ == "__main__":
  sys.exit(main())
