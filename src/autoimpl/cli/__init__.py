"""
CLI Subpackage.

Batch entry points for running generation rounds over a source tree.

Modules:
    - ``__main__``: The argparse definition and dispatcher.
    - ``commands``: Top-level facade for command handlers.
    - ``handlers/*``: Implementation modules for specific CLI actions (generate, inspect, stale).
"""
