"""
CLI Handlers Package.

One module per command: generate, inspect, stale.
"""
