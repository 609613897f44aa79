"""Domain layer for the intelligent migration engine.

This layer contains the profiling, pattern, fingerprint, suggestion and
feedback logic. It is independent of storage, console and CLI concerns.
"""
