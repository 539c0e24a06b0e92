"""
CLI commands for lzwphylo.

Provides command-line interface for kernel building, tree building,
and configuration management.
"""

__all__ = ["config", "kernel", "main", "tree"]
