"""
Command-line interface for pg-toolset-core.
"""

from .cli import main

__all__ = ["main"]
