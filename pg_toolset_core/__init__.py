"""
pg-toolset-core: locate and run the PostgreSQL client programs

This package finds a consistent set of psql, pg_dump and pg_restore for the
current environment, reports their version, and runs them while capturing
their output.
"""

# Import core library functionality
from pg_toolset_core.lib import (
    ToolsetConfig,
    ToolsetError,
    find_pg_commands,
    pg_dump_db,
    pg_restore_db,
)

# Import CLI and API interfaces
from pg_toolset_core.cli import main
from pg_toolset_core.api import app

__version__ = "0.1.0"
__all__ = [
    # Core library exports
    "ToolsetConfig",
    "ToolsetError",
    "find_pg_commands",
    "pg_dump_db",
    "pg_restore_db",

    # Interface exports
    "main",
    "app"
]
