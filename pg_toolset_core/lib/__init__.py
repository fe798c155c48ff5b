"""
Core library functionality for locating and running the PostgreSQL client programs.
"""

from pg_toolset_core.lib.environment import Environment
from pg_toolset_core.lib.errors import (
    ToolsetError,
    NotFoundError,
    AmbiguousConfigurationError,
    VersionParseError,
    MalformedOutputError,
    LaunchError,
    NonZeroExitError,
    SymlinkResolutionError,
)
from pg_toolset_core.lib.search_path import (
    CandidateSet,
    search_path,
    search_path_first,
    search_path_deduplicate_symlinks,
)
from pg_toolset_core.lib.program import (
    Program,
    ProgramResult,
    run_program,
    execute_program,
    format_command_line,
    snprintf_program_command_line,
)
from pg_toolset_core.lib.output import log_program_output, split_lines
from pg_toolset_core.lib.version import PgVersion, parse_version_number, psql_version
from pg_toolset_core.lib.toolset import (
    ToolsetConfig,
    ToolsetSource,
    find_pg_commands,
    find_pg_commands_or_exit,
    set_postgres_commands,
)
from pg_toolset_core.lib.pgcmd import pg_dump_db, pg_restore_db, build_pg_dump_program, build_pg_restore_program

__all__ = [
    # Environment
    "Environment",

    # Errors
    "ToolsetError",
    "NotFoundError",
    "AmbiguousConfigurationError",
    "VersionParseError",
    "MalformedOutputError",
    "LaunchError",
    "NonZeroExitError",
    "SymlinkResolutionError",

    # PATH search
    "CandidateSet",
    "search_path",
    "search_path_first",
    "search_path_deduplicate_symlinks",

    # Running programs
    "Program",
    "ProgramResult",
    "run_program",
    "execute_program",
    "format_command_line",
    "snprintf_program_command_line",
    "log_program_output",
    "split_lines",

    # Versions
    "PgVersion",
    "parse_version_number",
    "psql_version",

    # Toolset discovery
    "ToolsetConfig",
    "ToolsetSource",
    "find_pg_commands",
    "find_pg_commands_or_exit",
    "set_postgres_commands",

    # Postgres commands
    "pg_dump_db",
    "pg_restore_db",
    "build_pg_dump_program",
    "build_pg_restore_program",
]
