"""
Run pg_dump and pg_restore from a resolved toolset.
"""

import logging
import os
from typing import Optional

import psycopg
from psycopg.conninfo import conninfo_to_dict, make_conninfo

from pg_toolset_core.lib.defaults import (
    BUFSIZE,
    DUMP_SECTIONS,
    PGCONNECT_TIMEOUT_ENV,
    POSTGRES_CONNECT_TIMEOUT,
)
from pg_toolset_core.lib.environment import Environment, default_environment
from pg_toolset_core.lib.output import log_program_output
from pg_toolset_core.lib.program import Program, ProgramResult, execute_program, format_command_line
from pg_toolset_core.lib.toolset import ToolsetConfig

logger = logging.getLogger(__name__)

PASSWORD_MASK = "****"


def safe_uri(pguri: str) -> str:
    """Connection string with the password masked, for logging."""
    try:
        params = conninfo_to_dict(pguri)
    except psycopg.ProgrammingError:
        return "[invalid connection string]"

    if "password" in params:
        params["password"] = PASSWORD_MASK

    return make_conninfo("", **params)


def _validate_section(section: str) -> None:
    if section not in DUMP_SECTIONS:
        raise ValueError(f"Unknown dump section '{section}', expected one of: {', '.join(DUMP_SECTIONS)}")


def build_pg_dump_program(
    config: ToolsetConfig,
    pguri: str,
    section: str,
    filename: str,
    environment: Optional[Environment] = None
) -> Program:
    """pg_dump invocation for one section of the database, in custom format."""
    _validate_section(section)
    environment = environment or default_environment()

    args = (
        config.pg_dump,
        "-Fc",
        "-d", pguri,
        "--section", section,
        "--file", filename,
    )

    # pg_dump does not need to become a session leader
    return Program(
        args=args,
        setsid=False,
        env=environment.copy(**{PGCONNECT_TIMEOUT_ENV: POSTGRES_CONNECT_TIMEOUT}),
    )


def build_pg_restore_program(
    config: ToolsetConfig,
    pguri: str,
    section: str,
    filename: str,
    *,
    clean: bool = False,
    use_list: Optional[str] = None,
    environment: Optional[Environment] = None
) -> Program:
    """pg_restore invocation for one section of a custom format archive."""
    _validate_section(section)
    environment = environment or default_environment()

    args = [config.pg_restore, "--dbname", pguri, "--section", section]

    if clean:
        args += ["--clean", "--if-exists"]

    if use_list:
        args += ["--use-list", use_list]

    args.append(filename)

    return Program(
        args=tuple(args),
        setsid=False,
        env=environment.copy(**{PGCONNECT_TIMEOUT_ENV: POSTGRES_CONNECT_TIMEOUT}),
    )


def _log_command(program: Program, pguri: str) -> None:
    display = Program(
        args=tuple(safe_uri(arg) if arg == pguri else arg for arg in program.args),
        setsid=program.setsid,
    )
    logger.info("%s", format_command_line(display, BUFSIZE))


def _run_and_report(program: Program, pguri: str, name: str) -> bool:
    _log_command(program, pguri)

    result: ProgramResult = execute_program(program)

    if not result.launched:
        logger.error("Failed to run %s \"%s\": %s", name, program.path, os.strerror(result.error or 0))
        return False

    if result.return_code != 0:
        logger.error("Failed to run %s: exit code %d", name, result.return_code)
        log_program_output(result, logging.ERROR, logging.ERROR, log=logger)
        return False

    return True


def pg_dump_db(
    config: ToolsetConfig,
    pguri: str,
    section: str,
    filename: str,
    environment: Optional[Environment] = None
) -> bool:
    """Dump the given section of the database into ``filename``."""
    program = build_pg_dump_program(config, pguri, section, filename, environment)
    return _run_and_report(program, pguri, "pg_dump")


def pg_restore_db(
    config: ToolsetConfig,
    pguri: str,
    section: str,
    filename: str,
    *,
    clean: bool = False,
    use_list: Optional[str] = None,
    environment: Optional[Environment] = None
) -> bool:
    """Restore the given section of the archive ``filename`` into the database."""
    program = build_pg_restore_program(
        config, pguri, section, filename,
        clean=clean, use_list=use_list, environment=environment
    )
    return _run_and_report(program, pguri, "pg_restore")
