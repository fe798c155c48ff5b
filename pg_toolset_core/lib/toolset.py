"""
Find the Postgres client programs to use.

The first strategy that applies wins:

1. ``PG_CONFIG`` in the environment, then ``$(pg_config --bindir)/psql``
2. the first ``psql`` found in PATH
3. a single ``pg_config`` found in PATH, then ``$(pg_config --bindir)/psql``

Once a strategy applies, any failure is final: no other strategy is tried,
so that a toolset the operator did not ask for is never silently used.

Debian and Ubuntu install pg_config in /usr/bin as part of postgresql-common,
while psql lives in a major version dependent directory such as
/usr/lib/postgresql/14/bin that is not in the PATH. The third strategy covers
that layout.
"""

import logging
import os
import sys
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Optional

from pg_toolset_core.lib.defaults import (
    EXIT_CODE_PGCTL,
    PG_CONFIG,
    PG_CONFIG_ENV,
    PG_DUMP,
    PG_RESTORE,
    PSQL,
)
from pg_toolset_core.lib.environment import Environment, default_environment
from pg_toolset_core.lib.errors import (
    AmbiguousConfigurationError,
    LaunchError,
    MalformedOutputError,
    NonZeroExitError,
    NotFoundError,
    ToolsetError,
)
from pg_toolset_core.lib.program import run_program
from pg_toolset_core.lib.search_path import (
    search_path,
    search_path_deduplicate_symlinks,
    search_path_first,
)
from pg_toolset_core.lib.version import PgVersion, psql_version

logger = logging.getLogger(__name__)


class ToolsetSource(Enum):
    """Which discovery strategy produced a toolset."""
    PG_CONFIG_ENV = "pg_config_env"
    PATH_PSQL = "path_psql"
    PATH_PG_CONFIG = "path_pg_config"


@dataclass(frozen=True)
class ToolsetConfig:
    """
    Resolved Postgres client programs.

    Attributes:
        psql: Absolute path to psql, the version was read from this one
        pg_dump: Absolute path to pg_dump, next to psql
        pg_restore: Absolute path to pg_restore, next to psql
        pg_version: Version string, such as "14.9"
        pg_version_num: Comparable version, such as 140009
        source: Strategy that found psql
    """
    psql: str
    pg_dump: str
    pg_restore: str
    pg_version: str
    pg_version_num: int
    source: ToolsetSource

    def to_dict(self) -> Dict[str, object]:
        return {
            "psql": self.psql,
            "pg_dump": self.pg_dump,
            "pg_restore": self.pg_restore,
            "pg_version": self.pg_version,
            "pg_version_num": self.pg_version_num,
            "source": self.source.value,
        }


def path_in_same_directory(path: str, name: str) -> str:
    """Path to the file ``name`` in the directory of ``path``."""
    return os.path.join(os.path.dirname(path), name)


def set_postgres_commands(psql: str, version: PgVersion, source: ToolsetSource) -> ToolsetConfig:
    """
    Build the toolset from the psql location. pg_dump and pg_restore are
    expected next to it, their existence is only checked when they run.
    """
    return ToolsetConfig(
        psql=psql,
        pg_dump=path_in_same_directory(psql, PG_DUMP),
        pg_restore=path_in_same_directory(psql, PG_RESTORE),
        pg_version=version.version,
        pg_version_num=version.number,
        source=source,
    )


def pg_config_bindir(pg_config: str) -> str:
    """
    Run ``pg_config --bindir`` and return the directory it prints.

    Raises:
        LaunchError, NonZeroExitError: when pg_config fails to run.
        MalformedOutputError: unless the output is exactly one line.
    """
    result = run_program(pg_config, "--bindir")

    if not result.launched:
        logger.error("Failed to run \"pg_config --bindir\" using program \"%s\"", pg_config)
        raise LaunchError(pg_config, result.error)

    if result.return_code != 0:
        logger.error(
            "Failed to run \"pg_config --bindir\" using program \"%s\": exit code %d",
            pg_config, result.return_code
        )
        raise NonZeroExitError(pg_config, result.return_code, result.stderr)

    lines = result.stdout.splitlines()

    if len(lines) != 1:
        logger.error("Unable to parse output from pg_config --bindir: %d lines", len(lines))
        raise MalformedOutputError(
            f"Expected one line of output from \"{pg_config} --bindir\", got {len(lines)}"
        )

    bindir = lines[0].strip()

    # a relative bindir would be resolved against the current directory
    if not bindir or not os.path.isabs(bindir):
        logger.error("Unable to parse output from pg_config --bindir: \"%s\" is not an absolute path", bindir)
        raise MalformedOutputError(
            f"Expected an absolute directory from \"{pg_config} --bindir\", got \"{bindir}\""
        )

    return bindir


def set_psql_from_config_bindir(pg_config: str) -> str:
    """Return ``$(pg_config --bindir)/psql``, which must exist."""
    if not os.path.isfile(pg_config):
        logger.debug("set_psql_from_config_bindir: file not found: \"%s\"", pg_config)
        raise NotFoundError(f"Failed to find pg_config at \"{pg_config}\"")

    psql = os.path.join(pg_config_bindir(pg_config), PSQL)

    if not os.path.isfile(psql):
        logger.error("Failed to find psql at \"%s\" from pg_config at \"%s\"", psql, pg_config)
        raise NotFoundError(f"Failed to find psql at \"{psql}\" from pg_config at \"{pg_config}\"")

    return psql


def _read_version(psql: str) -> PgVersion:
    try:
        return psql_version(psql)
    except ToolsetError:
        logger.critical("Failed to get version info from %s --version", psql)
        raise


def set_psql_from_PG_CONFIG(environment: Environment) -> Optional[ToolsetConfig]:
    """
    Use the PG_CONFIG environment variable when it is set.

    Postgres developer environments often export PG_CONFIG to build
    extensions against a specific installation, it is a strong hint.
    """
    pg_config = environment.get(PG_CONFIG_ENV)

    if not pg_config:
        return None

    if not os.path.isfile(pg_config):
        logger.error("Failed to find a file for PG_CONFIG environment value \"%s\"", pg_config)
        raise NotFoundError(f"Failed to find a file for PG_CONFIG environment value \"{pg_config}\"")

    psql = set_psql_from_config_bindir(pg_config)
    version = _read_version(psql)

    logger.debug("Found psql for PostgreSQL %s at %s following PG_CONFIG", version, psql)

    return set_postgres_commands(psql, version, ToolsetSource.PG_CONFIG_ENV)


def set_psql_from_path(environment: Environment) -> Optional[ToolsetConfig]:
    """Use the first psql in PATH."""
    psql = search_path_first(PSQL, environment, log_level=logging.WARNING)

    if psql is None:
        return None

    version = _read_version(psql)

    logger.debug("Found psql for PostgreSQL %s at %s in PATH", version, psql)

    return set_postgres_commands(psql, version, ToolsetSource.PATH_PSQL)


def set_psql_from_pg_config(environment: Environment) -> Optional[ToolsetConfig]:
    """
    Use ``pg_config --bindir`` when exactly one pg_config is found in PATH.

    With several of them the choice is left to the operator: every one of
    them is listed with its version and resolution fails.
    """
    pg_configs = search_path_deduplicate_symlinks(search_path(PG_CONFIG, environment))

    if pg_configs.found == 0:
        logger.warning("Failed to find either psql or pg_config in PATH")
        return None

    if pg_configs.found == 1:
        pg_config = pg_configs[0]
        psql = set_psql_from_config_bindir(pg_config)
        version = _read_version(psql)

        logger.debug(
            "Found psql for PostgreSQL %s at %s from pg_config found in PATH at \"%s\"",
            version, psql, pg_config
        )

        return set_postgres_commands(psql, version, ToolsetSource.PATH_PG_CONFIG)

    logger.info("Found more than one pg_config entry in current PATH:")

    versions = {}
    for pg_config in pg_configs:
        # keep going, every candidate is worth showing to the operator
        try:
            version = psql_version(pg_config)
        except ToolsetError:
            logger.warning("Failed to get version info from %s --version", pg_config)
            continue

        versions[pg_config] = version.version
        logger.info("Found \"%s\" for pg version %s", pg_config, version)

    logger.info("HINT: export PG_CONFIG to a specific pg_config entry")

    raise AmbiguousConfigurationError(
        f"Found {pg_configs.found} pg_config entries in PATH, export PG_CONFIG to choose one",
        candidates=pg_configs.matches,
        versions=versions,
    )


Strategy = Callable[[Environment], Optional[ToolsetConfig]]

STRATEGIES: List[Strategy] = [
    set_psql_from_PG_CONFIG,
    set_psql_from_path,
    set_psql_from_pg_config,
]


def find_pg_commands(environment: Optional[Environment] = None) -> ToolsetConfig:
    """
    Find psql, pg_dump and pg_restore.

    Raises:
        ToolsetError: when no usable toolset is found. The subclass tells
            why: NotFoundError, AmbiguousConfigurationError, LaunchError,
            NonZeroExitError, VersionParseError or MalformedOutputError.
    """
    environment = environment or default_environment()

    for strategy in STRATEGIES:
        config = strategy(environment)
        if config is not None:
            return config

    # at this point there is no other way to find a psql
    raise NotFoundError("Failed to find either psql or pg_config in PATH")


def find_pg_commands_or_exit(environment: Optional[Environment] = None) -> ToolsetConfig:
    """Same as find_pg_commands, exits with EXIT_CODE_PGCTL on failure."""
    try:
        return find_pg_commands(environment)
    except ToolsetError as e:
        logger.critical("Failed to find Postgres client programs: %s", e)
        sys.exit(EXIT_CODE_PGCTL)
