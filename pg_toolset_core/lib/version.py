"""
Postgres version numbers, as printed by ``psql --version`` and friends.
"""

import logging
import re
from dataclasses import dataclass

from pg_toolset_core.lib.defaults import PG_VERSION_STRING_MAX
from pg_toolset_core.lib.errors import LaunchError, NonZeroExitError, VersionParseError
from pg_toolset_core.lib.program import run_program

logger = logging.getLogger(__name__)

# 14.9, 9.6.24, 16devel, 15beta1, 11rc2
VERSION_RE = re.compile(r"(?<![\w.])(\d+)(?:\.(\d+))?(?:\.(\d+))?([A-Za-z]+\d*)?(?![\w])")


@dataclass(frozen=True, order=True)
class PgVersion:
    """
    A parsed Postgres version.

    Attributes:
        number: Comparable form, 140009 for 14.9 and 90624 for 9.6.24
        version: Version string as printed by the program
    """
    number: int
    version: str

    def __str__(self):
        return self.version


def parse_version_number(text: str) -> PgVersion:
    """
    Extract the first version number found in ``text``.

    Raises:
        VersionParseError: when no version number is found.
    """
    match = VERSION_RE.search(text or "")

    if match is None:
        logger.error("Failed to parse Postgres version number from \"%s\"", (text or "").strip())
        raise VersionParseError(f"Failed to parse Postgres version number from \"{(text or '').strip()}\"")

    major = int(match.group(1))
    minor = int(match.group(2) or 0)
    patch = int(match.group(3) or 0)

    if major >= 10:
        number = major * 10000 + minor
    else:
        number = major * 10000 + minor * 100 + patch

    return PgVersion(number=number, version=match.group(0)[:PG_VERSION_STRING_MAX])


def psql_version(psql: str) -> PgVersion:
    """
    Run ``<psql> --version`` and parse its output.

    Works with any Postgres program that accepts ``--version``, such as
    pg_config. Nothing but the subprocess is touched.
    """
    result = run_program(psql, "--version")

    if not result.launched:
        logger.error("Failed to run \"psql --version\" using program \"%s\"", psql)
        raise LaunchError(psql, result.error)

    if result.return_code != 0:
        logger.error(
            "Failed to run \"psql --version\" using program \"%s\": exit code %d",
            psql, result.return_code
        )
        raise NonZeroExitError(psql, result.return_code, result.stderr)

    return parse_version_number(result.stdout)
