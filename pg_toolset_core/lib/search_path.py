"""
Search the PATH for executables.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Optional, Tuple

from pg_toolset_core.lib.environment import Environment, default_environment
from pg_toolset_core.lib.errors import SymlinkResolutionError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CandidateSet:
    """
    Absolute paths of the executables found for a given program name.

    Attributes:
        name: The program name that was searched for
        matches: Paths in PATH order, the first one wins
    """
    name: str
    matches: Tuple[str, ...] = ()

    @property
    def found(self) -> int:
        return len(self.matches)

    def __iter__(self) -> Iterator[str]:
        return iter(self.matches)

    def __len__(self) -> int:
        return len(self.matches)

    def __getitem__(self, index: int) -> str:
        return self.matches[index]


def is_executable_file(path: str) -> bool:
    return os.path.isfile(path) and os.access(path, os.X_OK)


def search_path(name: str, environment: Optional[Environment] = None) -> CandidateSet:
    """Find every executable file called ``name`` in the PATH, in PATH order."""
    environment = environment or default_environment()
    matches = []

    for entry in environment.path_entries():
        candidate = os.path.join(os.path.abspath(entry), name)
        if is_executable_file(candidate):
            logger.debug("Found %s at \"%s\"", name, candidate)
            matches.append(candidate)

    return CandidateSet(name=name, matches=tuple(matches))


def search_path_first(
    name: str,
    environment: Optional[Environment] = None,
    log_level: int = logging.WARNING
) -> Optional[str]:
    """Return the first ``name`` found in PATH, or None."""
    candidates = search_path(name, environment)

    if candidates.found == 0:
        logger.log(log_level, "Failed to find %s in PATH", name)
        return None

    return candidates[0]


def search_path_deduplicate_symlinks(candidates: CandidateSet) -> CandidateSet:
    """
    Collapse the candidates that point to the same file once symbolic links
    are followed. The first path seen for each real file is kept.

    Raises:
        SymlinkResolutionError: when a candidate can not be resolved, as
            dropping it could hide an installation.
    """
    seen = set()
    matches = []

    for path in candidates:
        try:
            real_path = Path(path).resolve(strict=True)
        except OSError as e:
            logger.error("Failed to resolve symbolic link \"%s\": %s", path, e)
            raise SymlinkResolutionError(path, e.errno, e.strerror or str(e)) from e
        except RuntimeError as e:
            # symlink loop on Python versions before 3.13
            logger.error("Failed to resolve symbolic link \"%s\": %s", path, e)
            raise SymlinkResolutionError(path, None, str(e)) from e

        if real_path in seen:
            logger.debug("Skipping \"%s\", a link to \"%s\" already found", path, real_path)
            continue

        seen.add(real_path)
        matches.append(path)

    return CandidateSet(name=candidates.name, matches=tuple(matches))
