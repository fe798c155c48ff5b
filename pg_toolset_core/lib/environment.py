"""
Process environment seen through a small read-only interface.

Discovery only ever reads the hint variable and the search path, so tests can
hand in a plain mapping instead of the real ``os.environ``.
"""

import os
from typing import Dict, List, Mapping, Optional

from pg_toolset_core.lib.defaults import PATH_ENV


class Environment:
    """Read-only view over environment variables."""

    def __init__(self, environ: Optional[Mapping[str, str]] = None):
        self._environ = os.environ if environ is None else environ

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        return self._environ.get(name, default)

    def path_entries(self) -> List[str]:
        """Directories of PATH in order, skipping empty entries and repeats."""
        entries = []
        seen = set()
        for entry in (self.get(PATH_ENV) or "").split(os.pathsep):
            if not entry or entry in seen:
                continue
            seen.add(entry)
            entries.append(entry)
        return entries

    def copy(self, **overrides: str) -> Dict[str, str]:
        """Return a plain dict of the environment, with overrides applied."""
        env = dict(self._environ)
        env.update(overrides)
        return env


def default_environment() -> Environment:
    return Environment()
