import os
import stat

import pytest

from pg_toolset_core.lib.environment import Environment


def write_script(path, body: str):
    """Write an executable /bin/sh script at path."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("#!/bin/sh\n" + body)
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path


def psql_script(version: str = "14.9") -> str:
    return f'echo "psql (PostgreSQL) {version}"\n'


def pg_config_script(bindir, version: str = "14.9") -> str:
    return (
        'case "$1" in\n'
        f'  --bindir) echo "{bindir}" ;;\n'
        f'  --version) echo "PostgreSQL {version}" ;;\n'
        '  *) exit 1 ;;\n'
        'esac\n'
    )


def install_postgres(root, version: str = "14.9", major: str = "14"):
    """
    Lay out a Debian style installation under root:

        usr/lib/postgresql/<major>/bin/{psql,pg_dump,pg_restore}
        usr/bin/pg_config
    """
    bindir = root / "usr" / "lib" / "postgresql" / major / "bin"
    write_script(bindir / "psql", psql_script(version))
    write_script(bindir / "pg_dump", "exit 0\n")
    write_script(bindir / "pg_restore", "exit 0\n")
    pg_config = write_script(root / "usr" / "bin" / "pg_config", pg_config_script(bindir, version))
    return bindir, pg_config


def make_environment(*path_entries, **variables) -> Environment:
    environ = {"PATH": os.pathsep.join(str(p) for p in path_entries)}
    environ.update({k: str(v) for k, v in variables.items()})
    return Environment(environ)


@pytest.fixture
def postgres_install(tmp_path):
    """A single PostgreSQL 14 installation, pg_config in usr/bin."""
    return install_postgres(tmp_path)
