"""
Product-defined names and limits shared across the library.
"""

# Postgres client programs, looked up by file name
PSQL = "psql"
PG_DUMP = "pg_dump"
PG_RESTORE = "pg_restore"
PG_CONFIG = "pg_config"

# Environment variables
PG_CONFIG_ENV = "PG_CONFIG"
PATH_ENV = "PATH"
PGCONNECT_TIMEOUT_ENV = "PGCONNECT_TIMEOUT"

POSTGRES_CONNECT_TIMEOUT = "10"

BUFSIZE = 1024
PG_VERSION_STRING_MAX = 12

DUMP_SECTIONS = ("pre-data", "data", "post-data")

# Process exit codes
EXIT_CODE_QUIT = 0
EXIT_CODE_PGSQL = 4
EXIT_CODE_PGCTL = 5
