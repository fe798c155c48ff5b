
import argparse
import json
import logging
import sys

from pg_toolset_core.lib.defaults import DUMP_SECTIONS, EXIT_CODE_PGSQL, EXIT_CODE_QUIT
from pg_toolset_core.lib.pgcmd import pg_dump_db, pg_restore_db
from pg_toolset_core.lib.toolset import ToolsetConfig, find_pg_commands_or_exit


def print_toolset(config: ToolsetConfig, output_format: str = "text"):
    """Print the resolved toolset in the specified format."""
    if output_format == "json":
        print(json.dumps(config.to_dict(), indent=2))
        return

    print(f"psql:       {config.psql}")
    print(f"pg_dump:    {config.pg_dump}")
    print(f"pg_restore: {config.pg_restore}")
    print(f"version:    {config.pg_version} ({config.pg_version_num})")
    print(f"found by:   {config.source.value}")


def cmd_find(args) -> int:
    config = find_pg_commands_or_exit()
    print_toolset(config, "json" if args.json else "text")
    return EXIT_CODE_QUIT


def cmd_dump(args) -> int:
    config = find_pg_commands_or_exit()
    logging.info(f"Using pg_dump for PostgreSQL {config.pg_version} at {config.pg_dump}")

    if not pg_dump_db(config, args.pguri, args.section, args.file):
        return EXIT_CODE_PGSQL

    print(f"Dump written to: {args.file}")
    return EXIT_CODE_QUIT


def cmd_restore(args) -> int:
    config = find_pg_commands_or_exit()
    logging.info(f"Using pg_restore for PostgreSQL {config.pg_version} at {config.pg_restore}")

    if not pg_restore_db(
        config,
        args.pguri,
        args.section,
        args.file,
        clean=args.clean,
        use_list=args.use_list
    ):
        return EXIT_CODE_PGSQL

    print(f"Restored {args.section} from: {args.file}")
    return EXIT_CODE_QUIT


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pg-toolset",
        description="pg-toolset: locate and run the PostgreSQL client programs"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (-v for INFO, -vv for DEBUG)"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    find_parser = subparsers.add_parser(
        "find",
        help="Show the psql, pg_dump and pg_restore that would be used"
    )
    find_parser.add_argument(
        "--json",
        action="store_true",
        help="Print the toolset as JSON"
    )
    find_parser.set_defaults(func=cmd_find)

    for name, func, help_text, file_help in (
        ("dump", cmd_dump, "Dump a section of a database with pg_dump", "Output file (custom format)"),
        ("restore", cmd_restore, "Restore a section of a dump with pg_restore", "Dump file to restore"),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("pguri", help="Connection string (postgres:// URI or key=value)")
        sub.add_argument(
            "--section",
            choices=DUMP_SECTIONS,
            required=True,
            help="Dump section to process"
        )
        sub.add_argument("--file", required=True, help=file_help)
        sub.set_defaults(func=func)

        if name == "restore":
            sub.add_argument(
                "--clean",
                action="store_true",
                help="Drop database objects before recreating them"
            )
            sub.add_argument(
                "--use-list",
                help="Restore only the archive entries listed in this file"
            )

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    # Set log level based on verbosity count
    if args.verbose == 0:
        log_level = logging.WARNING
    elif args.verbose == 1:
        log_level = logging.INFO
    else:
        log_level = logging.DEBUG

    # Configure logging
    logging.basicConfig(
        level=log_level,
        format='%(levelname)s: %(message)s',
        datefmt='%H:%M:%S'
    )

    sys.exit(args.func(args))


if __name__ == "__main__":
    main()
