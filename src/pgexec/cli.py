# src/pgexec/cli.py
from __future__ import annotations

import argparse
import logging
from typing import Optional, Sequence

from pgexec import __version__
from pgexec.config import ConnectionSpec
from pgexec.db import run_query
from pgexec.errors import ConfigError, PgExecError
from pgexec.logging_config import add_logging_args, setup_logging

logger = logging.getLogger(__name__)

USAGE = 'pgexec --url "postgres://..." "SELECT * FROM users;"'


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="pgexec",
        usage=USAGE,
        description="Run one SQL statement against PostgreSQL and print the result as a table.",
    )
    ap.add_argument(
        "--url",
        default="",
        help="Connection string, e.g. postgres://<user>:<pw>@<host>:<port>/<db> (overrides the options below)",
    )
    ap.add_argument("--host", default="", help="Host address")
    ap.add_argument("--port", "-p", default="", help="Port")
    ap.add_argument("--user", "-u", default="", help="User name")
    ap.add_argument("--password", "-pw", default="", help="Password")
    ap.add_argument("--db", default="", help="Database name")
    ap.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    add_logging_args(ap)
    ap.add_argument("sql", nargs="*", help="SQL statement to execute (only the first is used)")
    return ap


def _statement(positionals: Sequence[str]) -> str:
    if not positionals or not positionals[0].strip():
        raise ConfigError("No SQL statement given")
    if len(positionals) > 1:
        logger.warning("Ignoring %d extra positional argument(s); quote the whole statement", len(positionals) - 1)
    return positionals[0]


def main(argv: Optional[Sequence[str]] = None) -> int:
    ap = build_parser()
    args = ap.parse_args(argv)
    setup_logging(
        name="pgexec",
        level=args.log_level,
        log_file=args.log_file,
        quiet=args.quiet,
        debug=args.debug,
    )

    try:
        spec = ConnectionSpec.from_args(args)
        sql = _statement(args.sql)
        run_query(spec, sql)
    except PgExecError as e:
        logger.error("%s: %s", type(e).__name__, e, exc_info=args.debug)
        return e.exit_code
    except KeyboardInterrupt:
        logger.error("Interrupted")
        return 130
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
