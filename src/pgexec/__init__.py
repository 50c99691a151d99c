# src/pgexec/__init__.py
from __future__ import annotations

__version__ = "0.1.0"

from .config import ConnectionSpec, resolve_target, resolve_url
from .errors import (
    CommitError,
    ConfigError,
    ConnectionError,
    PgExecError,
    QueryError,
    ScanError,
)
from .materialize import (
    ColumnDescriptor,
    ColumnKind,
    DisplayTable,
    ResultRow,
    display_value,
    materialize,
)
from .render import format_table, render_table
from .db import run_query

__all__ = [
    "ConnectionSpec", "resolve_target", "resolve_url",
    "PgExecError", "ConfigError", "ConnectionError", "QueryError", "ScanError", "CommitError",
    "ColumnKind", "ColumnDescriptor", "ResultRow", "DisplayTable", "display_value", "materialize",
    "format_table", "render_table",
    "run_query",
]
