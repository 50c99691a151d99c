# src/pgexec/errors.py
"""
Error taxonomy for pgexec.

Every failure that reaches the CLI is one of these. Each carries the process
exit code the CLI should return, and wraps the driver/SQLAlchemy exception as
``__cause__`` when there is one.
"""

from __future__ import annotations

from typing import Optional


class PgExecError(Exception):
    """Base class for all pgexec failures."""

    exit_code: int = 1

    def __init__(self, message: str, *, cause: Optional[BaseException] = None) -> None:
        super().__init__(message)
        self.message = message
        if cause is not None:
            self.__cause__ = cause

    def __str__(self) -> str:
        return self.message


class ConfigError(PgExecError):
    """Invalid or missing connection parameters (bad port, bad URL, no SQL)."""

    exit_code = 2


class ConnectionError(PgExecError):  # noqa: A001
    """Pool or connection establishment failed."""


class QueryError(PgExecError):
    """The database rejected or failed the statement."""


class ScanError(PgExecError):
    """A row's raw column values could not be converted to display form."""


class CommitError(PgExecError):
    """The statement succeeded but the transaction commit failed."""


def db_message(exc: BaseException) -> str:
    """
    Best human-readable text for a driver error.

    SQLAlchemy's DBAPIError string embeds the SQL and a docs link; the
    wrapped driver exception (``exc.orig``) holds just the server's message.
    """
    orig = getattr(exc, "orig", None)
    text = str(orig) if orig is not None else str(exc)
    return text.strip() or type(exc).__name__


__all__ = [
    "PgExecError",
    "ConfigError",
    "ConnectionError",
    "QueryError",
    "ScanError",
    "CommitError",
    "db_message",
]
