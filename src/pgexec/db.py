# src/pgexec/db.py
"""
Connection pool, transaction scope and single-statement execution.

run_query() is the whole pipeline:

    open_pool -> connect -> transaction -> execute -> materialize
              -> render -> commit

The pool is disposed and an uncommitted transaction rolled back on every
exit path. Driver errors are wrapped into the pgexec error taxonomy at the
step where they happen, so a failed commit is never confused with a failed
statement.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Callable, Iterator, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Connection, CursorResult, Engine, RootTransaction
from sqlalchemy.exc import ArgumentError, SQLAlchemyError

from pgexec.config import MAX_POOL_CONNECTIONS, ConnectionSpec, resolve_target
from pgexec.errors import CommitError, ConfigError, ConnectionError, QueryError, db_message
from pgexec.materialize import DisplayTable, describe_columns, materialize
from pgexec.render import render_table

logger = logging.getLogger(__name__)

Renderer = Callable[[DisplayTable], None]


# -----------------------
# Pool
# -----------------------
def create_pool(spec: ConnectionSpec) -> Engine:
    target = resolve_target(spec)
    logger.info("Connecting to %s", target.describe())
    try:
        return create_engine(
            target.url,
            connect_args=target.connect_args,
            pool_size=MAX_POOL_CONNECTIONS,
            max_overflow=0,
        )
    except ArgumentError as e:
        raise ConfigError(f"Invalid connection parameters: {e}", cause=e)


@contextmanager
def open_pool(spec: ConnectionSpec) -> Iterator[Engine]:
    engine = create_pool(spec)
    try:
        yield engine
    finally:
        engine.dispose()
        logger.debug("connection pool disposed")


def connect(engine: Engine) -> Connection:
    try:
        return engine.connect()
    except SQLAlchemyError as e:
        raise ConnectionError(f"Could not connect to database: {db_message(e)}", cause=e)


# -----------------------
# Transaction + execution
# -----------------------
@contextmanager
def transaction(conn: Connection) -> Iterator[RootTransaction]:
    """
    Begin a transaction and roll it back at scope exit unless committed.
    """
    try:
        tx = conn.begin()
    except SQLAlchemyError as e:
        raise ConnectionError(f"Could not begin transaction: {db_message(e)}", cause=e)
    try:
        yield tx
    finally:
        if tx.is_active:
            logger.debug("rolling back uncommitted transaction")
            tx.rollback()


def execute(conn: Connection, sql: str) -> CursorResult:
    """
    Run ``sql`` exactly as given.

    Goes straight to the driver with no_parameters so neither ``:name`` nor
    ``%`` in the text is treated as a bind marker.
    """
    logger.debug("executing: %s", sql)
    try:
        return conn.exec_driver_sql(sql, execution_options={"no_parameters": True})
    except SQLAlchemyError as e:
        raise QueryError(db_message(e), cause=e)


def commit(tx: RootTransaction) -> None:
    try:
        tx.commit()
    except SQLAlchemyError as e:
        raise CommitError(f"Commit failed: {db_message(e)}", cause=e)


def fetch_table(result: CursorResult) -> DisplayTable:
    if not result.returns_rows:
        logger.info("Statement returned no rows (%s row(s) affected)", result.rowcount)
        return DisplayTable(header=())
    columns = describe_columns(result.cursor.description)
    return materialize(columns, result)


def run_query(
    spec: ConnectionSpec,
    sql: str,
    render: Optional[Renderer] = None,
) -> DisplayTable:
    """
    Execute one statement and render its result.

    Returns the rendered DisplayTable. Nothing is rendered unless the
    statement and every row fetch succeeded; commit runs after rendering.
    """
    render = render or render_table
    with open_pool(spec) as engine:
        with connect(engine) as conn:
            with transaction(conn) as tx:
                result = execute(conn, sql)
                table = fetch_table(result)
                render(table)
                commit(tx)
    logger.info("Done: %d row(s)", len(table))
    return table


__all__ = [
    "create_pool",
    "open_pool",
    "connect",
    "transaction",
    "execute",
    "commit",
    "fetch_table",
    "run_query",
]
