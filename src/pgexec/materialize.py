# src/pgexec/materialize.py
"""
Turn a live result cursor into a fully materialized DisplayTable.

Each column is tagged once from the cursor description (boolean, uuid, or
other) and every cell is converted to its display string by that tag:

    None            -> "null"
    BOOLEAN         -> "true" / "false"
    UUID            -> canonical hyphenated lowercase; undecodable bytes fall
                       back to lowercase hex instead of failing the query
    OTHER           -> natural str() form (bytea as \\x-hex, json as JSON)

Rows are consumed in a single forward pass.
"""

from __future__ import annotations

import json
import logging
import uuid
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, Iterator, Optional, Sequence, Tuple, Union

from sqlalchemy.exc import SQLAlchemyError

from pgexec.errors import ScanError, db_message

logger = logging.getLogger(__name__)

NULL_TEXT = "null"

# PostgreSQL type OIDs (pg_type.oid)
BOOL_OID = 16
UUID_OID = 2950

_TRUE_TEXT = frozenset({"t", "true"})
_FALSE_TEXT = frozenset({"f", "false"})


class ColumnKind(Enum):
    BOOLEAN = "boolean"
    UUID = "uuid"
    OTHER = "other"


_KIND_BY_OID: Dict[int, ColumnKind] = {
    BOOL_OID: ColumnKind.BOOLEAN,
    UUID_OID: ColumnKind.UUID,
}


@dataclass(frozen=True)
class ColumnDescriptor:
    name: str
    type_code: Optional[int] = None
    kind: ColumnKind = ColumnKind.OTHER

    @classmethod
    def from_description(cls, item: Sequence[Any]) -> "ColumnDescriptor":
        """Build from one DB-API cursor.description entry (name, type_code, ...)."""
        name, type_code = str(item[0]), item[1]
        if isinstance(type_code, int) and not isinstance(type_code, bool):
            return cls(name=name, type_code=type_code, kind=_KIND_BY_OID.get(type_code, ColumnKind.OTHER))
        return cls(name=name, type_code=None, kind=ColumnKind.OTHER)


def describe_columns(description: Optional[Sequence[Sequence[Any]]]) -> Tuple[ColumnDescriptor, ...]:
    if not description:
        return ()
    return tuple(ColumnDescriptor.from_description(d) for d in description)


@dataclass(frozen=True)
class ResultRow:
    """
    One materialized row: display strings aligned with the column names.

    Stored positionally so duplicate column names (``SELECT 1 AS a, 2 AS a``)
    keep every value. Index by position or by name (first match wins).
    """

    columns: Tuple[str, ...]
    values: Tuple[str, ...]

    def __len__(self) -> int:
        return len(self.values)

    def __iter__(self) -> Iterator[str]:
        return iter(self.values)

    def __getitem__(self, key: Union[int, str]) -> str:
        if isinstance(key, str):
            try:
                return self.values[self.columns.index(key)]
            except ValueError:
                raise KeyError(key) from None
        return self.values[key]

    def as_dict(self) -> Dict[str, str]:
        return dict(zip(self.columns, self.values))


@dataclass(frozen=True)
class DisplayTable:
    header: Tuple[str, ...]
    rows: Tuple[ResultRow, ...] = ()

    @property
    def width(self) -> int:
        return len(self.header)

    def __len__(self) -> int:
        return len(self.rows)


# -----------------------
# Cell formatting
# -----------------------
def _format_bool(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int) and value in (0, 1):
        return "true" if value else "false"
    if isinstance(value, str):
        s = value.strip().lower()
        if s in _TRUE_TEXT:
            return "true"
        if s in _FALSE_TEXT:
            return "false"
    raise ValueError(f"not a boolean: {value!r}")


def _format_uuid(value: Any) -> str:
    if isinstance(value, uuid.UUID):
        return str(value)
    if isinstance(value, (bytes, bytearray, memoryview)):
        raw = bytes(value)
        try:
            return str(uuid.UUID(bytes=raw))
        except ValueError:
            logger.debug("uuid column holds %d bytes, showing hex", len(raw))
            return raw.hex()
    if isinstance(value, str):
        try:
            return str(uuid.UUID(value))
        except ValueError:
            return value
    return str(value)


def _format_other(value: Any) -> str:
    if isinstance(value, (bytes, bytearray, memoryview)):
        return "\\x" + bytes(value).hex()
    if isinstance(value, (dict, list)):
        return json.dumps(value, default=str)
    return str(value)


def display_value(kind: ColumnKind, value: Any) -> str:
    """Display string for one cell of a column tagged ``kind``."""
    if value is None:
        return NULL_TEXT
    if kind is ColumnKind.BOOLEAN:
        return _format_bool(value)
    if kind is ColumnKind.UUID:
        return _format_uuid(value)
    return _format_other(value)


# -----------------------
# Materialization
# -----------------------
def materialize_row(columns: Sequence[ColumnDescriptor], raw: Sequence[Any]) -> ResultRow:
    if len(raw) != len(columns):
        raise ScanError(f"Row has {len(raw)} values but the result has {len(columns)} columns")

    values = []
    for col, value in zip(columns, raw):
        try:
            values.append(display_value(col.kind, value))
        except (TypeError, ValueError) as e:
            raise ScanError(f"Cannot convert value of column {col.name!r}: {e}", cause=e)
    return ResultRow(columns=tuple(c.name for c in columns), values=tuple(values))


def materialize(columns: Sequence[ColumnDescriptor], rows: Iterable[Sequence[Any]]) -> DisplayTable:
    """
    Consume ``rows`` once, in order, and build the DisplayTable.

    Driver errors raised while fetching (e.g. a value the driver cannot load)
    surface as ScanError.
    """
    out = []
    it = iter(rows)
    while True:
        try:
            raw = next(it)
        except StopIteration:
            break
        except SQLAlchemyError as e:
            raise ScanError(f"Failed reading row {len(out) + 1}: {db_message(e)}", cause=e)
        out.append(materialize_row(columns, raw))

    logger.debug("materialized %d row(s) x %d column(s)", len(out), len(columns))
    return DisplayTable(header=tuple(c.name for c in columns), rows=tuple(out))


__all__ = [
    "BOOL_OID",
    "UUID_OID",
    "NULL_TEXT",
    "ColumnKind",
    "ColumnDescriptor",
    "ResultRow",
    "DisplayTable",
    "describe_columns",
    "display_value",
    "materialize_row",
    "materialize",
]
