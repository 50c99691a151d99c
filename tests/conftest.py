from unittest.mock import MagicMock

import pytest


class FakeResult:
    """Stand-in for a SQLAlchemy CursorResult: description + forward-only rows."""

    def __init__(self, description, rows, returns_rows=True, rowcount=-1):
        self.returns_rows = returns_rows
        self.rowcount = rowcount
        self.cursor = MagicMock()
        self.cursor.description = description
        self._rows = list(rows)

    def __iter__(self):
        return iter(self._rows)


@pytest.fixture
def make_result():
    return FakeResult


@pytest.fixture
def fake_engine():
    """
    MagicMock engine wired like the real thing:
    engine.connect() -> conn (context manager returning itself),
    conn.begin() -> tx whose is_active drops after commit/rollback.
    """
    engine = MagicMock(name="engine")
    conn = MagicMock(name="conn")
    conn.__enter__.return_value = conn
    conn.__exit__.return_value = False
    engine.connect.return_value = conn

    tx = MagicMock(name="tx")
    tx.is_active = True

    def _end(*_a, **_k):
        tx.is_active = False

    tx.commit.side_effect = _end
    tx.rollback.side_effect = _end
    conn.begin.return_value = tx

    engine.conn = conn
    engine.tx = tx
    return engine
