# src/pgexec/render.py
from __future__ import annotations

import sys
from typing import Optional, TextIO

import tabulate as _tabulate_mod
from tabulate import tabulate

from pgexec.materialize import DisplayTable

# Light box-drawing outline, one rule under the header, none between rows
TABLE_FORMAT = "simple_outline"


def format_table(table: DisplayTable) -> str:
    """
    Render a DisplayTable as a bordered text table.

    Cells are already display strings, so number parsing is disabled and
    leading/trailing whitespace is kept: "1.50" stays "1.50", "  a" stays
    "  a", and nothing is realigned or truncated. A result without columns
    (e.g. a bare UPDATE) renders as an empty string.
    """
    if not table.header:
        return ""
    # tabulate reads this module flag at call time; restore it afterwards
    saved = _tabulate_mod.PRESERVE_WHITESPACE
    _tabulate_mod.PRESERVE_WHITESPACE = True
    try:
        return tabulate(
            [list(row.values) for row in table.rows],
            headers=list(table.header),
            tablefmt=TABLE_FORMAT,
            disable_numparse=True,
            stralign="left",
        )
    finally:
        _tabulate_mod.PRESERVE_WHITESPACE = saved


def render_table(table: DisplayTable, stream: Optional[TextIO] = None) -> None:
    out = stream if stream is not None else sys.stdout
    text = format_table(table)
    if text:
        out.write(text + "\n")
        out.flush()
