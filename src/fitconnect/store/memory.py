"""In-process table store."""

from __future__ import annotations

import copy

from fitconnect.store.base import RowTableStore


class MemoryStore(RowTableStore):
    """Keeps every table in a dict. Used by tests and local scripts."""

    def __init__(self, tables: dict[str, list[dict]] | None = None):
        self._tables: dict[str, list[dict]] = copy.deepcopy(tables or {})

    def _read_table(self, table: str) -> list[dict]:
        return [dict(row) for row in self._tables.get(table, [])]

    def _write_table(self, table: str, rows: list[dict]) -> None:
        self._tables[table] = [dict(row) for row in rows]

    def rows(self, table: str) -> list[dict]:
        """Synchronous snapshot of a table."""
        return self._read_table(table)
