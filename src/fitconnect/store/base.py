"""Table store interface and shared row filtering.

Rows are plain dicts. Filters are equality matches on column values,
the only kind of scoping the bulk operations need.
"""

from __future__ import annotations

import contextlib
import uuid
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Callable, ContextManager, Protocol, TypeVar, runtime_checkable

from fitconnect.exceptions import DuplicateRowError, StoreError

T = TypeVar("T")


@runtime_checkable
class TableStore(Protocol):
    """Async row store used by the batch operations."""

    async def select(self, table: str, **filters: Any) -> list[dict]: ...

    async def maybe_single(self, table: str, **filters: Any) -> dict | None: ...

    async def insert(
        self, table: str, row: dict, *, unique_on: tuple[str, ...] = ()
    ) -> dict: ...

    async def update(self, table: str, values: dict, **filters: Any) -> int: ...


def _matches(row: dict, filters: dict[str, Any]) -> bool:
    return all(row.get(key) == value for key, value in filters.items())


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class RowTableStore(ABC):
    """Implements the TableStore methods on top of whole-table reads/writes.

    Subclasses decide where a table's row list lives (``_read_table`` /
    ``_write_table``), how a table is locked (``_locked``) and where the
    blocking work runs (``_run``). Each operation reads, changes and writes
    a table inside a single ``_locked`` block.
    """

    @abstractmethod
    def _read_table(self, table: str) -> list[dict]:
        """Return the table's rows. Missing table -> empty list."""

    @abstractmethod
    def _write_table(self, table: str, rows: list[dict]) -> None:
        """Replace the table's rows."""

    def _locked(self, table: str) -> ContextManager:
        """Exclusive access to one table for a whole read/modify/write."""
        return contextlib.nullcontext()

    async def _run(self, fn: Callable[..., T], *args: Any) -> T:
        return fn(*args)

    # -- blocking bodies, always called under _locked --

    def _select_rows(self, table: str, filters: dict[str, Any]) -> list[dict]:
        with self._locked(table):
            rows = self._read_table(table)
        return [dict(row) for row in rows if _matches(row, filters)]

    def _insert_row(self, table: str, row: dict, unique_on: tuple[str, ...]) -> dict:
        stored = dict(row)
        stored.setdefault("id", str(uuid.uuid4()))
        stored.setdefault("created_at", _now_iso())

        with self._locked(table):
            rows = self._read_table(table)
            if unique_on:
                key = {column: stored.get(column) for column in unique_on}
                if any(_matches(existing, key) for existing in rows):
                    raise DuplicateRowError(table, unique_on)
            rows.append(stored)
            self._write_table(table, rows)
        return dict(stored)

    def _update_rows(self, table: str, values: dict, filters: dict[str, Any]) -> int:
        with self._locked(table):
            rows = self._read_table(table)
            affected = 0
            for row in rows:
                if _matches(row, filters):
                    row.update(values)
                    row["updated_at"] = _now_iso()
                    affected += 1
            if affected:
                self._write_table(table, rows)
        return affected

    # -- TableStore --

    async def select(self, table: str, **filters: Any) -> list[dict]:
        return await self._run(self._select_rows, table, filters)

    async def maybe_single(self, table: str, **filters: Any) -> dict | None:
        """Return the only matching row, or None.

        Raises:
            StoreError: if more than one row matches.
        """
        rows = await self.select(table, **filters)
        if len(rows) > 1:
            raise StoreError(
                f"Expected at most one row in '{table}' for {filters}, got {len(rows)}"
            )
        return rows[0] if rows else None

    async def insert(
        self, table: str, row: dict, *, unique_on: tuple[str, ...] = ()
    ) -> dict:
        """Append a row, filling ``id`` and ``created_at`` when absent.

        Raises:
            DuplicateRowError: a row with the same ``unique_on`` values exists.
        """
        return await self._run(self._insert_row, table, row, tuple(unique_on))

    async def update(self, table: str, values: dict, **filters: Any) -> int:
        """Apply ``values`` to every matching row. Returns rows affected."""
        return await self._run(self._update_rows, table, dict(values), filters)
