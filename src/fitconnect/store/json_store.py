"""File-backed table store

One JSON array per table, guarded by a file lock per table.

Layout:
    {base_dir}/
    ├── coach_clients.json
    ├── coach_clients.lock
    ├── messages.json
    └── ...
"""

import asyncio
import json
import logging
import re
from pathlib import Path

from filelock import FileLock

from fitconnect.exceptions import StoreError
from fitconnect.store.base import RowTableStore

logger = logging.getLogger(__name__)

_TABLE_NAME = re.compile(r"^[a-z][a-z0-9_]*$")


class JsonFileStore(RowTableStore):
    """JSON-file table store

    Every insert and update holds the table's lock from the read until the
    write, so processes sharing ``base_dir`` do not overwrite each other's
    rows. File I/O and lock waits run in a worker thread, off the event loop.
    """

    def __init__(self, base_dir: str | Path, lock_timeout: float = 5):
        self.base_dir = Path(base_dir)
        self.lock_timeout = lock_timeout

    def _table_path(self, table: str) -> Path:
        if not _TABLE_NAME.match(table):
            raise StoreError(f"Invalid table name: {table!r}")
        return self.base_dir / f"{table}.json"

    def _locked(self, table: str) -> FileLock:
        self._table_path(table)
        self.base_dir.mkdir(parents=True, exist_ok=True)
        return FileLock(str(self.base_dir / f"{table}.lock"), timeout=self.lock_timeout)

    async def _run(self, fn, *args):
        return await asyncio.to_thread(fn, *args)

    def _read_table(self, table: str) -> list[dict]:
        path = self._table_path(table)
        if not path.exists():
            return []

        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            logger.error(f"Table file is corrupt ({path}): {e}")
            raise StoreError(f"Table '{table}' could not be read") from e

        if not isinstance(data, list):
            raise StoreError(f"Table '{table}' is not a JSON array")
        return data

    def _write_table(self, table: str, rows: list[dict]) -> None:
        path = self._table_path(table)
        tmp_path = path.with_suffix(".json.tmp")
        tmp_path.write_text(
            json.dumps(rows, ensure_ascii=False, indent=2), encoding="utf-8"
        )
        tmp_path.replace(path)
