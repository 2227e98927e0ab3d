"""Persistence collaborators for the batch operations."""

from fitconnect.store.base import RowTableStore, TableStore
from fitconnect.store.json_store import JsonFileStore
from fitconnect.store.memory import MemoryStore

__all__ = ["TableStore", "RowTableStore", "MemoryStore", "JsonFileStore"]
