"""Roster Store - Student records with derived labels and durable storage."""

from gradescale.roster.exceptions import (
    RecordNotFoundError,
    RosterError,
    StorageError,
    StorageReadError,
    StorageWriteError,
    ValidationError,
)
from gradescale.roster.export import DEFAULT_EXPORT_FILENAME, to_csv, write_csv
from gradescale.roster.models import (
    ClassStats,
    StudentInput,
    StudentRecord,
    parse_grade,
)
from gradescale.roster.storage import MemoryStorage, SQLiteStorage, Storage
from gradescale.roster.store import STORAGE_KEY, RosterStore

__all__ = [
    "DEFAULT_EXPORT_FILENAME",
    "STORAGE_KEY",
    "ClassStats",
    "MemoryStorage",
    "RecordNotFoundError",
    "RosterError",
    "RosterStore",
    "SQLiteStorage",
    "Storage",
    "StorageError",
    "StorageReadError",
    "StorageWriteError",
    "StudentInput",
    "StudentRecord",
    "ValidationError",
    "parse_grade",
    "to_csv",
    "write_csv",
]
