"""Durable key-value storage backends for the Roster Store.

The store only needs what browser local storage offers: read, write and
remove a string value under a fixed key. Two backends are provided:
MemoryStorage for tests and throwaway sessions, and SQLiteStorage for a
roster that survives restarts.
"""

from __future__ import annotations

from typing import Protocol

from sqlalchemy.exc import SQLAlchemyError

from gradescale.logging import get_logger
from gradescale.roster.database import DEFAULT_DB_PATH, Database, StorageItem
from gradescale.roster.exceptions import StorageError

logger = get_logger(__name__)


class Storage(Protocol):
    """Interface for a key-value storage backend.

    Backends must report failures as StorageError (OSError is also
    tolerated). RosterStore recovers from those two only; any other
    exception propagates to its caller.
    """

    def get_item(self, key: str) -> str | None:
        """Return the value stored under key, or None.

        Raises:
            StorageError: If the backend cannot be read.
        """
        ...

    def set_item(self, key: str, value: str) -> None:
        """Store value under key, replacing any previous value.

        Raises:
            StorageError: If the value cannot be written.
        """
        ...

    def remove_item(self, key: str) -> None:
        """Remove key if present.

        Raises:
            StorageError: If the key cannot be removed.
        """
        ...

    def close(self) -> None:
        """Release any held resources."""
        ...


class MemoryStorage:
    """Dict-backed storage. Contents live as long as the instance."""

    def __init__(self, items: dict[str, str] | None = None) -> None:
        self._items: dict[str, str] = dict(items or {})

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def close(self) -> None:
        pass

    def __len__(self) -> int:
        return len(self._items)


class SQLiteStorage:
    """Storage persisted in a SQLite file through SQLAlchemy.

    Any SQLAlchemy failure is re-raised as StorageError.
    """

    def __init__(self, db_path: str = DEFAULT_DB_PATH) -> None:
        """Open (and create if needed) the storage database.

        Args:
            db_path: Path to the SQLite file, or ":memory:".

        Raises:
            StorageError: If the database cannot be initialized.
        """
        self._db = Database(db_path)
        try:
            self._db.create_tables()
        except SQLAlchemyError as e:
            raise StorageError(f"Cannot open storage at '{db_path}': {e}") from e
        logger.debug("Opened SQLite storage at %s", db_path)

    @property
    def database(self) -> Database:
        return self._db

    def get_item(self, key: str) -> str | None:
        session = self._db.get_session()
        try:
            item = session.get(StorageItem, key)
            return None if item is None else item.value
        except SQLAlchemyError as e:
            raise StorageError(f"Cannot read key '{key}': {e}") from e
        finally:
            session.close()

    def set_item(self, key: str, value: str) -> None:
        session = self._db.get_session()
        try:
            item = session.get(StorageItem, key)
            if item is None:
                session.add(StorageItem(key=key, value=value))
            else:
                item.value = value
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            raise StorageError(f"Cannot write key '{key}': {e}") from e
        finally:
            session.close()

    def remove_item(self, key: str) -> None:
        session = self._db.get_session()
        try:
            item = session.get(StorageItem, key)
            if item is not None:
                session.delete(item)
                session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            raise StorageError(f"Cannot remove key '{key}': {e}") from e
        finally:
            session.close()

    def close(self) -> None:
        """Close the database connection."""
        self._db.close()
