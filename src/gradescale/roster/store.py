"""RosterStore - Main API for roster operations."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from datetime import date
from typing import Any

from gradescale.logging import get_logger, truncate_output
from gradescale.roster.exceptions import (
    RecordNotFoundError,
    StorageError,
    StorageReadError,
    StorageWriteError,
)
from gradescale.roster.export import to_csv
from gradescale.roster.models import (
    ClassStats,
    StudentInput,
    StudentRecord,
    dump_roster,
    generate_id,
    load_roster,
)
from gradescale.roster.storage import Storage

logger = get_logger(__name__)

STORAGE_KEY = "students"

StorageErrorHook = Callable[[StorageWriteError], None]


class RosterStore:
    """Owns the in-memory roster and keeps storage in sync with it.

    Every mutation is validated, labels are derived from grades, and the
    whole roster is rewritten to storage after each change. The in-memory
    roster stays authoritative when a write fails.
    """

    def __init__(
        self,
        storage: Storage,
        key: str = STORAGE_KEY,
        on_storage_error: StorageErrorHook | None = None,
        today: Callable[[], date] = date.today,
    ) -> None:
        """Initialize the store and load the persisted roster.

        Args:
            storage: Key-value backend holding the serialized roster.
            key: Storage key for the roster blob.
            on_storage_error: Called with a StorageWriteError whenever a
                write fails. The mutation that triggered it is kept.
            today: Source of the creation date for new records.
        """
        self._storage = storage
        self._key = key
        self._on_storage_error = on_storage_error
        self._today = today
        self._records: list[StudentRecord] = []
        # Every ID seen this session, including removed ones
        self._issued_ids: set[str] = set()
        # Set while the in-memory roster holds changes storage lacks
        self._unsaved = False
        self.load()

    def close(self) -> None:
        """Close the storage backend."""
        self._storage.close()

    # --- Persistence ---

    def load(self) -> list[StudentRecord]:
        """Replace the in-memory roster with the persisted one.

        Runs at construction. A missing, unreadable or malformed blob yields
        an empty roster; this method never raises. While a failed write has
        left changes that storage does not hold, the reload is skipped and
        the in-memory roster is returned unchanged.

        Returns:
            The loaded roster in insertion order.
        """
        if self._unsaved:
            logger.warning(
                "Not reloading key '%s': in-memory roster has unsaved changes", self._key
            )
            return self.list()

        try:
            records = self._read()
        except StorageReadError as e:
            logger.warning("Starting with an empty roster: %s", e)
            records = []

        self._records = records
        self._issued_ids.update(record.id for record in records)
        logger.debug("Loaded %d records from key '%s'", len(records), self._key)
        return self.list()

    def _read(self) -> list[StudentRecord]:
        try:
            blob = self._storage.get_item(self._key)
        except (StorageError, OSError) as e:
            raise StorageReadError(f"Cannot read key '{self._key}': {e}") from e

        if blob is None:
            return []

        try:
            return load_roster(blob)
        except ValueError as e:
            logger.debug("Rejected stored roster: %s", truncate_output(str(blob)))
            raise StorageReadError(f"Stored roster under '{self._key}' is malformed") from e

    def persist(self) -> bool:
        """Write the whole roster to storage.

        Returns:
            True if the write succeeded. On failure the error is logged and
            handed to on_storage_error, and False is returned.
        """
        try:
            self._storage.set_item(self._key, dump_roster(self._records))
        except (StorageError, OSError) as e:
            error = StorageWriteError(f"Cannot persist roster under '{self._key}': {e}")
            error.__cause__ = e
            logger.warning("%s; keeping in-memory roster", error)
            self._unsaved = True
            if self._on_storage_error is not None:
                self._on_storage_error(error)
            return False
        self._unsaved = False
        return True

    # --- Record Operations ---

    def add_or_update(
        self,
        data: StudentInput | Mapping[str, Any],
        target_id: str | None = None,
    ) -> StudentRecord:
        """Create a record, or update the one identified by target_id.

        Args:
            data: name, subject and grade for the student.
            target_id: ID of the record to update. When absent or unknown a
                new record is created.

        Returns:
            The created or updated record.

        Raises:
            ValidationError: If any field is invalid. Nothing is changed.
        """
        student = StudentInput.parse(data)

        index = self._find(target_id) if target_id is not None else None
        if index is not None:
            record = self._records[index]
            record.apply(student)
            logger.info("Updated student %s (%s)", record.id, record.label)
        else:
            if target_id is not None:
                logger.debug("No record with id '%s', creating a new one", target_id)
            record = StudentRecord(
                id=self._new_id(),
                name=student.name,
                subject=student.subject,
                grade=student.grade,
                created_at=self._today().isoformat(),
            )
            self._records.append(record)
            logger.info("Added student %s (%s)", record.id, record.label)

        self.persist()
        return record.model_copy()

    def remove(self, record_id: str) -> bool:
        """Delete a record.

        Args:
            record_id: ID of the record to delete.

        Returns:
            True if a record was removed.
        """
        index = self._find(record_id)
        if index is None:
            return False

        del self._records[index]
        logger.info("Removed student %s", record_id)
        self.persist()
        return True

    def get(self, record_id: str) -> StudentRecord:
        """Get a record by ID.

        Raises:
            RecordNotFoundError: If no record has that ID.
        """
        index = self._find(record_id)
        if index is None:
            raise RecordNotFoundError(f"Student with id '{record_id}' not found")
        return self._records[index].model_copy()

    def list(self) -> list[StudentRecord]:
        """Return the roster in insertion order."""
        return [record.model_copy() for record in self._records]

    def stats(self) -> ClassStats:
        """Return class statistics for the current roster."""
        return ClassStats.from_records(self._records)

    def to_csv(self) -> str:
        """Return the current roster as CSV text."""
        return to_csv(self._records)

    # --- Helpers ---

    def _find(self, record_id: str) -> int | None:
        for index, record in enumerate(self._records):
            if record.id == record_id:
                return index
        return None

    def _new_id(self) -> str:
        record_id = generate_id()
        while record_id in self._issued_ids:
            record_id = generate_id()
        self._issued_ids.add(record_id)
        return record_id

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, record_id: object) -> bool:
        return any(record.id == record_id for record in self._records)
