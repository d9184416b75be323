"""Custom exceptions for the Roster Store."""

from __future__ import annotations


class RosterError(Exception):
    """Base exception for Roster Store errors."""


class ValidationError(RosterError):
    """Student input failed validation.

    Attributes:
        errors: Message per offending field, keyed by field name. Every
            failing field is reported, not just the first.
    """

    def __init__(self, errors: dict[str, str]) -> None:
        self.errors = dict(errors)
        summary = "; ".join(f"{field}: {message}" for field, message in self.errors.items())
        super().__init__(f"Invalid student data ({summary})")


class RecordNotFoundError(RosterError):
    """Student record with given ID does not exist."""


class StorageError(RosterError):
    """The durable storage backend failed."""


class StorageReadError(StorageError):
    """Stored roster could not be read or parsed."""


class StorageWriteError(StorageError):
    """Roster could not be written to storage."""
