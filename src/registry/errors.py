"""Exception hierarchy for the vehicle registry."""
from __future__ import annotations

from pathlib import Path


class RegistryError(Exception):
    """Base exception for all registry errors."""


class CollectionError(RegistryError):
    """Failure reading or writing the persisted collection."""

    def __init__(self, message: str, *, path: Path | None = None) -> None:
        self.path = path
        super().__init__(message)


class ReadError(CollectionError):
    """The collection file could not be read."""


class WriteError(CollectionError):
    """The collection file could not be written.

    ``created`` is set by an upsert to tell a failed insert from a failed update.
    """

    created: bool | None = None


class CorruptDataError(CollectionError):
    """The collection file exists but is not a JSON array of objects."""


class StoreUninitialized(RegistryError):
    """No collection has been persisted yet."""


class NoRecords(RegistryError):
    """The collection exists but holds no vehicles to update."""


class StoreUnavailable(RegistryError):
    """A create could not be completed because storage failed."""
