"""File-backed vehicle registry keyed by number plate."""
from __future__ import annotations

from .collection import PersistedCollection
from .errors import (
    CollectionError,
    CorruptDataError,
    NoRecords,
    ReadError,
    RegistryError,
    StoreUnavailable,
    StoreUninitialized,
    WriteError,
)
from .records import VehicleRecord
from .store import UpsertResult, VehicleStore

__all__ = [
    "CollectionError",
    "CorruptDataError",
    "NoRecords",
    "PersistedCollection",
    "ReadError",
    "RegistryError",
    "StoreUnavailable",
    "StoreUninitialized",
    "UpsertResult",
    "VehicleRecord",
    "VehicleStore",
    "WriteError",
]
