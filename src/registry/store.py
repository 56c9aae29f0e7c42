"""Vehicle store: create, list and upsert over a persisted collection.

Every mutating operation holds the store's lock across the whole
load -> mutate -> save sequence, so concurrent requests served by one event
loop never overwrite each other's changes. Reads skip the lock; ``save``
replaces the file atomically, so a reader sees either the old or the new
collection.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from .collection import PersistedCollection
from .errors import CollectionError, NoRecords, StoreUnavailable, StoreUninitialized, WriteError
from .records import PLATE_FIELD, RecordLike, as_document, effective_phone, merge_with_phone

LOGGER = logging.getLogger(__name__)


@dataclass
class UpsertResult:
    record: Dict[str, Any]
    created: bool


class VehicleStore:
    def __init__(self, collection: PersistedCollection) -> None:
        self.collection = collection
        self._lock = asyncio.Lock()

    async def initialized(self) -> bool:
        return await asyncio.to_thread(self.collection.exists)

    async def create(self, record: RecordLike) -> Dict[str, Any]:
        """Append ``record`` without any duplicate check and return it."""
        document = as_document(record)
        async with self._lock:
            try:
                await asyncio.to_thread(self.collection.ensure_exists)
                vehicles = await asyncio.to_thread(self.collection.load)
                vehicles.append(document)
                await asyncio.to_thread(self.collection.save, vehicles)
            except CollectionError as exc:
                raise StoreUnavailable(str(exc)) from exc
        LOGGER.info("Created vehicle %s", document.get(PLATE_FIELD))
        return document

    async def list(self) -> List[Dict[str, Any]]:
        if not await self.initialized():
            raise StoreUninitialized("Vehicle data not found")
        return await asyncio.to_thread(self.collection.load)

    async def get(self, number_plate: str) -> Optional[Dict[str, Any]]:
        vehicles = await self.list()
        return next((v for v in vehicles if v.get(PLATE_FIELD) == number_plate), None)

    async def upsert(self, incoming: RecordLike) -> UpsertResult:
        """Update the vehicle with the same plate, or append a new one.

        The phone number of the stored record is preserved when ``incoming``
        carries an empty one. A new vehicle without a phone number inherits
        the one from the last record in the collection.
        """
        document = as_document(incoming)
        plate = document.get(PLATE_FIELD)

        async with self._lock:
            if not await self.initialized():
                raise StoreUninitialized("Vehicle data not found")

            vehicles = await asyncio.to_thread(self.collection.load)
            if not vehicles:
                raise NoRecords("No vehicles to update")

            index = next(
                (i for i, vehicle in enumerate(vehicles) if vehicle.get(PLATE_FIELD) == plate),
                None,
            )
            if index is not None:
                phone = effective_phone(document, vehicles[index])
                stored = merge_with_phone(document, phone)
                vehicles[index] = stored
                created = False
            else:
                phone = effective_phone(document, vehicles[-1])
                stored = merge_with_phone(document, phone)
                vehicles.append(stored)
                created = True

            try:
                await asyncio.to_thread(self.collection.save, vehicles)
            except WriteError as exc:
                exc.created = created
                raise

        LOGGER.info("%s vehicle %s", "Added" if created else "Updated", plate)
        return UpsertResult(record=stored, created=created)
