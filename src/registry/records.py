"""Typed view over open-ended vehicle records."""
from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

PLATE_FIELD = "numberPlate"
PHONE_FIELD = "phoneNumber"


class VehicleRecord(BaseModel):
    """A vehicle keyed by ``numberPlate``.

    Only the plate and the owner's phone number carry semantics; every other
    field is kept verbatim in ``model_extra``.
    """

    model_config = ConfigDict(extra="allow")

    number_plate: Optional[str] = Field(default=None, alias=PLATE_FIELD)
    phone_number: Optional[str] = Field(default=None, alias=PHONE_FIELD)

    def as_document(self) -> Dict[str, Any]:
        """Return the JSON mapping with only the fields that were supplied."""
        return self.model_dump(by_alias=True, exclude_unset=True)


RecordLike = Union[VehicleRecord, Mapping[str, Any]]


def as_document(record: RecordLike) -> Dict[str, Any]:
    if isinstance(record, VehicleRecord):
        return record.as_document()
    return dict(record)


def effective_phone(incoming: Mapping[str, Any], fallback: Optional[Mapping[str, Any]]) -> Any:
    """Incoming phone number unless it is empty, else the fallback record's."""
    phone = incoming.get(PHONE_FIELD)
    if phone:
        return phone
    if fallback is None:
        return None
    return fallback.get(PHONE_FIELD)


def merge_with_phone(incoming: Mapping[str, Any], phone: Any) -> Dict[str, Any]:
    """Union of the incoming fields with ``phoneNumber`` forced to ``phone``."""
    merged: Dict[str, Any] = {PHONE_FIELD: phone}
    merged.update(incoming)
    merged[PHONE_FIELD] = phone
    return merged
