from __future__ import annotations

import json
from pathlib import Path

import pytest

from registry import PersistedCollection, VehicleStore


@pytest.fixture()
def collection_path(tmp_path: Path) -> Path:
    return tmp_path / "Database" / "Vehicles.json"


@pytest.fixture()
def seeded_path(collection_path: Path) -> Path:
    collection_path.parent.mkdir(parents=True)
    collection_path.write_text(
        json.dumps([{"numberPlate": "AB12", "phoneNumber": "555", "color": "red"}], indent=2) + "\n",
        encoding="utf-8",
    )
    return collection_path


@pytest.fixture()
def store(collection_path: Path) -> VehicleStore:
    return VehicleStore(PersistedCollection(collection_path))
