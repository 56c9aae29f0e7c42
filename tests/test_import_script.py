from __future__ import annotations

import asyncio
import importlib.util
import json
import sys
from pathlib import Path

import pytest

from registry import PersistedCollection, VehicleStore

SCRIPT = Path(__file__).resolve().parents[1] / "scripts" / "import_vehicles.py"


@pytest.fixture(scope="module")
def importer():
    spec = importlib.util.spec_from_file_location("import_vehicles", SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_upsert_mode_seeds_empty_collection_then_merges(importer, collection_path: Path):
    collection = PersistedCollection(collection_path)
    collection.ensure_exists()
    store = VehicleStore(collection)
    vehicles = [
        {"numberPlate": "AB12", "phoneNumber": "555", "color": "red"},
        {"numberPlate": "CD34"},
        {"numberPlate": "AB12", "color": "blue"},
    ]

    counts = asyncio.run(importer.import_vehicles(store, vehicles, mode="upsert"))

    assert counts == {"created": 2, "updated": 1}
    assert collection.load() == [
        {"phoneNumber": "555", "numberPlate": "AB12", "color": "blue"},
        {"phoneNumber": "555", "numberPlate": "CD34"},
    ]


def test_create_mode_appends_everything(importer, collection_path: Path):
    store = VehicleStore(PersistedCollection(collection_path))
    vehicles = [{"numberPlate": "AB12"}, {"numberPlate": "AB12"}]

    counts = asyncio.run(importer.import_vehicles(store, vehicles, mode="create"))

    assert counts == {"created": 2, "updated": 0}
    assert len(store.collection.load()) == 2


def test_read_vehicles_accepts_single_object(importer, tmp_path: Path):
    source = tmp_path / "vehicle.json"
    source.write_text(json.dumps({"numberPlate": "AB12"}), encoding="utf-8")

    assert importer.read_vehicles(source) == [{"numberPlate": "AB12"}]


def test_read_vehicles_rejects_scalars(importer, tmp_path: Path):
    source = tmp_path / "vehicles.json"
    source.write_text("[1, 2]", encoding="utf-8")

    with pytest.raises(ValueError):
        importer.read_vehicles(source)


def test_main_reports_unwritable_collection(importer, tmp_path: Path, monkeypatch: pytest.MonkeyPatch, caplog):
    source = tmp_path / "vehicles.json"
    source.write_text(json.dumps([{"numberPlate": "AB12"}]), encoding="utf-8")
    blocker = tmp_path / "Database"
    blocker.write_text("not a directory", encoding="utf-8")
    monkeypatch.setattr(
        sys, "argv", ["import_vehicles.py", str(source), "--collection", str(blocker / "Vehicles.json")]
    )

    assert importer.main() == 1
    assert "Import failed" in caplog.text
