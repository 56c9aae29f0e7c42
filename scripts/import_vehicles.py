#!/usr/bin/env python3
"""CLI that loads vehicles from a JSON file into the registry."""
from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from registry import (  # noqa: E402
    NoRecords,
    PersistedCollection,
    RegistryError,
    VehicleStore,
)

logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s")
LOGGER = logging.getLogger(__name__)

DEFAULT_COLLECTION = ROOT / "Database" / "Vehicles.json"


def read_vehicles(path: Path) -> List[Dict[str, Any]]:
    data = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(data, dict):
        data = [data]
    if not isinstance(data, list) or not all(isinstance(item, dict) for item in data):
        raise ValueError(f"Expected a JSON object or array of objects in {path}")
    return data


async def import_vehicles(store: VehicleStore, vehicles: List[Dict[str, Any]], *, mode: str) -> Dict[str, int]:
    counts = {"created": 0, "updated": 0}
    for vehicle in vehicles:
        if mode == "create":
            await store.create(vehicle)
            counts["created"] += 1
            continue
        try:
            result = await store.upsert(vehicle)
        except NoRecords:
            # nothing to merge against yet, so seed the collection
            await store.create(vehicle)
            counts["created"] += 1
            continue
        counts["created" if result.created else "updated"] += 1
    return counts


def main() -> int:
    parser = argparse.ArgumentParser(description="Import vehicle records into the registry")
    parser.add_argument("source", type=Path, help="JSON file with a vehicle object or array of vehicles")
    parser.add_argument(
        "--collection",
        type=Path,
        default=DEFAULT_COLLECTION,
        help="Path to the Vehicles.json collection",
    )
    parser.add_argument(
        "--mode",
        choices=("upsert", "create"),
        default="upsert",
        help="Merge by number plate, or append every record as-is",
    )
    args = parser.parse_args()

    try:
        vehicles = read_vehicles(args.source)
    except (OSError, ValueError) as exc:
        LOGGER.error("Could not read %s: %s", args.source, exc)
        return 1

    collection = PersistedCollection(args.collection)
    store = VehicleStore(collection)

    try:
        if args.mode == "upsert":
            collection.ensure_exists()
        counts = asyncio.run(import_vehicles(store, vehicles, mode=args.mode))
    except RegistryError as exc:
        LOGGER.error("Import failed: %s", exc)
        return 1

    print(json.dumps({"collection": str(args.collection), **counts}, indent=2))
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
