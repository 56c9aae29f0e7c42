"""Runtime settings read from the environment (and ``.env`` when present)."""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List

from dotenv import load_dotenv

ROOT = Path(__file__).resolve().parents[2]

FIREBASE_KEYS = {
    "apiKey": "FIREBASE_API_KEY",
    "authDomain": "FIREBASE_AUTH_DOMAIN",
    "projectId": "FIREBASE_PROJECT_ID",
    "storageBucket": "FIREBASE_STORAGE_BUCKET",
    "messagingSenderId": "FIREBASE_MESSAGING_SENDER_ID",
    "appId": "FIREBASE_APP_ID",
}


@dataclass
class Settings:
    data_dir: Path = ROOT / "Database"
    host: str = "0.0.0.0"
    port: int = 8000
    cors_origins: List[str] = field(default_factory=lambda: ["*"])
    firebase: Dict[str, str] = field(default_factory=dict)

    @property
    def vehicles_path(self) -> Path:
        return self.data_dir / "Vehicles.json"

    @property
    def images_dir(self) -> Path:
        return self.data_dir / "Images"


def load_settings() -> Settings:
    load_dotenv()
    origins = os.getenv("CORS_ORIGINS", "*")
    return Settings(
        data_dir=Path(os.getenv("VEHICLE_DATA_DIR", str(ROOT / "Database"))),
        host=os.getenv("HOST", os.getenv("IP", "0.0.0.0")),
        port=int(os.getenv("PORT", "8000")),
        cors_origins=[origin.strip() for origin in origins.split(",") if origin.strip()],
        firebase={key: os.getenv(env, "") for key, env in FIREBASE_KEYS.items()},
    )
