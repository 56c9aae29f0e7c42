"""Helpers for reading/writing the vehicle collection blob."""
from __future__ import annotations

import json
import logging
import os
import stat
import tempfile
from pathlib import Path
from typing import Any, Dict, Iterable, List

from .errors import CorruptDataError, ReadError, WriteError

LOGGER = logging.getLogger(__name__)

_UMASK = os.umask(0)
os.umask(_UMASK)


class PersistedCollection:
    """A JSON array of vehicle records stored in a single file.

    The whole collection is read into memory on ``load`` and rewritten on
    ``save``. Nothing here serializes access; callers own that.
    """

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    def __repr__(self) -> str:
        return f"PersistedCollection({str(self.path)!r})"

    def exists(self) -> bool:
        return self.path.exists()

    def ensure_exists(self) -> None:
        """Write an empty collection if no file is present yet."""
        if self.path.exists():
            return
        self.save([])
        LOGGER.info("Initialized empty vehicle collection at %s", self.path)

    def load(self) -> List[Dict[str, Any]]:
        """Return the list parsed from the collection file."""
        try:
            raw = self.path.read_text(encoding="utf-8")
        except OSError as exc:
            raise ReadError(f"Failed to read {self.path}: {exc}", path=self.path) from exc

        try:
            data = json.loads(raw)
        except ValueError as exc:
            raise CorruptDataError(f"Invalid JSON in {self.path}: {exc}", path=self.path) from exc

        if not isinstance(data, list):
            raise CorruptDataError(
                f"Expected list in {self.path}, found {type(data).__name__}", path=self.path
            )
        for index, record in enumerate(data):
            if not isinstance(record, dict):
                raise CorruptDataError(
                    f"Expected object at index {index} in {self.path}, found {type(record).__name__}",
                    path=self.path,
                )
        return data

    def _file_mode(self) -> int:
        """Mode of the current file, or the umask default for a new one."""
        try:
            return stat.S_IMODE(self.path.stat().st_mode)
        except FileNotFoundError:
            return 0o666 & ~_UMASK

    def save(self, records: Iterable[Dict[str, Any]]) -> None:
        """Write records as an indented JSON array, replacing the file atomically."""
        tmp_name = None
        try:
            payload = json.dumps(list(records), indent=2, ensure_ascii=False) + "\n"
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
            )
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(payload)
                handle.flush()
                os.fsync(handle.fileno())
            os.chmod(tmp_name, self._file_mode())
            os.replace(tmp_name, self.path)
        except (OSError, TypeError, ValueError) as exc:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise WriteError(f"Failed to write {self.path}: {exc}", path=self.path) from exc
