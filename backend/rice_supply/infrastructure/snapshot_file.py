"""Snapshot File — durable JSON copy of one record collection.

Invariants:
    - One flat file per entity kind: <data_dir>/<snapshot_name>.json, a JSON array
    - Writes are atomic: temp file in the same directory, then os.replace
    - load() returns [] when the file does not exist; malformed content raises
      SnapshotError so the caller can log and continue memory-only

Design Decisions:
    - Synchronous file IO here; RecordStore runs it in a worker thread while
      holding its lock, so writes to one file never interleave
"""

import json
import logging
import os
import tempfile
from pathlib import Path

from rice_supply.core.domain_types import Record

logger = logging.getLogger(__name__)


class SnapshotError(Exception):
    """Snapshot file could not be read or written."""


class SnapshotFile:
    """Reads and atomically rewrites one collection's JSON snapshot."""

    def __init__(self, directory: str | Path, name: str):
        self.path = Path(directory) / f"{name}.json"

    def load(self) -> list[Record]:
        if not self.path.exists():
            return []
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise SnapshotError(f"cannot read {self.path}: {e}") from e
        if not isinstance(data, list):
            raise SnapshotError(f"{self.path} does not contain a JSON array")
        records = []
        for index, item in enumerate(data):
            if isinstance(item, dict) and isinstance(item.get("id"), str):
                records.append(item)
            else:
                logger.warning(f"Skipping malformed entry {index} in {self.path}")
        return records

    def save(self, records: list[Record]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self.path.parent, prefix=f".{self.path.stem}.", suffix=".tmp",
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    json.dump(records, fh, indent=2, ensure_ascii=False)
                os.replace(tmp_name, self.path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except (OSError, TypeError, ValueError) as e:
            raise SnapshotError(f"cannot write {self.path}: {e}") from e
