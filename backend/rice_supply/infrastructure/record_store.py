"""Record Store — authoritative in-process collection for one entity kind.

Invariants:
    - Insertion order preserved (dict index keyed by id)
    - id unique within the collection; insert of a known id raises ConflictError
    - With unique_field set, insert and update reject a value another record holds
    - Every mutation (insert, update, soft_delete) runs under one asyncio.Lock
      per store, and the snapshot write happens before the lock is released
    - Snapshot load/save failures are logged and never raised: the store keeps
      serving from memory
    - Records are never physically removed

Design Decisions:
    - Generic over EntitySchema: one class, five instances (see services/app_state.py)
    - Snapshot IO in asyncio.to_thread: the event loop keeps serving reads
      while a file is rewritten
"""

import asyncio
import logging
from typing import Any

from rice_supply.core.domain_types import EntityKind, Record
from rice_supply.core.errors import ConflictError, ErrorContext
from rice_supply.core.records import deactivate, merge_update
from rice_supply.infrastructure.snapshot_file import SnapshotError, SnapshotFile

logger = logging.getLogger(__name__)


class RecordStore:
    """In-memory ordered collection with an optional JSON snapshot."""

    def __init__(self, kind: EntityKind, snapshot: SnapshotFile | None = None):
        self.kind = kind
        self._records: dict[str, Record] = {}
        self._lock = asyncio.Lock()
        self._snapshot = snapshot
        self.last_snapshot_error: str | None = None

    def __len__(self) -> int:
        return len(self._records)

    @property
    def persistent(self) -> bool:
        return self._snapshot is not None

    # ─── Startup ─────────────────────────────────────────────────

    def restore(self) -> int:
        """Load the snapshot once at startup. Returns the number of records loaded."""
        if self._snapshot is None:
            return 0
        try:
            records = self._snapshot.load()
        except SnapshotError as e:
            self.last_snapshot_error = str(e)
            logger.error(
                f"Failed to load {self.kind.value} snapshot, starting empty: {e}",
                extra={"entity": self.kind.value},
            )
            return 0
        for record in records:
            self._records.setdefault(record["id"], record)
        logger.info(
            f"Loaded {len(self._records)} {self.kind.value} records from snapshot",
            extra={"entity": self.kind.value},
        )
        return len(self._records)

    # ─── Reads ───────────────────────────────────────────────────

    def find_by_id(self, record_id: str) -> Record | None:
        return self._records.get(record_id)

    def find_by_field(self, field: str, value: Any) -> Record | None:
        """First record (insertion order) whose `field` equals `value`."""
        for record in self._records.values():
            if field in record and record[field] == value:
                return record
        return None

    def list(self) -> list[Record]:
        return list(self._records.values())

    # ─── Mutations ───────────────────────────────────────────────

    def _require_unique(
        self, field: str | None, value: Any, record_id: str,
    ) -> None:
        """Caller holds the lock. Another record already using `value` → ConflictError."""
        if field is None or value is None or value == "":
            return
        for other in self._records.values():
            if other["id"] != record_id and other.get(field) == value:
                raise ConflictError(
                    f"{field} '{value}' is already in use",
                    ErrorContext(entity=self.kind.value, record_id=record_id),
                )

    async def insert(self, record: Record, unique_field: str | None = None) -> Record:
        async with self._lock:
            record_id = record["id"]
            if record_id in self._records:
                raise ConflictError(
                    f"Record {record_id} already exists",
                    ErrorContext(entity=self.kind.value, record_id=record_id),
                )
            if unique_field is not None:
                self._require_unique(unique_field, record.get(unique_field), record_id)
            stored = dict(record)
            self._records[record_id] = stored
            await self._persist()
            return stored

    async def update(
        self, record_id: str, changes: dict[str, Any],
        unique_field: str | None = None,
    ) -> Record | None:
        async with self._lock:
            current = self._records.get(record_id)
            if current is None:
                return None
            if unique_field is not None and unique_field in changes:
                self._require_unique(unique_field, changes[unique_field], record_id)
            updated = merge_update(current, changes)
            self._records[record_id] = updated
            await self._persist()
            return updated

    async def soft_delete(self, record_id: str) -> Record | None:
        async with self._lock:
            current = self._records.get(record_id)
            if current is None:
                return None
            retired = deactivate(current)
            self._records[record_id] = retired
            await self._persist()
            return retired

    async def _persist(self) -> None:
        """Rewrite the snapshot. Caller holds the lock."""
        if self._snapshot is None:
            return
        try:
            await asyncio.to_thread(self._snapshot.save, self.list())
            self.last_snapshot_error = None
        except SnapshotError as e:
            self.last_snapshot_error = str(e)
            logger.error(
                f"Failed to save {self.kind.value} snapshot: {e}",
                extra={"entity": self.kind.value},
            )
