"""Record Lifecycle — pure construction, merge and retirement of record dicts.

Invariants:
    - build_record assigns id, createdAt == updatedAt, isActive=True, schema defaults
    - Only the schema's creatable fields are copied from a create payload
    - merge_update is a shallow merge: keys absent from the partial keep their
      value, keys present (even None) overwrite
    - id, createdAt, updatedAt and blockchainTx are never taken from a payload
    - Every mutation moves updatedAt strictly forward (monotonic even when the
      wall clock does not advance between two writes)

Design Decisions:
    - Pure functions over store methods: RecordStore only sequences them under
      its lock, so merge semantics are testable without IO
    - ISO-8601 UTC strings with microseconds: JSON-safe, lexically ordered
"""

from datetime import datetime, timedelta, timezone
from typing import Any

from rice_supply.core.domain_types import Record, RecordId
from rice_supply.core.validation import EntitySchema, is_absent

SERVER_MANAGED_FIELDS = frozenset({"id", "createdAt", "updatedAt", "blockchainTx"})

_TICK = timedelta(microseconds=1)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(moment: datetime) -> str:
    return moment.isoformat(timespec="microseconds")


def parse_timestamp(value: str) -> datetime:
    return datetime.fromisoformat(value)


def next_timestamp(previous: str | None, now: datetime | None = None) -> str:
    """Current time, bumped past `previous` if the clock has not moved."""
    moment = now or utc_now()
    if previous:
        floor = parse_timestamp(previous) + _TICK
        if moment < floor:
            moment = floor
    return format_timestamp(moment)


def build_record(
    schema: EntitySchema,
    payload: dict[str, Any],
    record_id: RecordId,
    now: datetime | None = None,
) -> Record:
    """Project a validated create payload onto a fresh record."""
    stamp = format_timestamp(now or utc_now())
    record: Record = {"id": record_id}
    for rule in schema.fields:
        if rule.creatable and rule.name in payload:
            record[rule.name] = payload[rule.name]
        if rule.default is not None and (
            not rule.creatable or is_absent(record.get(rule.name))
        ):
            record[rule.name] = rule.default()
    record["isActive"] = True
    record["createdAt"] = stamp
    record["updatedAt"] = stamp
    return record


def updatable_changes(schema: EntitySchema, payload: dict[str, Any]) -> dict[str, Any]:
    """Keep only the keys an update may touch."""
    allowed = set(schema.updatable_fields)
    return {
        key: value for key, value in payload.items()
        if key in allowed and key not in SERVER_MANAGED_FIELDS
    }


def merge_update(
    record: Record, changes: dict[str, Any], now: datetime | None = None,
) -> Record:
    """Return a new record with `changes` merged over `record`."""
    merged = {**record, **changes}
    merged["id"] = record["id"]
    merged["createdAt"] = record["createdAt"]
    merged["updatedAt"] = next_timestamp(record.get("updatedAt"), now)
    return merged


def deactivate(record: Record, now: datetime | None = None) -> Record:
    """Soft delete: flip isActive, keep everything else."""
    return merge_update(record, {"isActive": False}, now)
