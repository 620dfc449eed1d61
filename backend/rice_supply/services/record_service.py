"""Record Service — the per-entity controller contract.

Invariants:
    - Validation runs before any store access; a rejected request never mutates
    - create assigns identity + timestamps, inserts, then enqueues the chain
      notification; the identifier never depends on the notification outcome
    - Unknown ids (and unknown alternate keys) raise NotFoundError
    - delete is always a soft delete and is idempotent

Design Decisions:
    - One class parametrized by EntitySchema instead of one controller per kind
    - Returns plain record dicts and Page objects; HTTP envelopes are built in api/
"""

import logging
from typing import Any

from rice_supply.core.domain_types import Record
from rice_supply.core.errors import ErrorContext, NotFoundError, ValidationError
from rice_supply.core.identity import new_record_id
from rice_supply.core.pagination import Page, paginate
from rice_supply.core.records import build_record, updatable_changes
from rice_supply.core.validation import EntitySchema, validate_create, validate_update
from rice_supply.infrastructure.chain_outbox import ChainNotification, ChainOutbox
from rice_supply.infrastructure.record_store import RecordStore

logger = logging.getLogger(__name__)


class RecordService:
    """CRUD operations for one record kind."""

    def __init__(
        self,
        schema: EntitySchema,
        store: RecordStore,
        outbox: ChainOutbox | None = None,
        enforce_unique_alternate_key: bool = False,
    ):
        self.schema = schema
        self.store = store
        self.outbox = outbox
        self.enforce_unique_alternate_key = enforce_unique_alternate_key

    def _context(self, record_id: str | None = None) -> ErrorContext:
        return ErrorContext(entity=self.schema.kind.value, record_id=record_id)

    def list(self, page: Any = None, limit: Any = None) -> Page:
        return paginate(self.store.list(), page, limit)

    def get(self, record_id: str) -> Record:
        record = self.store.find_by_id(record_id)
        if record is None:
            raise NotFoundError(
                f"{self.schema.label} not found", self._context(record_id),
            )
        return record

    def get_by_alternate_key(self, key: str) -> Record:
        field = self.schema.alternate_key
        if field is None:
            raise ValidationError(
                f"{self.schema.plural_label} have no alternate key",
            )
        record = self.store.find_by_field(field, key)
        if record is None:
            raise NotFoundError(
                f"{self.schema.label} not found with the provided {field}",
                self._context(),
            )
        return record

    @property
    def _unique_field(self) -> str | None:
        return self.schema.alternate_key if self.enforce_unique_alternate_key else None

    async def create(self, payload: Any) -> Record:
        validate_create(self.schema, payload)
        record = build_record(self.schema, payload, new_record_id())
        stored = await self.store.insert(record, unique_field=self._unique_field)
        logger.info(
            f"Created {self.schema.kind.value} {stored['id']}",
            extra={"entity": self.schema.kind.value, "record_id": stored["id"]},
        )
        if self.outbox is not None:
            self.outbox.enqueue(ChainNotification(self.schema.kind, stored["id"]))
        return stored

    async def update(self, record_id: str, payload: Any) -> Record:
        validate_update(self.schema, payload)
        changes = updatable_changes(self.schema, payload)
        ignored = sorted(set(payload) - set(changes))
        if ignored:
            logger.debug(
                f"Ignoring non-updatable fields on {record_id}: {', '.join(ignored)}",
                extra={"entity": self.schema.kind.value, "record_id": record_id},
            )
        updated = await self.store.update(
            record_id, changes, unique_field=self._unique_field,
        )
        if updated is None:
            raise NotFoundError(
                f"{self.schema.label} not found", self._context(record_id),
            )
        logger.info(
            f"Updated {self.schema.kind.value} {record_id}",
            extra={"entity": self.schema.kind.value, "record_id": record_id},
        )
        return updated

    async def delete(self, record_id: str) -> Record:
        retired = await self.store.soft_delete(record_id)
        if retired is None:
            raise NotFoundError(
                f"{self.schema.label} not found", self._context(record_id),
            )
        logger.info(
            f"Deactivated {self.schema.kind.value} {record_id}",
            extra={"entity": self.schema.kind.value, "record_id": record_id},
        )
        return retired
