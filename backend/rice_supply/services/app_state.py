"""Application State — every collection and collaborator, built once at startup.

Invariants:
    - Exactly one RecordService (and RecordStore) per EntityKind
    - Built by build_app_state() in the FastAPI lifespan and attached to
      app.state; request handlers reach it through api/dependencies.py
    - A misconfigured chain client disables notifications; it never blocks startup

Design Decisions:
    - Explicit state object over module-level singletons: tests construct
      their own AppState against a tmp directory
"""

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path

from rice_supply.config import Settings
from rice_supply.core.domain_types import EntityKind
from rice_supply.core.entity_schemas import ALL_SCHEMAS
from rice_supply.infrastructure.chain_client import ChainClient
from rice_supply.infrastructure.chain_outbox import ChainNotification, ChainOutbox
from rice_supply.infrastructure.record_store import RecordStore
from rice_supply.infrastructure.snapshot_file import SnapshotFile
from rice_supply.services.record_service import RecordService

logger = logging.getLogger(__name__)


@dataclass
class AppState:
    services: dict[EntityKind, RecordService]
    outbox: ChainOutbox
    chain_client: ChainClient | None = None
    development: bool = False
    started_at: float = field(default_factory=time.monotonic)

    def service(self, kind: EntityKind) -> RecordService:
        return self.services[kind]

    @property
    def uptime(self) -> float:
        return time.monotonic() - self.started_at

    async def start(self) -> None:
        await self.outbox.start()

    async def stop(self) -> None:
        await self.outbox.stop()
        if self.chain_client is not None:
            await self.chain_client.close()


def build_chain_client(settings: Settings) -> ChainClient | None:
    if not settings.chain_enabled:
        logger.info("Blockchain notifications disabled (no RPC URL or private key)")
        return None
    try:
        client = ChainClient(
            settings.chain_rpc_url,
            settings.chain_private_key,
            marker_value_wei=settings.chain_marker_value_wei,
            timeout_seconds=settings.chain_timeout_seconds,
        )
    except Exception as e:
        logger.error(f"Invalid blockchain configuration, notifications disabled: {e}")
        return None
    logger.info(f"Blockchain notifications enabled from wallet {client.address}")
    return client


def build_app_state(
    settings: Settings, chain_client: ChainClient | None = None,
) -> AppState:
    """Create stores (restoring snapshots), services and the outbox."""
    services: dict[EntityKind, RecordService] = {}

    async def record_tx(notification: ChainNotification, tx_hash: str) -> None:
        await services[notification.entity].store.update(
            notification.record_id, {"blockchainTx": tx_hash},
        )

    outbox = ChainOutbox(
        chain_client, on_confirmed=record_tx, max_size=settings.outbox_max_size,
    )
    data_dir = Path(settings.data_dir)
    for schema in ALL_SCHEMAS:
        snapshot = (
            SnapshotFile(data_dir, schema.snapshot_name)
            if settings.persist_snapshots else None
        )
        store = RecordStore(schema.kind, snapshot)
        store.restore()
        services[schema.kind] = RecordService(
            schema, store, outbox,
            enforce_unique_alternate_key=settings.enforce_unique_qr_codes,
        )
    return AppState(
        services=services,
        outbox=outbox,
        chain_client=chain_client,
        development=settings.is_development,
    )
