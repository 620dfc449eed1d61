"""Record Routes — the CRUD surface generated once per record kind.

Invariants:
    - GET    /api/{path}            → paginated list, 200
    - GET    /api/{path}/{id}       → one record, 200 / 404
    - POST   /api/{path}            → create, 201
    - PUT    /api/{path}/{id}       → partial update, 200 / 404
    - DELETE /api/{path}/{id}       → soft delete, 200 / 404
    - Rice batches also expose GET /api/rice-batches/qr/{qrCode}
    - Malformed path ids → 400 before the store is touched

Design Decisions:
    - Router factory over five hand-written route modules: the kinds differ
      only in their EntitySchema
    - Bodies arrive as raw JSON (Any) and are checked by core/validation.py,
      so the error messages are the domain ones, not Pydantic's
    - page/limit are taken as strings: invalid values fall back to defaults
"""

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, Request, status

from rice_supply.api.dependencies import get_app_state, valid_record_id
from rice_supply.core.responses import format_success
from rice_supply.core.validation import EntitySchema
from rice_supply.schemas.envelope import SuccessEnvelope
from rice_supply.services.record_service import RecordService

logger = logging.getLogger(__name__)


def build_record_router(schema: EntitySchema) -> APIRouter:
    """Build the CRUD router for one record kind."""
    router = APIRouter(prefix=f"/api/{schema.path}", tags=[schema.path])
    label = schema.label

    def get_service(request: Request) -> RecordService:
        return get_app_state(request).service(schema.kind)

    @router.get("", response_model=SuccessEnvelope)
    async def list_records(
        page: str | None = None,
        limit: str | None = None,
        service: RecordService = Depends(get_service),
    ):
        result = service.list(page, limit)
        return format_success(
            result.to_response(),
            f"{schema.plural_label} retrieved successfully",
        )

    if schema.alternate_key_path:
        @router.get(
            f"/{schema.alternate_key_path}/{{key}}",
            response_model=SuccessEnvelope,
        )
        async def get_by_alternate_key(
            key: str, service: RecordService = Depends(get_service),
        ):
            record = service.get_by_alternate_key(key)
            return format_success(record, f"{label} retrieved successfully")

    @router.get("/{record_id}", response_model=SuccessEnvelope)
    async def get_record(
        record_id: str = Depends(valid_record_id),
        service: RecordService = Depends(get_service),
    ):
        record = service.get(record_id)
        return format_success(record, f"{label} retrieved successfully")

    @router.post(
        "", response_model=SuccessEnvelope,
        status_code=status.HTTP_201_CREATED,
    )
    async def create_record(
        payload: Any = Body(None),
        service: RecordService = Depends(get_service),
    ):
        record = await service.create(payload)
        return format_success(record, f"{label} created successfully")

    @router.put("/{record_id}", response_model=SuccessEnvelope)
    async def update_record(
        record_id: str = Depends(valid_record_id),
        payload: Any = Body(None),
        service: RecordService = Depends(get_service),
    ):
        record = await service.update(record_id, payload)
        return format_success(record, f"{label} updated successfully")

    @router.delete("/{record_id}", response_model=SuccessEnvelope)
    async def delete_record(
        record_id: str = Depends(valid_record_id),
        service: RecordService = Depends(get_service),
    ):
        record = await service.delete(record_id)
        return format_success(record, f"{label} deactivated successfully")

    return router
