"""Health & Readiness Checks — liveness and readiness endpoints.

Invariants:
    - GET /health always returns 200 with {status: "OK", timestamp, uptime}
    - GET /health/ready always returns 200; an unreachable chain node is
      reported, not fatal, because chain notifications are best-effort
"""

import logging

from fastapi import APIRouter, Depends

from rice_supply.api.dependencies import get_app_state
from rice_supply.core.responses import response_timestamp
from rice_supply.schemas.envelope import HealthResponse, ReadinessResponse
from rice_supply.services.app_state import AppState

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/health", tags=["health"])


@router.get("", response_model=HealthResponse)
async def health_check(state: AppState = Depends(get_app_state)):
    """Basic liveness check. Returns 200 if the process is up."""
    return HealthResponse(
        status="OK",
        timestamp=response_timestamp(),
        uptime=round(state.uptime, 3),
    )


@router.get("/ready", response_model=ReadinessResponse)
async def readiness_check(state: AppState = Depends(get_app_state)):
    """Readiness check — collection sizes, outbox counters, chain reachability."""
    if state.chain_client is None:
        chain = "disabled"
    elif await state.chain_client.is_connected():
        chain = "connected"
    else:
        chain = "unreachable"
    return ReadinessResponse(
        status="ready",
        timestamp=response_timestamp(),
        stores={
            kind.value: len(service.store)
            for kind, service in state.services.items()
        },
        outbox=state.outbox.stats(),
        chain=chain,
    )
