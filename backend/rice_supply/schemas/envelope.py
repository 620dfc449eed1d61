"""Envelope Schemas — the response shapes every endpoint returns.

Invariants:
    - Every body carries `success` and an ISO 8601 `timestamp`
    - ErrorEnvelope.error / .stack are populated only in development mode

Design Decisions:
    - `data` typed as Any: record documents are schemaless beyond their
      field table, so they are validated on the way in, not the way out
"""

from typing import Any, Literal

from pydantic import BaseModel


class SuccessEnvelope(BaseModel):
    success: Literal[True] = True
    message: str
    data: Any = None
    timestamp: str


class ErrorEnvelope(BaseModel):
    success: Literal[False] = False
    message: str
    timestamp: str
    error: str | None = None
    stack: str | None = None


class HealthResponse(BaseModel):
    status: str
    timestamp: str
    uptime: float


class OutboxStats(BaseModel):
    enabled: bool
    running: bool
    pending: int
    sent: int
    failed: int
    dropped: int


class ReadinessResponse(BaseModel):
    status: str
    timestamp: str
    stores: dict[str, int]
    outbox: OutboxStats
    chain: Literal["disabled", "connected", "unreachable"]
