"""Route Dependencies — application state lookup and path-id guards.

Invariants:
    - AppState lives on app.state.supply_chain, set by the lifespan (or a test fixture)
    - A malformed path id is rejected with 400 before any store lookup
"""

from fastapi import Request

from rice_supply.core.errors import ValidationError
from rice_supply.core.identity import is_record_id
from rice_supply.services.app_state import AppState


def get_app_state(request: Request) -> AppState:
    return request.app.state.supply_chain


def valid_record_id(record_id: str) -> str:
    """Path parameter guard shared by get/update/delete routes."""
    if not is_record_id(record_id):
        raise ValidationError("Invalid id format", fields=["id"])
    return record_id
