"""API test fixtures — per-test AppState + httpx client over ASGI.

Invariants:
    - Every test gets fresh stores backed by its own tmp snapshot directory
    - The chain is disabled unless a test builds its own AppState with a fake

Design Decisions:
    - ASGITransport does not run the lifespan, so the fixture attaches
      AppState to app.state itself and starts/stops it
"""

import pytest
from httpx import ASGITransport, AsyncClient

from rice_supply.main import app
from rice_supply.services.app_state import build_app_state


@pytest.fixture
async def app_state(settings):
    state = build_app_state(settings)
    await state.start()
    yield state
    await state.stop()


@pytest.fixture
async def client(app_state):
    """FastAPI test client bound to the per-test AppState."""
    app.state.supply_chain = app_state
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c
    del app.state.supply_chain
