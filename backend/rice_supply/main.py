"""Rice Supply API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (health + one router per record kind)
    - Global error handlers map every failure to the error envelope
    - CORS origins and the body cap come from settings (not hardcoded)
    - Stores restored from snapshots and the chain outbox started in the lifespan

Design Decisions:
    - Lifespan over @app.on_event: cleaner startup/shutdown pairing
    - AppState on app.state.supply_chain: tests inject their own instead of
      running the lifespan
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from rice_supply.api.error_handlers import register_error_handlers
from rice_supply.api.middleware import register_middleware
from rice_supply.api.routes import health
from rice_supply.api.routes.records import build_record_router
from rice_supply.config import get_settings
from rice_supply.core.entity_schemas import (
    CHAIN_ACTOR,
    CHAIN_TRANSACTION,
    MILLED_RICE,
    PRODUCTION_SEASON,
    RICE_BATCH,
)
from rice_supply.infrastructure.observability import setup_logging
from rice_supply.services.app_state import build_app_state, build_chain_client

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    state = build_app_state(settings, build_chain_client(settings))
    app.state.supply_chain = state
    await state.start()
    logger.info(
        f"Rice Supply API started ({settings.environment}) on port {settings.port}",
    )
    yield
    logger.info("Rice Supply API shutting down")
    await state.stop()


app = FastAPI(title="Rice Supply API", version="1.0.0", lifespan=lifespan)

settings = get_settings()
register_middleware(app, settings.max_body_bytes)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)

# Routes — explicit registration
app.include_router(health.router)
app.include_router(build_record_router(CHAIN_ACTOR))
app.include_router(build_record_router(PRODUCTION_SEASON))
app.include_router(build_record_router(MILLED_RICE))
app.include_router(build_record_router(RICE_BATCH))
app.include_router(build_record_router(CHAIN_TRANSACTION))

register_error_handlers(app)
