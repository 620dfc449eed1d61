"""Error Handlers — global exception handlers for the rice supply API.

Invariants:
    - RiceSupplyError → its http_status with the error envelope
    - RequestValidationError (malformed JSON, bad params) → 400 envelope
    - Unmatched routes → 404 "Not Found"; other HTTP errors keep their status
    - Exception (catch-all) → 500 "Internal server error", never leaks details
      outside development mode
    - The catch-all response carries the hardening headers itself: it is built
      outside the middleware stack

Design Decisions:
    - Four-layer handler: domain (RiceSupplyError), validation (Pydantic),
      routing (Starlette HTTPException), catch-all (Exception)
    - Development detail (error, stack) read from AppState so tests can flip it
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from rice_supply.api.middleware import SECURITY_HEADERS
from rice_supply.config import get_settings
from rice_supply.core.errors import RiceSupplyError
from rice_supply.core.responses import format_error

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_domain_error_handler(app)
    _register_validation_error_handler(app)
    _register_http_error_handler(app)
    _register_generic_error_handler(app)


def _development(request: Request) -> bool:
    state = getattr(request.app.state, "supply_chain", None)
    if state is not None:
        return state.development
    return get_settings().is_development


def _register_domain_error_handler(app: FastAPI) -> None:

    @app.exception_handler(RiceSupplyError)
    async def domain_error_handler(request: Request, exc: RiceSupplyError):
        """Handle all domain/infrastructure errors."""
        log = logger.error if exc.http_status >= 500 else logger.warning
        log(
            f"{type(exc).__name__}: {exc.message}",
            extra={**exc.log_extra(), "path": request.url.path},
        )
        return JSONResponse(
            status_code=exc.http_status,
            content=format_error(exc.message, exc, _development(request)),
        )


def _register_validation_error_handler(app: FastAPI) -> None:

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        """Handle Pydantic request parsing errors (bodies that are not JSON)."""
        logger.warning(
            f"Validation error on {request.url.path}: {exc.errors()}",
            extra={"path": request.url.path},
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=format_error(
                "Invalid request data", exc, _development(request),
            ),
        )


def _register_http_error_handler(app: FastAPI) -> None:

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(
        request: Request, exc: StarletteHTTPException,
    ):
        """Routing errors: unknown paths and unsupported methods."""
        if exc.status_code == status.HTTP_404_NOT_FOUND:
            message = "Not Found"
        else:
            message = str(exc.detail)
        return JSONResponse(
            status_code=exc.status_code,
            content=format_error(message),
            headers=getattr(exc, "headers", None),
        )


def _register_generic_error_handler(app: FastAPI) -> None:

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all — never leaks internal details in production."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
            extra={"path": request.url.path},
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=format_error(
                "Internal server error", exc, _development(request),
            ),
            headers=SECURITY_HEADERS,
        )
