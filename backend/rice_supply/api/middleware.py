"""HTTP Middleware — body size cap, hardening headers, request logging.

Invariants:
    - A declared Content-Length above max_body_bytes → 413 before routing
    - A body streamed without a usable Content-Length (chunked) → 413 as soon
      as the received bytes pass max_body_bytes
    - Every response carries the hardening headers, error responses included
    - One log line per request with method, path, status and duration

Design Decisions:
    - Body cap is a pure ASGI class: it has to wrap `receive` to count
      streamed bytes, which the Request/Response pair of function middleware
      does not expose
    - Headers and logging stay function middleware (@app.middleware("http"))
    - Registration order is body cap → headers → logging, so the cap sits
      innermost (its 413s still get headers) and logging times the whole stack
"""

import logging
import time

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from rice_supply.core.responses import format_error

logger = logging.getLogger(__name__)

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "Referrer-Policy": "no-referrer",
    "Cross-Origin-Resource-Policy": "same-origin",
    "Strict-Transport-Security": "max-age=15552000; includeSubDomains",
    "X-DNS-Prefetch-Control": "off",
}

BODY_TOO_LARGE = "Request body too large"


class BodySizeLimitMiddleware:
    """Reject request bodies larger than `max_body_bytes`.

    A declared Content-Length is checked up front. Streamed bodies are
    counted chunk by chunk; crossing the cap raises HTTPException(413) from
    `receive`, which the route's body parsing re-raises to the HTTP error
    handler.
    """

    def __init__(self, app: ASGIApp, max_body_bytes: int):
        self.app = app
        self.max_body_bytes = max_body_bytes

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request = Request(scope)
        declared = request.headers.get("content-length")
        if declared is not None:
            try:
                too_large = int(declared) > self.max_body_bytes
            except ValueError:
                response = JSONResponse(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    content=format_error("Invalid Content-Length header"),
                )
                await response(scope, receive, send)
                return
            if too_large:
                self._log_rejection(request, f"{declared}-byte")
                response = JSONResponse(
                    status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                    content=format_error(BODY_TOO_LARGE),
                )
                await response(scope, receive, send)
                return

        received = 0

        async def limited_receive() -> Message:
            nonlocal received
            message = await receive()
            if message["type"] == "http.request":
                received += len(message.get("body", b""))
                if received > self.max_body_bytes:
                    self._log_rejection(request, "streamed")
                    raise HTTPException(
                        status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                        detail=BODY_TOO_LARGE,
                    )
            return message

        await self.app(scope, limited_receive, send)

    @staticmethod
    def _log_rejection(request: Request, size: str) -> None:
        logger.warning(
            f"Rejected {size} body on {request.url.path}",
            extra={"path": request.url.path, "method": request.method},
        )


def register_middleware(app: FastAPI, max_body_bytes: int) -> None:
    """Attach the HTTP middleware stack to the app."""
    app.add_middleware(BodySizeLimitMiddleware, max_body_bytes=max_body_bytes)

    @app.middleware("http")
    async def security_headers(request: Request, call_next):
        response = await call_next(request)
        for name, value in SECURITY_HEADERS.items():
            response.headers.setdefault(name, value)
        return response

    @app.middleware("http")
    async def request_logging(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        duration_ms = round((time.perf_counter() - start) * 1000, 1)
        logger.info(
            f"{request.method} {request.url.path} {response.status_code}",
            extra={
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "duration_ms": duration_ms,
            },
        )
        return response
