"""Entry-point for the event telemetry gateway ASGI app.

This module constructs the FastAPI instance, wires global middleware and
error handling, registers the route groups, and exposes the `app` variable
that uvicorn (``gateway.main:app``) serves.
"""

from __future__ import annotations

import os
import logging
import traceback
from time import perf_counter
from typing import Callable, Awaitable

from fastapi import FastAPI, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from slowapi import Limiter
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address

from gateway import APP_ENV
from gateway.utils.errors import GatewayError
from gateway.utils.logger import configure_logging, logger, request_id_ctx
from gateway.settings import ALLOWED_ORIGINS, RATE_LIMIT

# Rate limiter (IP-based by default)
limiter = Limiter(key_func=get_remote_address, default_limits=[RATE_LIMIT])


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Bind the request id for every log line emitted while handling a request."""

    async def dispatch(self, request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:  # type: ignore[override]
        start = perf_counter()
        request_id = request.headers.get("X-Request-Id", os.urandom(4).hex())
        token = request_id_ctx.set(request_id)
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
        try:
            response = await call_next(request)
            status_code = response.status_code
        finally:
            duration_ms = (perf_counter() - start) * 1000
            logger.info(
                "request.complete",
                extra={
                    "path": request.url.path,
                    "method": request.method,
                    "status_code": status_code,
                    "duration_ms": round(duration_ms, 2),
                    "request_id": request_id,
                },
            )
            request_id_ctx.reset(token)
        response.headers["X-Request-Id"] = request_id
        return response


def _error_response(status_code: int, message: str) -> JSONResponse:
    logger.info("request.error", extra={"status_code": status_code, "error": message})
    return JSONResponse(status_code=status_code, content={"error": message})


def create_app() -> FastAPI:
    configure_logging()

    app = FastAPI(
        title="Event Telemetry Gateway",
        version="0.1.0",
        docs_url="/docs" if APP_ENV != "production" else None,
        redoc_url=None,
        openapi_url="/openapi.json" if APP_ENV != "production" else None,
    )

    # Global middleware
    app.add_middleware(RequestContextMiddleware)
    # Rate limiting middleware (SlowAPI expects limiter via app.state)
    app.state.limiter = limiter
    app.add_middleware(SlowAPIMiddleware)

    # Register default handler for 429 responses from SlowAPI
    from slowapi.errors import RateLimitExceeded  # noqa: WPS433  (runtime import)
    from slowapi import _rate_limit_exceeded_handler

    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    # Every domain error renders as {"error": "..."} with its own status code
    @app.exception_handler(GatewayError)
    async def gateway_error(_: Request, exc: GatewayError) -> JSONResponse:
        return _error_response(exc.status_code, exc.message)

    # Malformed bodies (not JSON, wrong shape) use the same envelope
    @app.exception_handler(RequestValidationError)
    async def request_validation_error(_: Request, exc: RequestValidationError) -> JSONResponse:
        first = exc.errors()[0] if exc.errors() else {}
        location = ".".join(str(part) for part in first.get("loc", ()))
        message = f"invalid request {location}: {first.get('msg', 'validation failed')}"
        return _error_response(status.HTTP_400_BAD_REQUEST, message)

    # Global exception handler - logs full tracebacks for any unhandled 500s
    @app.exception_handler(Exception)
    async def log_unhandled_exceptions(request: Request, exc: Exception):
        """Log full traceback for any unhandled exception that would become a 500."""
        error_logger = logging.getLogger("uvicorn.error")
        error_logger.error(
            "UNHANDLED %s at %s %s\n%s",
            type(exc).__name__,
            request.method,
            request.url.path,
            "".join(traceback.format_tb(exc.__traceback__))
        )
        # Re-raise so FastAPI still returns the appropriate status code
        raise exc

    if ALLOWED_ORIGINS:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=ALLOWED_ORIGINS,
            allow_methods=["GET", "POST", "OPTIONS"],
            allow_headers=["Content-Type", "X-Request-Id"],
            max_age=600,
        )

    # Routers imported here so importing this module stays cheap for tooling
    from gateway.routers import events_routes, health_routes
    app.include_router(health_routes.router)
    app.include_router(events_routes.router)

    return app

# The object uvicorn imports
app = create_app()
