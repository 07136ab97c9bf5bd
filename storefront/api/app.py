"""
FastAPI application factory.

``create_app`` takes a wired ``Backend`` (or builds one from settings),
mounts the storefront router under the configured path prefix, and renders
every failure as ``{"success": false, "error": ...}``.
"""

import logging
import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from storefront.api.routes import router
from storefront.container import Backend, build_backend
from storefront.errors import StorefrontError
from storefront.logging_context import REQUEST_ID_HEADER, request_scope
from storefront.utils import utc_now_iso

logger = logging.getLogger(__name__)

OPENAPI_TAGS = [
    {"name": "System", "description": "Liveness endpoint."},
    {"name": "Auth", "description": "Account signup and sign-in."},
    {"name": "Cart", "description": "Per-user cart stored as one versioned document."},
    {"name": "Bookings", "description": "Bookings created at checkout."},
    {"name": "Catalog", "description": "Read-only service catalog."},
]


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Assigns a request id and logs method, path, status and duration."""

    async def dispatch(self, request: Request, call_next):
        with request_scope(request.headers.get(REQUEST_ID_HEADER)) as request_id:
            request.state.request_id = request_id
            start = time.perf_counter()
            try:
                response = await call_next(request)
            except Exception:
                duration_ms = (time.perf_counter() - start) * 1000
                logger.exception("%s %s -> 500 (%.2f ms)", request.method, request.url.path, duration_ms)
                raise

            duration_ms = (time.perf_counter() - start) * 1000
            response.headers[REQUEST_ID_HEADER] = request_id
            logger.info(
                "%s %s -> %d (%.2f ms)",
                request.method, request.url.path, response.status_code, duration_ms,
            )
            return response


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": message})


async def _storefront_error(request: Request, exc: StorefrontError) -> JSONResponse:
    logger.info("%s %s failed: %s", request.method, request.url.path, exc.message)
    return _error(exc.status_code, exc.message)


async def _validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    first = exc.errors()[0] if exc.errors() else {}
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Invalid request")
    return _error(400, f"{location}: {message}" if location else message)


async def _unhandled_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return _error(500, "Internal server error")


def create_app(backend: Optional[Backend] = None) -> FastAPI:
    backend = backend or build_backend()
    config = backend.config

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        await backend.close()

    app = FastAPI(title="Adventure Storefront API", openapi_tags=OPENAPI_TAGS, lifespan=lifespan)
    app.state.backend = backend

    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(config.api.cors_origins),
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "If-Match", "X-Request-Id"],
    )

    app.add_exception_handler(StorefrontError, _storefront_error)
    app.add_exception_handler(RequestValidationError, _validation_error)
    app.add_exception_handler(Exception, _unhandled_error)

    prefix = config.api.path_prefix

    @app.get(f"{prefix}/health", tags=["System"])
    async def health():
        return {"status": "healthy", "timestamp": utc_now_iso()}

    app.include_router(router, prefix=prefix)
    return app
