"""FastAPI app factory: greeting routes plus JSON request logging."""
from __future__ import annotations

import os
import time
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from uuid import uuid4

from fastapi import FastAPI, Request, Response, status
from fastapi.exception_handlers import http_exception_handler
from starlette.exceptions import HTTPException as StarletteHTTPException

from app import __version__
from app.api import router as api_router
from app.logging_conf import get_logger, setup_logging

# Configure logging before anything else.
setup_logging()
logger = get_logger("app")


@asynccontextmanager
async def _lifespan(_app: FastAPI) -> AsyncIterator[None]:
    logger.info("startup", extra={"event": "startup"})
    yield
    logger.info("shutdown", extra={"event": "shutdown"})


def create_app() -> FastAPI:
    app = FastAPI(
        title="Greeting Dispatcher",
        version=os.getenv("APP_VERSION", __version__),
        lifespan=_lifespan,
        # "/new/" is an unknown path, not a redirect to "/new".
        redirect_slashes=False,
        # Only the greeting routes are served; no docs or schema paths.
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )

    @app.exception_handler(StarletteHTTPException)
    async def method_not_allowed_as_not_found(request: Request, exc: StarletteHTTPException):
        """Answer a wrong method on a known path the same way as an unknown path."""
        if exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
            exc = StarletteHTTPException(status_code=status.HTTP_404_NOT_FOUND)
        return await http_exception_handler(request, exc)

    @app.middleware("http")
    async def request_logger(request: Request, call_next: Callable[[Request], Response]):
        """JSON request logging with correlation id.

        - If the client sends X-Request-ID we propagate it; otherwise we mint one
        - Logs a start and end event with method/path/status/elapsed_ms
        - Attaches X-Request-ID on the response
        """
        request_id = request.headers.get("X-Request-ID", str(uuid4()))
        request.state.request_id = request_id

        start = time.perf_counter()
        logger.info(
            "request.start",
            extra={
                "event": "request_start",
                "method": request.method,
                "path": request.url.path,
                "request_id": request_id,
            },
        )
        try:
            response = await call_next(request)
        except Exception:  # Log and re-raise; the server answers 500
            logger.exception(
                "request.error",
                extra={
                    "event": "request_error",
                    "method": request.method,
                    "path": request.url.path,
                    "request_id": request_id,
                },
            )
            raise
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000.0

        response.headers["X-Request-ID"] = request_id
        logger.info(
            "request.end",
            extra={
                "event": "request_end",
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "elapsed_ms": round(elapsed_ms, 2),
                "request_id": request_id,
            },
        )
        return response

    app.include_router(api_router)

    return app


# ASGI entrypoint for uvicorn: `uvicorn app.main:app --port 8000`
app = create_app()
