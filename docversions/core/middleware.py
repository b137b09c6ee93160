"""HTTP middleware: CORS and the X-Process-Time response header."""

import time

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from docversions.core.config import settings
from docversions.core.logging import get_logger

logger = get_logger(__name__)


def setup_cors_middleware(app: FastAPI) -> None:
    # Browsers call the API from any origin unless CORS_ORIGINS narrows it
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=settings.CORS_CREDENTIALS,
        allow_methods=settings.CORS_METHODS,
        allow_headers=settings.CORS_HEADERS,
    )
    logger.info("CORS enabled", origins=settings.CORS_ORIGINS, methods=settings.CORS_METHODS)


def setup_timing_middleware(app: FastAPI) -> None:
    @app.middleware("http")
    async def add_process_time_header(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        response.headers["X-Process-Time"] = f"{time.perf_counter() - started:.4f}"
        return response


def setup_all_middleware(app: FastAPI) -> None:
    """Install middleware; CORS is added first so preflight requests are answered."""
    setup_cors_middleware(app)
    setup_timing_middleware(app)
