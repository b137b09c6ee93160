"""Structured logging for the document versions service.

structlog renders application events; the stdlib `dictConfig` below routes
them, together with uvicorn, SQLAlchemy and Google client records, to stdout.
"""

import logging
import logging.config
import time

import structlog

from docversions.core.config import settings

HEALTH_CHECK_PATHS = (
    f"{settings.API_PREFIX}/health",
    f"{settings.API_PREFIX}/status",
)

# Third-party loggers and the level they run at
LIBRARY_LOG_LEVELS = {
    "uvicorn.error": "INFO",
    "sqlalchemy.engine": "INFO" if settings.DB_ECHO else "WARNING",
    "google": "WARNING",
    "urllib3": "WARNING",
}


def _renderer():
    if settings.LOG_FORMAT == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=settings.is_development)


def _formatter() -> dict:
    if settings.LOG_FORMAT == "json":
        return {
            "()": "pythonjsonlogger.json.JsonFormatter",
            "fmt": "%(asctime)s %(name)s %(levelname)s %(message)s",
            "rename_fields": {"levelname": "level", "asctime": "time"},
        }
    return {"format": "%(asctime)s | %(levelname)-7s | %(name)s | %(message)s"}


def configure_logging() -> None:
    """Wire structlog and stdlib logging from LOG_LEVEL / LOG_FORMAT."""
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.format_exc_info,
            _renderer(),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    stream_handler = {"class": "logging.StreamHandler", "stream": "ext://sys.stdout"}
    loggers = {
        name: {"level": level, "handlers": ["console"], "propagate": False}
        for name, level in LIBRARY_LOG_LEVELS.items()
    }
    loggers["uvicorn.access"] = {
        "level": "INFO",
        "handlers": ["access"],
        "propagate": False,
    }

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "filters": {"skip_health": {"()": HealthCheckFilter}},
            "formatters": {"plain": _formatter()},
            "handlers": {
                "console": {**stream_handler, "formatter": "plain"},
                "access": {
                    **stream_handler,
                    "formatter": "plain",
                    "filters": ["skip_health"],
                },
            },
            "root": {"level": settings.LOG_LEVEL, "handlers": ["console"]},
            "loggers": loggers,
        }
    )


class HealthCheckFilter(logging.Filter):
    """Drop uvicorn access lines for liveness and status probes."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        return not any(path in message for path in HEALTH_CHECK_PATHS)


class RequestLoggingMiddleware:
    """ASGI middleware logging one line per request with its duration.

    The first path segment after the API prefix (normally the document id)
    is bound to the request's log context.
    """

    def __init__(self, app):
        self.app = app
        self.logger = structlog.get_logger("request")

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http" or scope["path"] in HEALTH_CHECK_PATHS:
            await self.app(scope, receive, send)
            return

        path = scope["path"]
        segments = path[len(settings.API_PREFIX):].strip("/").split("/")
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            method=scope["method"],
            path=path,
            document_id=segments[0] if segments and segments[0] else None,
        )

        started = time.perf_counter()
        status_code = None

        async def send_wrapper(message):
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message["status"]
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        finally:
            self.logger.info(
                "Request handled",
                status_code=status_code,
                duration=round(time.perf_counter() - started, 4),
            )
            structlog.contextvars.clear_contextvars()


def setup_request_logging(app):
    """Install request logging when DEBUG is on."""
    if settings.DEBUG:
        app.add_middleware(RequestLoggingMiddleware)


def get_logger(name: str) -> structlog.BoundLogger:
    return structlog.get_logger(name)


def get_api_logger() -> structlog.BoundLogger:
    return get_logger("api")


def get_db_logger() -> structlog.BoundLogger:
    return get_logger("database")


def get_service_logger(service_name: str) -> structlog.BoundLogger:
    """Logger named `service.<name>`."""
    return get_logger(f"service.{service_name}")
