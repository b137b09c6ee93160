"""FastAPI Application Entry Point.

Document versioning service built with FastAPI, featuring:
- Documents with write-once user nicknames
- Timestamped versions holding positioned nodes
- Version file storage (Google Cloud Storage)
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from docversions.core.config import settings
from docversions.core.logging import configure_logging, setup_request_logging, get_logger
from docversions.core.exceptions import (
    UNKNOWN_ENDPOINT_MESSAGE,
    setup_exception_handlers,
)
from docversions.core.db_client import db
from docversions.core.middleware import setup_all_middleware

configure_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan management."""
    logger.info(
        "Starting application",
        project_name=settings.PROJECT_NAME,
        version=settings.VERSION,
        environment=settings.ENVIRONMENT,
        table=settings.DOCUMENTS_TABLE,
        bucket=settings.GCS_BUCKET_NAME,
    )

    if settings.is_development:
        try:
            await db.create_tables()
        except Exception as e:
            logger.error("Failed to create tables", error=str(e))

    yield

    logger.info("Shutting down application")
    try:
        await db.close_all()
    except Exception as e:
        logger.error("Error closing database", error=str(e))


API_DESCRIPTION = """# Document Versions API

Documents carry a map of write-once user nicknames and a map of versions
keyed by Unix timestamp. Each version holds title/author metadata and a map of
positioned nodes. PDF and JPEG files can be attached per version.

Every write reads the whole document, changes one nested field and writes
the whole document back. Concurrent writers to the same document can lose
each other's changes.
"""

app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    description=API_DESCRIPTION,
    openapi_url="/openapi.json" if settings.DEBUG else None,
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url=None,
    lifespan=lifespan,
)

setup_all_middleware(app)
setup_exception_handlers(app)
setup_request_logging(app)

from docversions.api.health import router as health_router
from docversions.api.documents import router as documents_router
from docversions.api.users import router as users_router
from docversions.api.versions import router as versions_router
from docversions.api.nodes import router as nodes_router
from docversions.api.files import router as files_router

# Order matters: fixed paths must come before /{document_id}
app.include_router(health_router, prefix=settings.API_PREFIX)
app.include_router(documents_router, prefix=settings.API_PREFIX)
app.include_router(users_router, prefix=settings.API_PREFIX)
app.include_router(nodes_router, prefix=settings.API_PREFIX)
app.include_router(files_router, prefix=settings.API_PREFIX)
app.include_router(versions_router, prefix=settings.API_PREFIX)


@app.get("/{full_path:path}", include_in_schema=False)
async def unknown_endpoint(full_path: str) -> JSONResponse:
    """Catch-all for unmatched GET requests."""
    return JSONResponse(
        status_code=404,
        content={
            "success": False,
            "error": "Not Found",
            "message": UNKNOWN_ENDPOINT_MESSAGE,
        },
    )


def run() -> None:
    import uvicorn

    uvicorn.run(
        "docversions.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower(),
        access_log=True,
    )


if __name__ == "__main__":
    run()
