"""Service endpoints: hello, liveness and store status."""

from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter

from docversions.core.config import settings
from docversions.core.logging import get_logger
from docversions.core.gcs_client import get_gcs_client
from docversions.services.document_table import document_table

logger = get_logger(__name__)

router = APIRouter(tags=["Health"])


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def hello_world() -> str:
    logger.info("Hello World")
    return "Hello World"


@router.get("/hello")
async def hello() -> Dict[str, Any]:
    """Greeting endpoint."""
    return {"success": True, "message": hello_world(), "timestamp": _now_iso()}


@router.get("/health")
async def health_check() -> Dict[str, Any]:
    """
    Liveness probe.

    Never touches either store, so it reports healthy even while they
    are unavailable.
    """
    return {"status": "healthy", "timestamp": _now_iso()}


@router.get("/status")
async def detailed_status() -> Dict[str, Any]:
    """Probe the key-value store and the object store."""
    kv_ok = await document_table.ping()
    storage_ok = await get_gcs_client().health_check_async()

    if not (kv_ok and storage_ok):
        logger.warning(
            "Degraded status", key_value_store=kv_ok, object_store=storage_ok
        )

    return {
        "status": "healthy" if kv_ok and storage_ok else "degraded",
        "version": settings.VERSION,
        "environment": settings.ENVIRONMENT,
        "services": {
            "key_value_store": {
                "status": "connected" if kv_ok else "unavailable",
                "table": settings.DOCUMENTS_TABLE,
            },
            "object_store": {
                "status": "connected" if storage_ok else "unavailable",
                "bucket": settings.GCS_BUCKET_NAME,
            },
        },
        "timestamp": _now_iso(),
    }
