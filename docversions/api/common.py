"""
Shared dependencies and error helpers for the API routers.
"""

from typing import Any, Dict

from fastapi import HTTPException, status

from docversions.core.logging import get_api_logger
from docversions.services.document_service import DocumentService, document_service
from docversions.services.file_service import FileService, file_service

logger = get_api_logger()


def get_document_service() -> DocumentService:
    return document_service


def get_file_service() -> FileService:
    return file_service


def soft_not_found(message: str, operation: str, **context) -> Dict[str, Any]:
    """200 response carrying `success: false` for routes that do not 404."""
    logger.warning(f"Nothing found for {operation}", reason=message, **context)
    return {"success": False, "message": message}


def handle_not_found_error(e: Exception, operation: str, **context) -> HTTPException:
    """Map a missing document/version/node/file to a 404."""
    logger.warning(f"Not found during {operation}", error=str(e), **context)
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


def handle_validation_error(e: Exception, operation: str, **context) -> HTTPException:
    logger.warning(f"Validation failed for {operation}", error=str(e), **context)
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


def handle_store_error(e: Exception, operation: str, **context) -> HTTPException:
    """Surface a store failure as a 500 carrying the store's message."""
    logger.error(f"Store error during {operation}", error=str(e), **context)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=str(e),
    )


def log_operation_start(operation: str, **context) -> None:
    logger.info(f"{operation} started", **context)


def log_operation_success(operation: str, **context) -> None:
    logger.info(f"{operation} completed successfully", **context)
