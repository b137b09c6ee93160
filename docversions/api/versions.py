"""
Version endpoints: document overview, list, create, fetch, delete, compare.
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends, status

from docversions.core.exceptions import DatabaseError
from docversions.models.schemas import VersionCreate
from docversions.services.base_service import DocumentNotFoundError, VersionNotFoundError
from docversions.services.document_service import DocumentService
from .common import (
    get_document_service,
    handle_not_found_error,
    handle_store_error,
    log_operation_start,
    log_operation_success,
    soft_not_found,
)

router = APIRouter(tags=["Versions"])


@router.get("/{document_id}", summary="Users and versions of a document")
async def get_document_overview(
    document_id: str,
    service: DocumentService = Depends(get_document_service),
) -> Dict[str, Any]:
    try:
        overview = await service.get_document_overview(document_id)
        return {"success": True, "documentId": document_id, **overview}
    except DocumentNotFoundError as e:
        return soft_not_found(str(e), "document overview", document_id=document_id)
    except DatabaseError as e:
        raise handle_store_error(e, "document overview", document_id=document_id)


@router.get("/{document_id}/versions", summary="List versions")
async def list_versions(
    document_id: str,
    service: DocumentService = Depends(get_document_service),
) -> Dict[str, Any]:
    try:
        versions = await service.list_versions(document_id)
        return {"success": True, "versions": versions}
    except DocumentNotFoundError as e:
        raise handle_not_found_error(e, "version listing", document_id=document_id)
    except DatabaseError as e:
        raise handle_store_error(e, "version listing", document_id=document_id)


@router.post(
    "/{document_id}/versions",
    status_code=status.HTTP_201_CREATED,
    summary="Add a version",
    description="""Create a version snapshot.

`title`, `username` and `userid` are required. `description` defaults to an
empty string. When `timestamp` is omitted the server uses the current Unix
time. `nodes` is stored only when supplied.""",
)
async def add_version(
    document_id: str,
    request: VersionCreate,
    service: DocumentService = Depends(get_document_service),
) -> Dict[str, Any]:
    try:
        log_operation_start("Version creation", document_id=document_id)
        timestamp, version = await service.add_version(document_id, request)
        log_operation_success(
            "Version creation", document_id=document_id, timestamp=timestamp
        )
        return {
            "success": True,
            "message": "Version created successfully",
            "timestamp": timestamp,
            "version": version,
        }
    except DatabaseError as e:
        raise handle_store_error(e, "version creation", document_id=document_id)


@router.get(
    "/{document_id}/versions/compare/{timestamp1}/{timestamp2}",
    summary="Compare two versions field by field",
)
async def compare_versions(
    document_id: str,
    timestamp1: str,
    timestamp2: str,
    service: DocumentService = Depends(get_document_service),
) -> Dict[str, Any]:
    try:
        differences = await service.compare_versions(document_id, timestamp1, timestamp2)
        return {
            "success": True,
            "timestamp1": timestamp1,
            "timestamp2": timestamp2,
            "differences": differences,
        }
    except (DocumentNotFoundError, VersionNotFoundError) as e:
        raise handle_not_found_error(
            e,
            "version comparison",
            document_id=document_id,
            timestamp1=timestamp1,
            timestamp2=timestamp2,
        )
    except DatabaseError as e:
        raise handle_store_error(e, "version comparison", document_id=document_id)


@router.get("/{document_id}/versions/{timestamp}", summary="Get a version")
async def get_version(
    document_id: str,
    timestamp: str,
    service: DocumentService = Depends(get_document_service),
) -> Dict[str, Any]:
    try:
        version = await service.get_version(document_id, timestamp)
        return {"success": True, "timestamp": timestamp, "version": version}
    except (DocumentNotFoundError, VersionNotFoundError) as e:
        raise handle_not_found_error(
            e, "version lookup", document_id=document_id, timestamp=timestamp
        )
    except DatabaseError as e:
        raise handle_store_error(e, "version lookup", document_id=document_id)


@router.delete(
    "/{document_id}/versions/{timestamp}",
    summary="Delete a version",
    description="Removes one version. Users, other versions and uploaded files are kept.",
)
async def delete_version(
    document_id: str,
    timestamp: str,
    service: DocumentService = Depends(get_document_service),
) -> Dict[str, Any]:
    try:
        await service.delete_version(document_id, timestamp)
        log_operation_success(
            "Version deletion", document_id=document_id, timestamp=timestamp
        )
        return {
            "success": True,
            "message": "Version deleted successfully",
            "timestamp": timestamp,
        }
    except (DocumentNotFoundError, VersionNotFoundError) as e:
        raise handle_not_found_error(
            e, "version deletion", document_id=document_id, timestamp=timestamp
        )
    except DatabaseError as e:
        raise handle_store_error(e, "version deletion", document_id=document_id)
