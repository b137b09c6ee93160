"""
Document endpoints: raw create/replace, scan and lookup by id.
"""

from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, status

from docversions.core.exceptions import DatabaseError
from docversions.services.base_service import DocumentNotFoundError, DocumentValidationError
from docversions.services.document_service import DocumentService
from .common import (
    get_document_service,
    handle_store_error,
    handle_validation_error,
    log_operation_start,
    log_operation_success,
    soft_not_found,
)

router = APIRouter(tags=["Documents"])


@router.post(
    "/documents",
    status_code=status.HTTP_201_CREATED,
    summary="Create or replace a document",
    description="""Store the raw JSON body as the document item.

The body must be an object with a non-empty `documentId`; an existing item
with the same id is replaced wholesale.""",
)
async def create_document(
    body: Any = Body(...),
    service: DocumentService = Depends(get_document_service),
) -> Dict[str, Any]:
    try:
        log_operation_start("Document creation")
        document = await service.create_document(body)
        log_operation_success("Document creation", document_id=document["documentId"])
        return {
            "success": True,
            "message": "Document created successfully",
            "document": document,
        }
    except DocumentValidationError as e:
        raise handle_validation_error(e, "document creation")
    except DatabaseError as e:
        raise handle_store_error(e, "document creation")


@router.get("/documents", summary="List all documents")
async def list_documents(
    service: DocumentService = Depends(get_document_service),
) -> Dict[str, Any]:
    try:
        documents = await service.list_documents()
        return {"success": True, "documents": documents, "count": len(documents)}
    except DatabaseError as e:
        raise handle_store_error(e, "document scan")


@router.get("/documents/{document_id}", summary="Get a document")
async def get_document(
    document_id: str,
    service: DocumentService = Depends(get_document_service),
) -> Dict[str, Any]:
    try:
        document = await service.get_document(document_id)
        return {"success": True, "document": document}
    except DocumentNotFoundError as e:
        return soft_not_found(str(e), "document lookup", document_id=document_id)
    except DatabaseError as e:
        raise handle_store_error(e, "document lookup", document_id=document_id)
