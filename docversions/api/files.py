"""
File endpoints for version attachments.

Objects are keyed `{documentId}/{timestamp}/{fileType}/{fileName}`, with
`fileType` and `fileName` taken from the query string for upload and
download. Accepted upload types are PDF and JPEG, up to MAX_UPLOAD_SIZE.
"""

import io
from typing import Any, Dict
from urllib.parse import quote

from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import StreamingResponse

from docversions.core.exceptions import PayloadTooLargeError
from docversions.core.gcs_client import GCSClientError, GCSObjectNotFoundError
from docversions.services.base_service import DocumentValidationError
from docversions.services.file_service import FileService
from .common import (
    get_file_service,
    handle_not_found_error,
    handle_store_error,
    handle_validation_error,
    log_operation_start,
    log_operation_success,
)

router = APIRouter(tags=["Files"])


def _too_large(limit: int) -> PayloadTooLargeError:
    return PayloadTooLargeError(f"File exceeds maximum size of {limit} bytes", max_size=limit)


async def _read_limited_body(request: Request, limit: int) -> bytes:
    """Buffer the request body, stopping once it passes `limit` bytes."""
    buffer = bytearray()
    async for chunk in request.stream():
        buffer.extend(chunk)
        if len(buffer) > limit:
            raise _too_large(limit)
    return bytes(buffer)


def content_disposition(file_name: str) -> str:
    """Attachment header with an ASCII fallback name and the RFC 5987 UTF-8 form."""
    fallback = "".join(ch if " " <= ch < "\x7f" else "_" for ch in file_name)
    fallback = fallback.replace("\\", "\\\\").replace('"', '\\"')
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(file_name, safe='')}"


@router.post(
    "/{document_id}/versions/{timestamp}/upload",
    status_code=status.HTTP_201_CREATED,
    summary="Upload a version file",
    description="""Upload the raw request body.

**Content-Type:** `application/pdf` or `image/jpeg`

**Query Parameters:**
- `fileType`: key segment grouping files (e.g. `pdf`, `images`)
- `fileName`: object name""",
)
async def upload_file(
    document_id: str,
    timestamp: str,
    request: Request,
    file_type: str = Query(..., alias="fileType"),
    file_name: str = Query(..., alias="fileName"),
    service: FileService = Depends(get_file_service),
) -> Dict[str, Any]:
    context = {
        "document_id": document_id,
        "timestamp": timestamp,
        "file_type": file_type,
        "file_name": file_name,
    }

    declared_length = request.headers.get("content-length")
    if declared_length and declared_length.isdigit():
        if int(declared_length) > service.max_upload_size:
            raise _too_large(service.max_upload_size)

    try:
        log_operation_start("File upload", **context)
        content = await _read_limited_body(request, service.max_upload_size)
        result = await service.upload_file(
            document_id,
            timestamp,
            file_type,
            file_name,
            content,
            request.headers.get("content-type"),
        )
        log_operation_success("File upload", key=result["key"], size=result["size"])
        return {"success": True, "message": "File uploaded successfully", **result}
    except DocumentValidationError as e:
        raise handle_validation_error(e, "file upload", **context)
    except GCSClientError as e:
        raise handle_store_error(e, "file upload", **context)


@router.get(
    "/{document_id}/versions/{timestamp}/download",
    summary="Download a version file",
    response_class=StreamingResponse,
)
async def download_file(
    document_id: str,
    timestamp: str,
    file_type: str = Query(..., alias="fileType"),
    file_name: str = Query(..., alias="fileName"),
    service: FileService = Depends(get_file_service),
):
    context = {
        "document_id": document_id,
        "timestamp": timestamp,
        "file_type": file_type,
        "file_name": file_name,
    }
    try:
        content, content_type = await service.download_file(
            document_id, timestamp, file_type, file_name
        )
    except DocumentValidationError as e:
        raise handle_validation_error(e, "file download", **context)
    except GCSObjectNotFoundError:
        raise handle_not_found_error(
            Exception("File not found"), "file download", **context
        )
    except GCSClientError as e:
        raise handle_store_error(e, "file download", **context)

    log_operation_success("File download", size=len(content), **context)
    return StreamingResponse(
        io.BytesIO(content),
        media_type=content_type,
        headers={
            "Content-Disposition": content_disposition(file_name),
            "Content-Length": str(len(content)),
        },
    )


@router.get(
    "/{document_id}/versions/{timestamp}/files/{file_type}",
    summary="List version files of one type",
)
async def list_files(
    document_id: str,
    timestamp: str,
    file_type: str,
    service: FileService = Depends(get_file_service),
) -> Dict[str, Any]:
    try:
        files = await service.list_files(document_id, timestamp, file_type)
        return {"success": True, "files": files}
    except DocumentValidationError as e:
        raise handle_validation_error(e, "file listing", document_id=document_id)
    except GCSClientError as e:
        raise handle_store_error(e, "file listing", document_id=document_id)


@router.get(
    "/{document_id}/versions/{timestamp}/images",
    summary="List version images with public URLs",
)
async def list_images(
    document_id: str,
    timestamp: str,
    service: FileService = Depends(get_file_service),
) -> Dict[str, Any]:
    try:
        images = await service.list_images(document_id, timestamp)
        return {"success": True, "images": images}
    except DocumentValidationError as e:
        raise handle_validation_error(e, "image listing", document_id=document_id)
    except GCSClientError as e:
        raise handle_store_error(e, "image listing", document_id=document_id)
