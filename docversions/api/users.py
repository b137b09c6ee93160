"""
Nickname endpoints and the per-version user activity view.
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends, status

from docversions.core.exceptions import DatabaseError
from docversions.models.schemas import NicknameRequest
from docversions.services.base_service import (
    DocumentNotFoundError,
    NicknameAlreadySetError,
    NicknameNotFoundError,
    VersionNotFoundError,
)
from docversions.services.document_service import DocumentService
from .common import (
    get_document_service,
    handle_not_found_error,
    handle_store_error,
    handle_validation_error,
    log_operation_success,
    soft_not_found,
)

router = APIRouter(tags=["Users"])


@router.get("/{document_id}/users/{user_id}", summary="Get a user's nickname")
async def get_nickname(
    document_id: str,
    user_id: str,
    service: DocumentService = Depends(get_document_service),
) -> Dict[str, Any]:
    try:
        nickname = await service.get_nickname(document_id, user_id)
        return {"success": True, "userId": user_id, "nickname": nickname}
    except NicknameNotFoundError as e:
        return soft_not_found(
            str(e), "nickname lookup", document_id=document_id, user_id=user_id
        )
    except DatabaseError as e:
        raise handle_store_error(e, "nickname lookup", document_id=document_id)


@router.post(
    "/{document_id}/users/{user_id}",
    status_code=status.HTTP_201_CREATED,
    summary="Set a user's nickname (write-once)",
)
async def set_nickname(
    document_id: str,
    user_id: str,
    request: NicknameRequest,
    service: DocumentService = Depends(get_document_service),
) -> Dict[str, Any]:
    try:
        nickname = await service.set_nickname(document_id, user_id, request.nickname)
        log_operation_success("Nickname set", document_id=document_id, user_id=user_id)
        return {
            "success": True,
            "message": "Nickname set successfully",
            "userId": user_id,
            "nickname": nickname,
        }
    except NicknameAlreadySetError as e:
        raise handle_validation_error(
            e, "nickname set", document_id=document_id, user_id=user_id
        )
    except DatabaseError as e:
        raise handle_store_error(e, "nickname set", document_id=document_id)


@router.get(
    "/{document_id}/versions/{timestamp}/users/{user_id}/activity",
    summary="A user's relation to one version",
)
async def get_user_activity(
    document_id: str,
    timestamp: str,
    user_id: str,
    service: DocumentService = Depends(get_document_service),
) -> Dict[str, Any]:
    try:
        activity = await service.get_user_activity(document_id, timestamp, user_id)
        return {"success": True, **activity}
    except (DocumentNotFoundError, VersionNotFoundError) as e:
        raise handle_not_found_error(
            e, "user activity", document_id=document_id, timestamp=timestamp
        )
    except DatabaseError as e:
        raise handle_store_error(e, "user activity", document_id=document_id)
