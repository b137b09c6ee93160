"""
Node endpoints: list, fetch, create and per-field updates.

Each update route writes only the fields in its body; the other geometry
fields of the node are left as stored.
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends, status

from docversions.core.exceptions import DatabaseError
from docversions.models.schemas import (
    NodeCreate,
    NodeHeight,
    NodePosition,
    NodeRotation,
    NodeUpdate,
    NodeWidth,
    NodeX,
    NodeY,
)
from docversions.services.base_service import (
    DocumentNotFoundError,
    DocumentValidationError,
    NodeNotFoundError,
    VersionNotFoundError,
)
from docversions.services.document_service import DocumentService
from .common import (
    get_document_service,
    handle_not_found_error,
    handle_store_error,
    handle_validation_error,
    log_operation_success,
)

router = APIRouter(tags=["Nodes"])

NODE_PATH = "/{document_id}/versions/{timestamp}/nodes/{node_id}"

MISSING = (DocumentNotFoundError, VersionNotFoundError, NodeNotFoundError)


async def _update_node_fields(
    service: DocumentService,
    document_id: str,
    timestamp: str,
    node_id: str,
    fields: Dict[str, int],
    label: str,
) -> Dict[str, Any]:
    context = {"document_id": document_id, "timestamp": timestamp, "node_id": node_id}
    try:
        node = await service.update_node(document_id, timestamp, node_id, fields)
        log_operation_success(f"Node {label} update", **context)
        return {
            "success": True,
            "message": f"Node {label} updated successfully",
            "nodeId": node_id,
            **fields,
            "node": node,
        }
    except MISSING as e:
        raise handle_not_found_error(e, f"node {label} update", **context)
    except DocumentValidationError as e:
        raise handle_validation_error(e, f"node {label} update", **context)
    except DatabaseError as e:
        raise handle_store_error(e, f"node {label} update", **context)


@router.get("/{document_id}/versions/{timestamp}/nodes", summary="List nodes")
async def list_nodes(
    document_id: str,
    timestamp: str,
    service: DocumentService = Depends(get_document_service),
) -> Dict[str, Any]:
    try:
        nodes = await service.list_nodes(document_id, timestamp)
        return {"success": True, "nodes": nodes}
    except MISSING as e:
        raise handle_not_found_error(
            e, "node listing", document_id=document_id, timestamp=timestamp
        )
    except DatabaseError as e:
        raise handle_store_error(e, "node listing", document_id=document_id)


@router.get(NODE_PATH, summary="Get a node")
async def get_node(
    document_id: str,
    timestamp: str,
    node_id: str,
    service: DocumentService = Depends(get_document_service),
) -> Dict[str, Any]:
    try:
        node = await service.get_node(document_id, timestamp, node_id)
        return {"success": True, "nodeId": node_id, "node": node}
    except MISSING as e:
        raise handle_not_found_error(
            e, "node lookup", document_id=document_id, node_id=node_id
        )
    except DatabaseError as e:
        raise handle_store_error(e, "node lookup", document_id=document_id)


@router.post(
    NODE_PATH + "/create",
    status_code=status.HTTP_201_CREATED,
    summary="Create a node",
    description="`x` and `y` are required integers; `rotation`, `width` and `height` are optional integers.",
)
async def create_node(
    document_id: str,
    timestamp: str,
    node_id: str,
    request: NodeCreate,
    service: DocumentService = Depends(get_document_service),
) -> Dict[str, Any]:
    context = {"document_id": document_id, "timestamp": timestamp, "node_id": node_id}
    try:
        node = await service.create_node(document_id, timestamp, node_id, request)
        log_operation_success("Node creation", **context)
        return {
            "success": True,
            "message": "Node created successfully",
            "nodeId": node_id,
            "node": node,
        }
    except MISSING as e:
        raise handle_not_found_error(e, "node creation", **context)
    except DatabaseError as e:
        raise handle_store_error(e, "node creation", **context)


@router.post(NODE_PATH, summary="Update any node fields")
async def update_node(
    document_id: str,
    timestamp: str,
    node_id: str,
    request: NodeUpdate,
    service: DocumentService = Depends(get_document_service),
) -> Dict[str, Any]:
    return await _update_node_fields(
        service,
        document_id,
        timestamp,
        node_id,
        request.model_dump(exclude_none=True),
        "fields",
    )


@router.post(NODE_PATH + "/xy", summary="Move a node")
async def update_node_position(
    document_id: str,
    timestamp: str,
    node_id: str,
    request: NodePosition,
    service: DocumentService = Depends(get_document_service),
) -> Dict[str, Any]:
    return await _update_node_fields(
        service, document_id, timestamp, node_id, request.model_dump(), "position"
    )


@router.post(NODE_PATH + "/x", summary="Set a node's x")
async def update_node_x(
    document_id: str,
    timestamp: str,
    node_id: str,
    request: NodeX,
    service: DocumentService = Depends(get_document_service),
) -> Dict[str, Any]:
    return await _update_node_fields(
        service, document_id, timestamp, node_id, request.model_dump(), "x"
    )


@router.post(NODE_PATH + "/y", summary="Set a node's y")
async def update_node_y(
    document_id: str,
    timestamp: str,
    node_id: str,
    request: NodeY,
    service: DocumentService = Depends(get_document_service),
) -> Dict[str, Any]:
    return await _update_node_fields(
        service, document_id, timestamp, node_id, request.model_dump(), "y"
    )


@router.post(NODE_PATH + "/rotation", summary="Set a node's rotation")
async def update_node_rotation(
    document_id: str,
    timestamp: str,
    node_id: str,
    request: NodeRotation,
    service: DocumentService = Depends(get_document_service),
) -> Dict[str, Any]:
    return await _update_node_fields(
        service, document_id, timestamp, node_id, request.model_dump(), "rotation"
    )


@router.post(NODE_PATH + "/width", summary="Set a node's width")
async def update_node_width(
    document_id: str,
    timestamp: str,
    node_id: str,
    request: NodeWidth,
    service: DocumentService = Depends(get_document_service),
) -> Dict[str, Any]:
    return await _update_node_fields(
        service, document_id, timestamp, node_id, request.model_dump(), "width"
    )


@router.post(NODE_PATH + "/height", summary="Set a node's height")
async def update_node_height(
    document_id: str,
    timestamp: str,
    node_id: str,
    request: NodeHeight,
    service: DocumentService = Depends(get_document_service),
) -> Dict[str, Any]:
    return await _update_node_fields(
        service, document_id, timestamp, node_id, request.model_dump(), "height"
    )
