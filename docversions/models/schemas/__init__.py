"""Pydantic request schemas."""

from .requests import (
    NODE_FIELDS,
    NicknameRequest,
    VersionCreate,
    NodeCreate,
    NodeUpdate,
    NodePosition,
    NodeX,
    NodeY,
    NodeRotation,
    NodeWidth,
    NodeHeight,
)

__all__ = [
    "NODE_FIELDS",
    "NicknameRequest",
    "VersionCreate",
    "NodeCreate",
    "NodeUpdate",
    "NodePosition",
    "NodeX",
    "NodeY",
    "NodeRotation",
    "NodeWidth",
    "NodeHeight",
]
