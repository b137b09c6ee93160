"""Request body schemas.

Numeric node fields use strict integers: booleans, floats and numeric
strings are rejected with a 400.
"""

from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr, field_validator, model_validator

NODE_FIELDS = ("x", "y", "rotation", "width", "height")


class NicknameRequest(BaseModel):
    """Body for setting a user's nickname."""

    nickname: StrictStr = Field(
        ..., min_length=1, description="Display name, write-once", examples=["ada"]
    )


class VersionCreate(BaseModel):
    """Body for creating a version snapshot."""

    model_config = ConfigDict(extra="ignore")

    title: StrictStr = Field(..., min_length=1, examples=["Initial layout"])
    username: StrictStr = Field(..., min_length=1, examples=["ada"])
    userid: Union[StrictStr, StrictInt] = Field(..., examples=["1"])
    description: StrictStr = Field(default="", description="Defaults to empty")
    timestamp: Optional[Union[StrictStr, StrictInt]] = Field(
        None,
        description="Unix timestamp key; chosen by the server when omitted",
        examples=["1700000000"],
    )
    nodes: Optional[Dict[str, Dict[str, Any]]] = Field(
        None, description="Initial node map; not stored when omitted"
    )

    @field_validator("userid", "timestamp")
    @classmethod
    def stringify(cls, v):
        """Store identifiers and timestamp keys as strings."""
        if v is None:
            return v
        v = str(v).strip()
        if not v:
            raise ValueError("must not be empty")
        return v


class NodeCreate(BaseModel):
    """Body for creating a node."""

    x: StrictInt
    y: StrictInt
    rotation: Optional[StrictInt] = None
    width: Optional[StrictInt] = None
    height: Optional[StrictInt] = None


class NodeUpdate(BaseModel):
    """Partial node update; at least one field is required."""

    x: Optional[StrictInt] = None
    y: Optional[StrictInt] = None
    rotation: Optional[StrictInt] = None
    width: Optional[StrictInt] = None
    height: Optional[StrictInt] = None

    @model_validator(mode="after")
    def require_one_field(self):
        if not self.model_dump(exclude_none=True):
            raise ValueError(f"at least one of {', '.join(NODE_FIELDS)} is required")
        return self


class NodePosition(BaseModel):
    x: StrictInt
    y: StrictInt


class NodeX(BaseModel):
    x: StrictInt


class NodeY(BaseModel):
    y: StrictInt


class NodeRotation(BaseModel):
    rotation: StrictInt


class NodeWidth(BaseModel):
    width: StrictInt


class NodeHeight(BaseModel):
    height: StrictInt
