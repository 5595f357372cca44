"""Tag schemas for request/response validation."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

# #RRGGBB
_COLOR_PATTERN = r"^#[0-9A-Fa-f]{6}$"


class TagCreate(BaseModel):
    """Schema for creating a tag in a workspace."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=100)
    color: str | None = Field(None, pattern=_COLOR_PATTERN)
    workspace_id: str = Field(..., min_length=1, max_length=255)


class TagUpdate(BaseModel):
    """Schema for renaming/recoloring a tag. Color is kept when omitted."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=100)
    color: str | None = Field(None, pattern=_COLOR_PATTERN)


class TagRead(BaseModel):
    """Tag with the number of tasks it is attached to."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    color: str
    workspace_id: str
    task_count: int = 0
