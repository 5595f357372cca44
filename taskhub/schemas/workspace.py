"""Workspace and membership schemas."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from taskhub.schemas.tag import TagRead
from taskhub.schemas.task import TaskRead, TaskStatus


class MemberRole(str, Enum):
    """Single-role workspace authorization."""

    ADMIN = "ADMIN"
    MEMBER = "MEMBER"


class WorkspaceCreate(BaseModel):
    """Schema for creating a shared workspace under a provider organization id."""

    model_config = ConfigDict(str_strip_whitespace=True, populate_by_name=True)

    name: str = Field(..., min_length=1, max_length=255)
    organization_id: str = Field(..., alias="organizationId", min_length=1, max_length=255)


class WorkspaceUpdate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=255)


class MemberCreate(BaseModel):
    """Schema for an admin adding a member."""

    model_config = ConfigDict(str_strip_whitespace=True)

    user_id: str = Field(..., min_length=1, max_length=255)
    role: MemberRole = MemberRole.MEMBER


class MemberRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    role: MemberRole


class AssignedTaskSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    status: TaskStatus


class MemberWithTasks(MemberRead):
    """Member entry enriched with the tasks assigned to it."""

    assigned_tasks: list[AssignedTaskSummary] = Field(default_factory=list)


class WorkspaceCounts(BaseModel):
    tasks: int = 0
    members: int = 0


class WorkspaceRead(BaseModel):
    """Workspace with its member list and counts."""

    id: str
    name: str
    created_at: datetime | None = None
    members: list[MemberRead] = Field(default_factory=list)
    counts: WorkspaceCounts = Field(default_factory=WorkspaceCounts)


class WorkspaceDetail(WorkspaceRead):
    """Full workspace graph for UI hydration."""

    tasks: list[TaskRead] = Field(default_factory=list)
    tags: list[TagRead] = Field(default_factory=list)


class WorkspaceDeleteResponse(BaseModel):
    message: str = "Workspace deleted successfully"
