"""Task schemas for request/response validation."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class TaskStatus(str, Enum):
    """Kanban column a task sits in."""

    TODO = "TODO"
    IN_PROGRESS = "IN_PROGRESS"
    DONE = "DONE"


class TaskPriority(str, Enum):
    """Task priority; NONE is the default and never matches a priority filter."""

    NONE = "NONE"
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class TaskCreate(BaseModel):
    """Schema for creating a task. Only title is required."""

    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(..., min_length=1, max_length=500)
    description: str | None = None
    status: TaskStatus = TaskStatus.TODO
    priority: TaskPriority = TaskPriority.NONE
    due_date: datetime | None = None
    start_date: datetime | None = None
    workspace_id: str | None = Field(None, max_length=255)
    assignee_id: str | None = None
    parent_id: str | None = None
    tag_ids: list[str] | None = None


class TaskUpdate(BaseModel):
    """Schema for a partial task update.

    Keys left out of the payload are not touched; keys sent as null clear the
    field. Callers must use ``model_dump(exclude_unset=True)`` to keep the
    distinction.
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    title: str | None = Field(None, min_length=1, max_length=500)
    description: str | None = None
    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    due_date: datetime | None = None
    start_date: datetime | None = None
    assignee_id: str | None = None
    parent_id: str | None = None
    tag_ids: list[str] | None = None


class AssigneeRead(BaseModel):
    """Membership a task is assigned to."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    role: str


class TaskTagRead(BaseModel):
    """Tag as embedded in a task payload."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    color: str


class AttachmentRead(BaseModel):
    """Attachment metadata as embedded in a task payload."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    file_name: str
    file_url: str
    file_size: int | None = None
    file_type: str | None = None
    uploaded_at: datetime
    task_id: str


class SubTaskRead(BaseModel):
    """Direct sub-task of a task, with its own assignee."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    description: str | None = None
    status: TaskStatus
    priority: TaskPriority
    due_date: datetime | None = None
    start_date: datetime | None = None
    parent_id: str | None = None
    assignee: AssigneeRead | None = None
    created_at: datetime
    updated_at: datetime


class TaskCounts(BaseModel):
    sub_tasks: int = 0
    attachments: int = 0


class TaskRead(BaseModel):
    """Full task payload used by the board and list views."""

    id: str
    title: str
    description: str | None = None
    status: TaskStatus
    priority: TaskPriority
    due_date: datetime | None = None
    start_date: datetime | None = None
    workspace_id: str
    assignee_id: str | None = None
    parent_id: str | None = None
    created_at: datetime
    updated_at: datetime
    assignee: AssigneeRead | None = None
    tags: list[TaskTagRead] = Field(default_factory=list)
    sub_tasks: list[SubTaskRead] = Field(default_factory=list)
    attachments: list[AttachmentRead] = Field(default_factory=list)
    counts: TaskCounts = Field(default_factory=TaskCounts)


class TaskDeleteResponse(BaseModel):
    success: bool = True
