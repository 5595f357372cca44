"""Pydantic schemas for request/response validation."""

from taskhub.schemas.attachment import MessageResponse, UploadResponse
from taskhub.schemas.tag import TagCreate, TagRead, TagUpdate
from taskhub.schemas.task import (
    AssigneeRead,
    AttachmentRead,
    SubTaskRead,
    TaskCounts,
    TaskCreate,
    TaskDeleteResponse,
    TaskPriority,
    TaskRead,
    TaskStatus,
    TaskTagRead,
    TaskUpdate,
)
from taskhub.schemas.webhook import WebhookAck, WebhookEvent
from taskhub.schemas.workspace import (
    AssignedTaskSummary,
    MemberCreate,
    MemberRead,
    MemberRole,
    MemberWithTasks,
    WorkspaceCounts,
    WorkspaceCreate,
    WorkspaceDeleteResponse,
    WorkspaceDetail,
    WorkspaceRead,
    WorkspaceUpdate,
)

__all__ = [
    # Task
    "AssigneeRead",
    "AttachmentRead",
    "SubTaskRead",
    "TaskCounts",
    "TaskCreate",
    "TaskDeleteResponse",
    "TaskPriority",
    "TaskRead",
    "TaskStatus",
    "TaskTagRead",
    "TaskUpdate",
    # Tag
    "TagCreate",
    "TagRead",
    "TagUpdate",
    # Workspace
    "AssignedTaskSummary",
    "MemberCreate",
    "MemberRead",
    "MemberRole",
    "MemberWithTasks",
    "WorkspaceCounts",
    "WorkspaceCreate",
    "WorkspaceDeleteResponse",
    "WorkspaceDetail",
    "WorkspaceRead",
    "WorkspaceUpdate",
    # Upload
    "MessageResponse",
    "UploadResponse",
    # Webhook
    "WebhookAck",
    "WebhookEvent",
]
