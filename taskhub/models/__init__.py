"""SQLAlchemy models."""

from taskhub.models.attachment import Attachment
from taskhub.models.tag import DEFAULT_TAG_COLOR, Tag
from taskhub.models.task import Task
from taskhub.models.task_tag import task_tags
from taskhub.models.workspace import PERSONAL_WORKSPACE_PREFIX, Workspace
from taskhub.models.workspace_member import ROLE_ADMIN, ROLE_MEMBER, WorkspaceMember

__all__ = [
    "Attachment",
    "DEFAULT_TAG_COLOR",
    "PERSONAL_WORKSPACE_PREFIX",
    "ROLE_ADMIN",
    "ROLE_MEMBER",
    "Tag",
    "Task",
    "Workspace",
    "WorkspaceMember",
    "task_tags",
]
