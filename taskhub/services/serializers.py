"""ORM → response schema mapping shared by the stores."""

from __future__ import annotations

from taskhub.models import Tag, Task, Workspace, WorkspaceMember
from taskhub.schemas.tag import TagRead
from taskhub.schemas.task import (
    AssigneeRead,
    AttachmentRead,
    SubTaskRead,
    TaskCounts,
    TaskRead,
    TaskTagRead,
)
from taskhub.schemas.workspace import (
    AssignedTaskSummary,
    MemberRead,
    MemberWithTasks,
    WorkspaceCounts,
    WorkspaceRead,
)


def task_to_read(task: Task) -> TaskRead:
    """Map a Task with its loaded relations to the board payload."""
    return TaskRead(
        id=task.id,
        title=task.title,
        description=task.description,
        status=task.status,
        priority=task.priority,
        due_date=task.due_date,
        start_date=task.start_date,
        workspace_id=task.workspace_id,
        assignee_id=task.assignee_id,
        parent_id=task.parent_id,
        created_at=task.created_at,
        updated_at=task.updated_at,
        assignee=AssigneeRead.model_validate(task.assignee) if task.assignee else None,
        tags=[TaskTagRead.model_validate(tag) for tag in task.tags],
        sub_tasks=[SubTaskRead.model_validate(sub) for sub in task.sub_tasks],
        attachments=[AttachmentRead.model_validate(att) for att in task.attachments],
        counts=TaskCounts(sub_tasks=len(task.sub_tasks), attachments=len(task.attachments)),
    )


def tag_to_read(tag: Tag, task_count: int | None = None) -> TagRead:
    return TagRead(
        id=tag.id,
        name=tag.name,
        color=tag.color,
        workspace_id=tag.workspace_id,
        task_count=len(tag.tasks) if task_count is None else task_count,
    )


def member_to_read(member: WorkspaceMember) -> MemberRead:
    return MemberRead.model_validate(member)


def member_with_tasks(member: WorkspaceMember) -> MemberWithTasks:
    return MemberWithTasks(
        id=member.id,
        user_id=member.user_id,
        role=member.role,
        assigned_tasks=[AssignedTaskSummary.model_validate(t) for t in member.assigned_tasks],
    )


def workspace_to_read(workspace: Workspace, task_count: int | None = None) -> WorkspaceRead:
    return WorkspaceRead(
        id=workspace.id,
        name=workspace.name,
        created_at=workspace.created_at,
        members=[member_to_read(m) for m in workspace.members],
        counts=WorkspaceCounts(
            tasks=len(workspace.tasks) if task_count is None else task_count,
            members=len(workspace.members),
        ),
    )
