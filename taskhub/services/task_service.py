"""Task store: workspace-scoped CRUD with sub-tasks, tags and partial updates."""

from __future__ import annotations

import logging
from enum import Enum

from sqlalchemy.orm import Session, selectinload

from taskhub.models import Tag, Task, WorkspaceMember
from taskhub.schemas.task import TaskCreate, TaskRead, TaskUpdate
from taskhub.services.access import personal_workspace_id, require_member
from taskhub.services.blob_storage import remove_blob_best_effort, stored_name_from_url
from taskhub.services.errors import NotFoundError, ValidationError
from taskhub.services.serializers import task_to_read
from taskhub.services.workspace_service import get_accessible_workspace

logger = logging.getLogger(__name__)

TASK_NOT_FOUND = "Task not found or unauthorized"

# Columns that may never be cleared with an explicit null
_NON_NULLABLE_FIELDS = frozenset({"title", "status", "priority"})


def _with_relations(query):
    """Eager-load everything the board payload needs."""
    return query.options(
        selectinload(Task.assignee),
        selectinload(Task.tags),
        selectinload(Task.sub_tasks).selectinload(Task.assignee),
        selectinload(Task.attachments),
    )


def _load_task(db: Session, task_id: str) -> Task | None:
    return _with_relations(db.query(Task).filter(Task.id == task_id)).first()


def get_task_for_caller(db: Session, task_id: str, caller_id: str) -> Task:
    """Return the task if the caller may access its workspace.

    Missing tasks and tasks in foreign workspaces both raise NotFoundError.
    """
    task = _load_task(db, task_id)
    if task is None:
        raise NotFoundError(TASK_NOT_FOUND)
    try:
        require_member(db, task.workspace_id, caller_id)
    except NotFoundError:
        raise NotFoundError(TASK_NOT_FOUND) from None
    return task


# ── Reference validation ────────────────────────────────────────────


def _validate_parent(
    db: Session, workspace_id: str, parent_id: str, task_id: str | None = None
) -> None:
    """Parent must exist in the same workspace and must not create a cycle."""
    parent = db.get(Task, parent_id)
    if parent is None or parent.workspace_id != workspace_id:
        raise ValidationError("parent_id must reference a task in the same workspace")
    if task_id is None:
        return
    # Walk up from the new parent; reaching the task itself means a cycle
    cursor: Task | None = parent
    while cursor is not None:
        if cursor.id == task_id:
            raise ValidationError("A task cannot be nested under itself or its sub-tasks")
        cursor = db.get(Task, cursor.parent_id) if cursor.parent_id else None


def _validate_assignee(db: Session, workspace_id: str, assignee_id: str) -> None:
    member = db.get(WorkspaceMember, assignee_id)
    if member is None or member.workspace_id != workspace_id:
        raise ValidationError("assignee_id must reference a member of the same workspace")


def _resolve_tags(db: Session, workspace_id: str, tag_ids: list[str]) -> list[Tag]:
    unique_ids = list(dict.fromkeys(tag_ids))
    if not unique_ids:
        return []
    tags = (
        db.query(Tag)
        .filter(Tag.id.in_(unique_ids), Tag.workspace_id == workspace_id)
        .all()
    )
    if len(tags) != len(unique_ids):
        raise ValidationError("tag_ids must reference tags in the same workspace")
    by_id = {t.id: t for t in tags}
    return [by_id[tid] for tid in unique_ids]


def _plain(value):
    return value.value if isinstance(value, Enum) else value


# ── CRUD operations ─────────────────────────────────────────────────


def list_tasks(db: Session, workspace_id: str, caller_id: str) -> list[TaskRead]:
    """Top-level tasks of a workspace (sub-tasks excluded), newest first."""
    workspace = get_accessible_workspace(db, workspace_id, caller_id)
    tasks = (
        _with_relations(db.query(Task))
        .filter(Task.workspace_id == workspace.id, Task.parent_id.is_(None))
        .order_by(Task.created_at.desc(), Task.id)
        .all()
    )
    return [task_to_read(t) for t in tasks]


def get_task(db: Session, task_id: str, caller_id: str) -> TaskRead:
    return task_to_read(get_task_for_caller(db, task_id, caller_id))


def create_task(db: Session, data: TaskCreate, caller_id: str) -> TaskRead:
    """Create a task in ``data.workspace_id`` or, when omitted, the caller's personal workspace."""
    title = (data.title or "").strip()
    if not title:
        raise ValidationError("Title is required")

    workspace_id = data.workspace_id or personal_workspace_id(caller_id)
    workspace = get_accessible_workspace(db, workspace_id, caller_id)

    if data.parent_id is not None:
        _validate_parent(db, workspace.id, data.parent_id)
    if data.assignee_id is not None:
        _validate_assignee(db, workspace.id, data.assignee_id)
    tags = _resolve_tags(db, workspace.id, data.tag_ids) if data.tag_ids else []

    task = Task(
        title=title,
        description=data.description,
        status=_plain(data.status),
        priority=_plain(data.priority),
        due_date=data.due_date,
        start_date=data.start_date,
        workspace_id=workspace.id,
        assignee_id=data.assignee_id,
        parent_id=data.parent_id,
    )
    task.tags = tags
    db.add(task)
    db.commit()
    logger.info("Task %s created in workspace %s by %s", task.id, workspace.id, caller_id)
    return task_to_read(_load_task(db, task.id))


def update_task(db: Session, task_id: str, caller_id: str, data: TaskUpdate) -> TaskRead:
    """Apply a partial update.

    Only keys present in the payload change; an explicit null clears a
    nullable field. The task's workspace never changes.
    """
    task = get_task_for_caller(db, task_id, caller_id)
    changes = data.model_dump(exclude_unset=True)

    for key in _NON_NULLABLE_FIELDS:
        if key in changes and changes[key] is None:
            raise ValidationError(f"{key} cannot be null")

    if changes.get("parent_id") is not None:
        _validate_parent(db, task.workspace_id, changes["parent_id"], task_id=task.id)
    if changes.get("assignee_id") is not None:
        _validate_assignee(db, task.workspace_id, changes["assignee_id"])
    if "tag_ids" in changes:
        tag_ids = changes.pop("tag_ids") or []
        task.tags = _resolve_tags(db, task.workspace_id, tag_ids)

    for key, value in changes.items():
        setattr(task, key, _plain(value))

    db.commit()
    return task_to_read(_load_task(db, task.id))


def delete_task(db: Session, task_id: str, caller_id: str) -> None:
    """Delete a task with its sub-tasks, attachments and tag links.

    Attachment files are removed best-effort after the rows are gone.
    """
    task = get_task_for_caller(db, task_id, caller_id)
    blob_names = [stored_name_from_url(a.file_url) for a in _iter_attachments(task)]
    db.delete(task)
    db.commit()
    for name in blob_names:
        remove_blob_best_effort(name)
    logger.info("Task %s deleted by %s", task_id, caller_id)


def _iter_attachments(task: Task):
    yield from task.attachments
    for sub in task.sub_tasks:
        yield from _iter_attachments(sub)
