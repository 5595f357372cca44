"""Workspace store: personal provisioning, shared workspace CRUD, provider sync helpers."""

from __future__ import annotations

import logging

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from taskhub.config import get_settings
from taskhub.models import ROLE_ADMIN, Attachment, Tag, Task, Workspace, WorkspaceMember
from taskhub.schemas.workspace import WorkspaceDetail, WorkspaceRead
from taskhub.services.access import (
    WORKSPACE_NOT_FOUND,
    PersonalOwner,
    is_personal_workspace_of,
    personal_workspace_id,
    require_admin,
    require_member,
    resolve_owner,
)
from taskhub.services.blob_storage import remove_blob_best_effort, stored_name_from_url
from taskhub.services.errors import ConflictError, NotFoundError, ValidationError
from taskhub.services.serializers import tag_to_read, task_to_read, workspace_to_read

logger = logging.getLogger(__name__)


def get_or_create_personal(db: Session, user_id: str) -> Workspace:
    """Return the caller's personal workspace, creating it (with an ADMIN membership) if absent.

    Idempotent: a concurrent creator losing the insert race re-reads the winner's row.
    """
    workspace_id = personal_workspace_id(user_id)
    workspace = db.get(Workspace, workspace_id)
    if workspace is not None:
        return workspace

    workspace = Workspace(id=workspace_id, name=get_settings().personal_workspace_name)
    workspace.members.append(WorkspaceMember(user_id=user_id, role=ROLE_ADMIN))
    db.add(workspace)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        workspace = db.get(Workspace, workspace_id)
        if workspace is None:
            raise
        return workspace
    logger.info("Provisioned personal workspace %s", workspace_id)
    return workspace


def get_accessible_workspace(
    db: Session, workspace_id: str, caller_id: str, *, admin: bool = False
) -> Workspace:
    """Run the access gate and return the workspace row.

    The caller's own personal workspace is provisioned on first access.
    """
    if admin:
        require_admin(db, workspace_id, caller_id)
    else:
        require_member(db, workspace_id, caller_id)
    if is_personal_workspace_of(workspace_id, caller_id):
        return get_or_create_personal(db, caller_id)
    workspace = db.get(Workspace, workspace_id)
    if workspace is None:
        raise NotFoundError(WORKSPACE_NOT_FOUND)
    return workspace


def _workspace_exists(db: Session, workspace_id: str) -> bool:
    return db.query(Workspace.id).filter(Workspace.id == workspace_id).first() is not None


def create_workspace(db: Session, name: str, workspace_id: str, creator_id: str) -> WorkspaceRead:
    """Create a shared workspace and the creator's ADMIN membership in one commit.

    Raises ConflictError if the id is taken.
    """
    name = (name or "").strip()
    workspace_id = (workspace_id or "").strip()
    if not name or not workspace_id:
        raise ValidationError("Name and organizationId are required")
    if isinstance(resolve_owner(workspace_id), PersonalOwner):
        raise ValidationError("Workspace ids starting with 'user_' are reserved")
    if _workspace_exists(db, workspace_id):
        raise ConflictError("Workspace already exists")

    workspace = Workspace(id=workspace_id, name=name)
    workspace.members.append(WorkspaceMember(user_id=creator_id, role=ROLE_ADMIN))
    db.add(workspace)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("Workspace already exists") from None
    db.refresh(workspace)
    logger.info("Workspace %s created by %s", workspace_id, creator_id)
    return workspace_to_read(workspace, task_count=0)


def get_workspace_detail(db: Session, workspace_id: str, caller_id: str) -> WorkspaceDetail:
    """Return the full workspace graph (members, tasks, tags) for a member."""
    workspace = get_accessible_workspace(db, workspace_id, caller_id)
    tasks = (
        db.query(Task)
        .filter(Task.workspace_id == workspace.id)
        .options(
            selectinload(Task.assignee),
            selectinload(Task.tags),
            selectinload(Task.sub_tasks).selectinload(Task.assignee),
            selectinload(Task.attachments),
        )
        .order_by(Task.created_at.desc())
        .all()
    )
    tags = db.query(Tag).filter(Tag.workspace_id == workspace.id).order_by(Tag.name).all()
    summary = workspace_to_read(workspace, task_count=len(tasks))
    return WorkspaceDetail(
        **summary.model_dump(),
        tasks=[task_to_read(t) for t in tasks],
        tags=[tag_to_read(t) for t in tags],
    )


def update_workspace(db: Session, workspace_id: str, caller_id: str, name: str) -> WorkspaceRead:
    """Rename a workspace (admin only)."""
    workspace = get_accessible_workspace(db, workspace_id, caller_id, admin=True)
    name = (name or "").strip()
    if not name:
        raise ValidationError("Name is required")
    workspace.name = name
    db.commit()
    db.refresh(workspace)
    return workspace_to_read(workspace)


def _attachment_blob_names(db: Session, workspace_id: str) -> list[str]:
    rows = (
        db.query(Attachment.file_url)
        .join(Task, Task.id == Attachment.task_id)
        .filter(Task.workspace_id == workspace_id)
        .all()
    )
    return [stored_name_from_url(file_url) for (file_url,) in rows]


def _delete_with_blobs(db: Session, workspace: Workspace) -> None:
    """Delete the workspace rows, then its attachment files best-effort."""
    blob_names = _attachment_blob_names(db, workspace.id)
    db.delete(workspace)
    db.commit()
    for name in blob_names:
        remove_blob_best_effort(name)


def delete_workspace(db: Session, workspace_id: str, caller_id: str) -> None:
    """Delete a workspace and everything it owns, attachment files included (admin only)."""
    workspace = get_accessible_workspace(db, workspace_id, caller_id, admin=True)
    _delete_with_blobs(db, workspace)
    logger.info("Workspace %s deleted by %s", workspace_id, caller_id)


def list_workspaces_for_user(db: Session, user_id: str) -> list[WorkspaceRead]:
    """All workspaces in which the user holds any membership, ordered by name."""
    workspaces = (
        db.query(Workspace)
        .join(WorkspaceMember, WorkspaceMember.workspace_id == Workspace.id)
        .filter(WorkspaceMember.user_id == user_id)
        .options(selectinload(Workspace.members))
        .order_by(Workspace.name, Workspace.id)
        .all()
    )
    if not workspaces:
        return []
    task_counts = dict(
        db.query(Task.workspace_id, func.count(Task.id))
        .filter(Task.workspace_id.in_([w.id for w in workspaces]))
        .group_by(Task.workspace_id)
        .all()
    )
    return [workspace_to_read(w, task_count=task_counts.get(w.id, 0)) for w in workspaces]


# ── Provider sync (trusted, no access gate) ─────────────────────────


def upsert_workspace(db: Session, workspace_id: str, name: str | None) -> Workspace:
    """Create the workspace or rename it if it already exists. Safe to replay."""
    workspace = db.get(Workspace, workspace_id)
    if workspace is None:
        workspace = Workspace(id=workspace_id, name=name or workspace_id)
        db.add(workspace)
    elif name:
        workspace.name = name
    db.commit()
    return workspace


def remove_workspace(db: Session, workspace_id: str) -> bool:
    """Delete the workspace if present. Returns False when it was already gone."""
    workspace = db.get(Workspace, workspace_id)
    if workspace is None:
        return False
    _delete_with_blobs(db, workspace)
    return True
