"""Shared helpers for building test data and authenticated requests."""

from __future__ import annotations

from sqlalchemy.orm import Session

from taskhub.models import ROLE_ADMIN, ROLE_MEMBER, Tag, Task, Workspace, WorkspaceMember
from taskhub.services.auth import create_access_token


def auth_headers(user_id: str) -> dict[str, str]:
    """Authorization header carrying a valid bearer token for ``user_id``."""
    return {"Authorization": f"Bearer {create_access_token(user_id)}"}


def make_workspace(
    db: Session,
    workspace_id: str,
    admin_id: str,
    members: tuple[str, ...] = (),
    name: str | None = None,
) -> Workspace:
    """Shared workspace with ``admin_id`` as ADMIN and ``members`` as MEMBERs."""
    workspace = Workspace(id=workspace_id, name=name or workspace_id)
    workspace.members.append(WorkspaceMember(user_id=admin_id, role=ROLE_ADMIN))
    for user_id in members:
        workspace.members.append(WorkspaceMember(user_id=user_id, role=ROLE_MEMBER))
    db.add(workspace)
    db.commit()
    return workspace


def make_task(db: Session, workspace_id: str, title: str = "Task", **fields) -> Task:
    task = Task(title=title, workspace_id=workspace_id, **fields)
    db.add(task)
    db.commit()
    return task


def make_tag(db: Session, workspace_id: str, name: str, color: str = "#3B82F6") -> Tag:
    tag = Tag(name=name, color=color, workspace_id=workspace_id)
    db.add(tag)
    db.commit()
    return tag


def member_id(db: Session, workspace_id: str, user_id: str) -> str:
    """Membership id of ``user_id`` in ``workspace_id`` (what task.assignee_id references)."""
    return (
        db.query(WorkspaceMember.id)
        .filter(WorkspaceMember.workspace_id == workspace_id, WorkspaceMember.user_id == user_id)
        .scalar()
    )
