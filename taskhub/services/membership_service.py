"""Membership management: admin-driven adds, listing, and provider-driven sync."""

from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from taskhub.models import ROLE_ADMIN, ROLE_MEMBER, Workspace, WorkspaceMember
from taskhub.schemas.workspace import MemberRead, MemberWithTasks
from taskhub.services.access import get_membership
from taskhub.services.errors import ConflictError, ValidationError
from taskhub.services.serializers import member_to_read, member_with_tasks
from taskhub.services.workspace_service import get_accessible_workspace

logger = logging.getLogger(__name__)

# Provider role strings that map to ADMIN; everything else is MEMBER
_PROVIDER_ADMIN_ROLES = frozenset({"org:admin", "admin"})


def map_provider_role(provider_role: str | None) -> str:
    """Map an organization provider role string to ADMIN or MEMBER."""
    if provider_role and provider_role.strip().lower() in _PROVIDER_ADMIN_ROLES:
        return ROLE_ADMIN
    return ROLE_MEMBER


def add_member(
    db: Session,
    workspace_id: str,
    caller_id: str,
    target_user_id: str,
    role: str = ROLE_MEMBER,
) -> MemberRead:
    """Add a user to a workspace (admin only).

    Raises ConflictError if the user is already a member; the unique constraint
    backs up the pre-check against concurrent adds.
    """
    workspace = get_accessible_workspace(db, workspace_id, caller_id, admin=True)
    target_user_id = (target_user_id or "").strip()
    if not target_user_id:
        raise ValidationError("user_id is required")
    if get_membership(db, workspace.id, target_user_id) is not None:
        raise ConflictError("User is already a member")

    member = WorkspaceMember(workspace_id=workspace.id, user_id=target_user_id, role=role)
    db.add(member)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("User is already a member") from None
    db.refresh(member)
    logger.info("User %s added to workspace %s as %s", target_user_id, workspace.id, role)
    return member_to_read(member)


def list_members(db: Session, workspace_id: str, caller_id: str) -> list[MemberWithTasks]:
    """List members with their assigned task summaries (member-or-above)."""
    workspace = get_accessible_workspace(db, workspace_id, caller_id)
    members = (
        db.query(WorkspaceMember)
        .filter(WorkspaceMember.workspace_id == workspace.id)
        .options(selectinload(WorkspaceMember.assigned_tasks))
        .order_by(WorkspaceMember.created_at, WorkspaceMember.id)
        .all()
    )
    return [member_with_tasks(m) for m in members]


# ── Provider sync (trusted, no access gate) ─────────────────────────


def upsert_membership(
    db: Session,
    workspace_id: str,
    user_id: str,
    role: str,
    *,
    workspace_name: str | None = None,
) -> WorkspaceMember:
    """Create or update a membership. Creates a placeholder workspace if it is unknown."""
    if db.get(Workspace, workspace_id) is None:
        db.add(Workspace(id=workspace_id, name=workspace_name or workspace_id))
        db.flush()

    member = get_membership(db, workspace_id, user_id)
    if member is None:
        member = WorkspaceMember(workspace_id=workspace_id, user_id=user_id, role=role)
        db.add(member)
    else:
        member.role = role
    db.commit()
    return member


def delete_membership(db: Session, workspace_id: str, user_id: str) -> bool:
    """Remove a membership if present. Returns False when it was already gone."""
    member = get_membership(db, workspace_id, user_id)
    if member is None:
        return False
    db.delete(member)
    db.commit()
    return True


def update_membership_role(
    db: Session,
    workspace_id: str,
    user_id: str,
    role: str,
    *,
    workspace_name: str | None = None,
) -> WorkspaceMember:
    """Change a member's role; a membership the store has never seen is created instead."""
    member = get_membership(db, workspace_id, user_id)
    if member is None:
        return upsert_membership(db, workspace_id, user_id, role, workspace_name=workspace_name)
    member.role = role
    db.commit()
    return member
