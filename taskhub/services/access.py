"""Workspace access control.

Two ownership models coexist:

* personal workspaces (id ``user_<userId>``) belong to that user without a
  membership lookup;
* shared workspaces are governed by ``workspace_members`` rows with an
  ADMIN or MEMBER role.

``resolve_owner`` is the only place that understands the personal id
convention. Callers ask for ``require_member`` (any membership) or
``require_admin`` (ADMIN role). No relationship at all is reported as
NotFound so workspace existence is not leaked; a member without the
required role gets Forbidden.
"""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.orm import Session

from taskhub.models import PERSONAL_WORKSPACE_PREFIX, ROLE_ADMIN, WorkspaceMember
from taskhub.services.errors import ForbiddenError, NotFoundError

WORKSPACE_NOT_FOUND = "Workspace not found or access denied"


@dataclass(frozen=True)
class PersonalOwner:
    """Workspace implicitly owned by a single user."""

    user_id: str


@dataclass(frozen=True)
class SharedWorkspace:
    """Workspace governed by membership rows."""

    workspace_id: str


Owner = PersonalOwner | SharedWorkspace


@dataclass(frozen=True)
class Access:
    """Result of a successful gate check."""

    workspace_id: str
    caller_id: str
    role: str
    membership: WorkspaceMember | None = None

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN


def personal_workspace_id(user_id: str) -> str:
    return f"{PERSONAL_WORKSPACE_PREFIX}{user_id}"


def resolve_owner(workspace_id: str) -> Owner:
    """Map a workspace id to its ownership branch."""
    if workspace_id.startswith(PERSONAL_WORKSPACE_PREFIX):
        user_id = workspace_id[len(PERSONAL_WORKSPACE_PREFIX) :]
        if user_id:
            return PersonalOwner(user_id=user_id)
    return SharedWorkspace(workspace_id=workspace_id)


def is_personal_workspace_of(workspace_id: str, caller_id: str) -> bool:
    owner = resolve_owner(workspace_id)
    return isinstance(owner, PersonalOwner) and owner.user_id == caller_id


def get_membership(db: Session, workspace_id: str, user_id: str) -> WorkspaceMember | None:
    """Return the (workspace_id, user_id) membership row, or None."""
    return (
        db.query(WorkspaceMember)
        .filter(
            WorkspaceMember.workspace_id == workspace_id,
            WorkspaceMember.user_id == user_id,
        )
        .first()
    )


def require_member(db: Session, workspace_id: str, caller_id: str) -> Access:
    """Member-or-above. Raises NotFoundError when the caller has no relationship."""
    if is_personal_workspace_of(workspace_id, caller_id):
        return Access(workspace_id=workspace_id, caller_id=caller_id, role=ROLE_ADMIN)
    # Someone else's personal workspace falls through to the membership table,
    # so an owner can still share it explicitly.
    membership = get_membership(db, workspace_id, caller_id)
    if membership is None:
        raise NotFoundError(WORKSPACE_NOT_FOUND)
    return Access(
        workspace_id=workspace_id,
        caller_id=caller_id,
        role=membership.role,
        membership=membership,
    )


def require_admin(db: Session, workspace_id: str, caller_id: str) -> Access:
    """Admin-only. NotFoundError without membership, ForbiddenError for plain members."""
    access = require_member(db, workspace_id, caller_id)
    if not access.is_admin:
        raise ForbiddenError("Admin role required for this workspace")
    return access
