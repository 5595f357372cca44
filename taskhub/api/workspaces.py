"""Workspace and membership API routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from taskhub.api.deps import require_caller
from taskhub.db.session import get_db
from taskhub.schemas.workspace import (
    MemberCreate,
    MemberRead,
    MemberWithTasks,
    WorkspaceCreate,
    WorkspaceDeleteResponse,
    WorkspaceDetail,
    WorkspaceRead,
    WorkspaceUpdate,
)
from taskhub.services.membership_service import add_member, list_members
from taskhub.services.workspace_service import (
    create_workspace,
    delete_workspace,
    get_workspace_detail,
    list_workspaces_for_user,
    update_workspace,
)

router = APIRouter()


@router.get("", response_model=list[WorkspaceRead])
def api_list_workspaces(
    db: Session = Depends(get_db),
    caller_id: str = Depends(require_caller),
) -> list[WorkspaceRead]:
    """Workspaces the caller belongs to."""
    return list_workspaces_for_user(db, caller_id)


@router.post("", response_model=WorkspaceRead, status_code=201)
def api_create_workspace(
    data: WorkspaceCreate,
    db: Session = Depends(get_db),
    caller_id: str = Depends(require_caller),
) -> WorkspaceRead:
    """Create a shared workspace; the caller becomes its ADMIN."""
    return create_workspace(db, data.name, data.organization_id, caller_id)


@router.get("/{workspace_id}", response_model=WorkspaceDetail)
def api_get_workspace(
    workspace_id: str,
    db: Session = Depends(get_db),
    caller_id: str = Depends(require_caller),
) -> WorkspaceDetail:
    return get_workspace_detail(db, workspace_id, caller_id)


@router.put("/{workspace_id}", response_model=WorkspaceRead)
def api_update_workspace(
    workspace_id: str,
    data: WorkspaceUpdate,
    db: Session = Depends(get_db),
    caller_id: str = Depends(require_caller),
) -> WorkspaceRead:
    return update_workspace(db, workspace_id, caller_id, data.name)


@router.delete("/{workspace_id}", response_model=WorkspaceDeleteResponse)
def api_delete_workspace(
    workspace_id: str,
    db: Session = Depends(get_db),
    caller_id: str = Depends(require_caller),
) -> WorkspaceDeleteResponse:
    delete_workspace(db, workspace_id, caller_id)
    return WorkspaceDeleteResponse()


@router.get("/{workspace_id}/members", response_model=list[MemberWithTasks])
def api_list_members(
    workspace_id: str,
    db: Session = Depends(get_db),
    caller_id: str = Depends(require_caller),
) -> list[MemberWithTasks]:
    return list_members(db, workspace_id, caller_id)


@router.post("/{workspace_id}/members", response_model=MemberRead, status_code=201)
def api_add_member(
    workspace_id: str,
    data: MemberCreate,
    db: Session = Depends(get_db),
    caller_id: str = Depends(require_caller),
) -> MemberRead:
    """Add a member (workspace ADMIN only)."""
    return add_member(db, workspace_id, caller_id, data.user_id, data.role.value)
