"""Tag API routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from taskhub.api.deps import require_caller
from taskhub.db.session import get_db
from taskhub.schemas.attachment import MessageResponse
from taskhub.schemas.tag import TagCreate, TagRead, TagUpdate
from taskhub.services.tag_service import create_tag, delete_tag, list_tags, update_tag

router = APIRouter()


@router.get("", response_model=list[TagRead])
def api_list_tags(
    workspace_id: str = Query(..., alias="workspaceId", min_length=1),
    db: Session = Depends(get_db),
    caller_id: str = Depends(require_caller),
) -> list[TagRead]:
    """Tags of a workspace with task counts, alphabetical."""
    return list_tags(db, workspace_id, caller_id)


@router.post("", response_model=TagRead, status_code=201)
def api_create_tag(
    data: TagCreate,
    db: Session = Depends(get_db),
    caller_id: str = Depends(require_caller),
) -> TagRead:
    return create_tag(db, data, caller_id)


@router.put("/{tag_id}", response_model=TagRead)
def api_update_tag(
    tag_id: str,
    data: TagUpdate,
    db: Session = Depends(get_db),
    caller_id: str = Depends(require_caller),
) -> TagRead:
    return update_tag(db, tag_id, caller_id, data)


@router.delete("/{tag_id}", response_model=MessageResponse)
def api_delete_tag(
    tag_id: str,
    db: Session = Depends(get_db),
    caller_id: str = Depends(require_caller),
) -> MessageResponse:
    delete_tag(db, tag_id, caller_id)
    return MessageResponse(message="Tag deleted successfully")
