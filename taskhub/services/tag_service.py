"""Tag store: workspace-scoped labels with per-workspace unique names."""

from __future__ import annotations

import logging

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from taskhub.models import DEFAULT_TAG_COLOR, Tag, task_tags
from taskhub.schemas.tag import TagCreate, TagRead, TagUpdate
from taskhub.services.access import require_member
from taskhub.services.errors import ConflictError, NotFoundError
from taskhub.services.serializers import tag_to_read
from taskhub.services.workspace_service import get_accessible_workspace

logger = logging.getLogger(__name__)

TAG_NOT_FOUND = "Tag not found"
DUPLICATE_TAG = "Tag with this name already exists"


def _task_count(db: Session, tag_id: str) -> int:
    return (
        db.query(func.count(task_tags.c.task_id)).filter(task_tags.c.tag_id == tag_id).scalar()
        or 0
    )


def _name_taken(db: Session, workspace_id: str, name: str, exclude_id: str | None = None) -> bool:
    query = db.query(Tag.id).filter(Tag.workspace_id == workspace_id, Tag.name == name)
    if exclude_id is not None:
        query = query.filter(Tag.id != exclude_id)
    return query.first() is not None


def _get_tag_for_caller(db: Session, tag_id: str, caller_id: str) -> Tag:
    tag = db.get(Tag, tag_id)
    if tag is None:
        raise NotFoundError(TAG_NOT_FOUND)
    try:
        require_member(db, tag.workspace_id, caller_id)
    except NotFoundError:
        raise NotFoundError(TAG_NOT_FOUND) from None
    return tag


def _commit_or_conflict(db: Session) -> None:
    """Commit; a unique-constraint race on (workspace_id, name) surfaces as ConflictError."""
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError(DUPLICATE_TAG) from None


def list_tags(db: Session, workspace_id: str, caller_id: str) -> list[TagRead]:
    """Tags of a workspace with task counts, alphabetical by name."""
    workspace = get_accessible_workspace(db, workspace_id, caller_id)
    rows = (
        db.query(Tag, func.count(task_tags.c.task_id))
        .outerjoin(task_tags, task_tags.c.tag_id == Tag.id)
        .filter(Tag.workspace_id == workspace.id)
        .group_by(Tag.id)
        .order_by(Tag.name)
        .all()
    )
    return [tag_to_read(tag, task_count=count) for tag, count in rows]


def create_tag(db: Session, data: TagCreate, caller_id: str) -> TagRead:
    """Create a tag. Raises ConflictError if the name exists in the workspace."""
    workspace = get_accessible_workspace(db, data.workspace_id, caller_id)
    if _name_taken(db, workspace.id, data.name):
        raise ConflictError(DUPLICATE_TAG)
    tag = Tag(name=data.name, color=data.color or DEFAULT_TAG_COLOR, workspace_id=workspace.id)
    db.add(tag)
    _commit_or_conflict(db)
    db.refresh(tag)
    return tag_to_read(tag, task_count=0)


def update_tag(db: Session, tag_id: str, caller_id: str, data: TagUpdate) -> TagRead:
    """Rename/recolor a tag; color is kept when omitted."""
    tag = _get_tag_for_caller(db, tag_id, caller_id)
    if _name_taken(db, tag.workspace_id, data.name, exclude_id=tag.id):
        raise ConflictError(DUPLICATE_TAG)
    tag.name = data.name
    if data.color:
        tag.color = data.color
    _commit_or_conflict(db)
    db.refresh(tag)
    return tag_to_read(tag, task_count=_task_count(db, tag.id))


def delete_tag(db: Session, tag_id: str, caller_id: str) -> None:
    """Delete a tag; its task links go with it."""
    tag = _get_tag_for_caller(db, tag_id, caller_id)
    db.delete(tag)
    db.commit()
    logger.info("Tag %s deleted by %s", tag_id, caller_id)
