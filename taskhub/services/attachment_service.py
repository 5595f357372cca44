"""Attachment store: validated uploads linked to tasks, and their removal."""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from taskhub.config import get_settings
from taskhub.models import Attachment
from taskhub.schemas.attachment import UploadResponse
from taskhub.services.access import require_member
from taskhub.services.blob_storage import (
    file_url_for,
    generate_stored_name,
    remove_blob,
    remove_blob_best_effort,
    safe_blob_path,
    stored_name_from_url,
    write_blob,
)
from taskhub.services.errors import (
    NotFoundError,
    PayloadTooLargeError,
    UnsupportedMediaTypeError,
    ValidationError,
)
from taskhub.services.task_service import get_task_for_caller

logger = logging.getLogger(__name__)

ATTACHMENT_NOT_FOUND = "Attachment not found"
FILE_NOT_FOUND = "File not found"

ALLOWED_CONTENT_TYPES = frozenset(
    {
        "image/jpeg",
        "image/png",
        "image/gif",
        "image/webp",
        "application/pdf",
        "text/plain",
        "application/msword",
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        "application/vnd.ms-excel",
        "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    }
)


def _normalize_content_type(content_type: str | None) -> str:
    return (content_type or "").split(";", 1)[0].strip().lower()


def validate_upload(size: int, content_type: str | None) -> str:
    """Check size and type before anything is written. Returns the normalized type."""
    limit = get_settings().max_upload_bytes
    if size > limit:
        raise PayloadTooLargeError(f"File size exceeds {limit // (1024 * 1024)}MB limit")
    normalized = _normalize_content_type(content_type)
    if normalized not in ALLOWED_CONTENT_TYPES:
        raise UnsupportedMediaTypeError("File type not allowed")
    return normalized


def upload_attachment(
    db: Session,
    *,
    task_id: str,
    caller_id: str,
    file_name: str,
    content_type: str | None,
    content: bytes,
) -> UploadResponse:
    """Store an uploaded file for a task the caller can access and record its attachment row.

    All-or-nothing: if the row cannot be written the stored file is removed again.
    """
    if not task_id:
        raise ValidationError("Task ID is required")
    task = get_task_for_caller(db, task_id, caller_id)
    file_type = validate_upload(len(content), content_type)

    stored_name = generate_stored_name(file_name)
    write_blob(stored_name, content)
    attachment = Attachment(
        file_name=file_name or stored_name,
        file_url=file_url_for(stored_name),
        file_size=len(content),
        file_type=file_type,
        task_id=task.id,
    )
    db.add(attachment)
    try:
        db.commit()
    except Exception:
        db.rollback()
        remove_blob_best_effort(stored_name)
        raise
    db.refresh(attachment)
    logger.info("Stored %s (%d bytes) for task %s", stored_name, len(content), task.id)
    return UploadResponse(
        id=attachment.id,
        task_id=task.id,
        file_url=attachment.file_url,
        file_name=attachment.file_name,
        file_size=attachment.file_size,
        file_type=attachment.file_type,
        uploaded_at=attachment.uploaded_at,
    )


def _require_attachment_access(db: Session, attachment: Attachment, caller_id: str, message: str) -> None:
    try:
        require_member(db, attachment.task.workspace_id, caller_id)
    except NotFoundError:
        raise NotFoundError(message) from None


def delete_attachment(db: Session, attachment_id: str, caller_id: str) -> None:
    """Remove the file best-effort, then delete the metadata row unconditionally."""
    attachment = db.get(Attachment, attachment_id)
    if attachment is None:
        raise NotFoundError(ATTACHMENT_NOT_FOUND)
    _require_attachment_access(db, attachment, caller_id, ATTACHMENT_NOT_FOUND)

    remove_blob_best_effort(stored_name_from_url(attachment.file_url))
    db.delete(attachment)
    db.commit()
    logger.info("Attachment %s deleted by %s", attachment_id, caller_id)


def delete_upload(db: Session, file_name: str, caller_id: str) -> None:
    """Delete an uploaded file by its stored name.

    When an attachment row references the file the caller must be a member of
    the task's workspace, and the row is removed along with the file.
    """
    safe_blob_path(file_name)
    attachment = (
        db.query(Attachment).filter(Attachment.file_url == file_url_for(file_name)).first()
    )
    if attachment is not None:
        _require_attachment_access(db, attachment, caller_id, FILE_NOT_FOUND)
        remove_blob_best_effort(file_name)
        db.delete(attachment)
        db.commit()
        return
    try:
        remove_blob(file_name)
    except FileNotFoundError:
        raise NotFoundError(FILE_NOT_FOUND) from None
