"""File upload and attachment API routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from sqlalchemy.orm import Session

from taskhub.api.deps import require_caller
from taskhub.config import get_settings
from taskhub.db.session import get_db
from taskhub.schemas.attachment import MessageResponse, UploadResponse
from taskhub.services.attachment_service import (
    delete_attachment,
    delete_upload,
    upload_attachment,
)
from taskhub.services.errors import ValidationError

router = APIRouter()


@router.post("/upload", response_model=UploadResponse, status_code=201)
async def api_upload(
    file: UploadFile | None = File(None),
    task_id: str | None = Form(None, alias="taskId"),
    db: Session = Depends(get_db),
    caller_id: str = Depends(require_caller),
) -> UploadResponse:
    """Store a file for a task and create its attachment row."""
    if file is None:
        raise ValidationError("No file uploaded")
    if not task_id:
        raise ValidationError("Task ID is required")
    # Read one byte past the limit so oversize files are detected without buffering them whole
    content = await file.read(get_settings().max_upload_bytes + 1)
    return upload_attachment(
        db,
        task_id=task_id,
        caller_id=caller_id,
        file_name=file.filename or "",
        content_type=file.content_type,
        content=content,
    )


@router.delete("/upload", response_model=MessageResponse)
def api_delete_upload(
    file_name: str | None = Query(None, alias="fileName"),
    db: Session = Depends(get_db),
    caller_id: str = Depends(require_caller),
) -> MessageResponse:
    if not file_name:
        raise ValidationError("File name is required")
    delete_upload(db, file_name, caller_id)
    return MessageResponse(message="File deleted successfully")


@router.delete("/attachments/{attachment_id}", response_model=MessageResponse)
def api_delete_attachment(
    attachment_id: str,
    db: Session = Depends(get_db),
    caller_id: str = Depends(require_caller),
) -> MessageResponse:
    delete_attachment(db, attachment_id, caller_id)
    return MessageResponse(message="Attachment deleted successfully")
