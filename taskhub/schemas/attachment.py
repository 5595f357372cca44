"""Upload and attachment schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class UploadResponse(BaseModel):
    """Returned after a file is stored and its attachment row created."""

    success: bool = True
    id: str
    task_id: str
    file_url: str
    file_name: str
    file_size: int
    file_type: str
    uploaded_at: datetime


class MessageResponse(BaseModel):
    message: str
