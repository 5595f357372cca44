"""Organization provider webhook payloads."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class WebhookEvent(BaseModel):
    """Envelope of a verified provider event: ``{"type": ..., "data": {...}}``."""

    model_config = ConfigDict(extra="ignore")

    type: str = Field(..., min_length=1)
    data: dict[str, Any] = Field(default_factory=dict)


class WebhookAck(BaseModel):
    status: str
    type: str
