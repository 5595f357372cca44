"""Organization provider webhook endpoint. Authenticated by signature, not bearer token."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from taskhub.config import get_settings
from taskhub.db.session import get_db
from taskhub.schemas.webhook import WebhookAck
from taskhub.services.webhook_service import process_event, verify_event

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/clerk", response_model=WebhookAck)
async def api_provider_webhook(request: Request, db: Session = Depends(get_db)) -> WebhookAck:
    """Verify and apply an organization/membership event."""
    secret = get_settings().clerk_webhook_secret
    if not secret:
        logger.error("CLERK_WEBHOOK_SECRET is not configured")
        raise HTTPException(status_code=500, detail="Webhook secret not configured")

    payload = await request.body()
    event = verify_event(payload, request.headers, secret)
    handled = process_event(db, event)
    return WebhookAck(status="processed" if handled else "ignored", type=event.type)
