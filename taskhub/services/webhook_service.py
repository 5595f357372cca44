"""Organization provider webhook ingest.

Events are verified with the provider's signing secret (svix scheme:
``svix-id``/``svix-timestamp``/``svix-signature`` headers, timestamp
tolerance enforced by the library) before any payload content is trusted.
Verified events are applied to workspaces and memberships with upsert
semantics so that provider retries are harmless. This path bypasses the
workspace access gate.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Mapping
from typing import Any

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from svix.webhooks import Webhook, WebhookVerificationError

from taskhub.schemas.webhook import WebhookEvent
from taskhub.services.errors import InvalidSignatureError
from taskhub.services.membership_service import (
    delete_membership,
    map_provider_role,
    update_membership_role,
    upsert_membership,
)
from taskhub.services.workspace_service import remove_workspace, upsert_workspace

logger = logging.getLogger(__name__)

SIGNATURE_HEADERS = ("svix-id", "svix-timestamp", "svix-signature")


def verify_event(payload: bytes | str, headers: Mapping[str, str], secret: str) -> WebhookEvent:
    """Verify the signature and parse the event envelope.

    Raises InvalidSignatureError for missing headers, a bad or stale
    signature, or a body that is not a well-formed event.
    """
    signature_headers = {name: headers.get(name) for name in SIGNATURE_HEADERS}
    if not all(signature_headers.values()):
        raise InvalidSignatureError("Missing webhook signature headers")
    try:
        # Signature check only; the return value differs between svix releases
        Webhook(secret).verify(payload, signature_headers)
    except WebhookVerificationError as exc:
        logger.warning("Webhook verification failed: %s", exc)
        raise InvalidSignatureError() from None
    except ValueError as exc:
        logger.warning("Webhook body could not be decoded: %s", exc)
        raise InvalidSignatureError("Malformed webhook payload") from None
    try:
        body = json.loads(payload)
    except (json.JSONDecodeError, UnicodeDecodeError):
        logger.warning("Webhook body is not valid JSON")
        raise InvalidSignatureError("Malformed webhook payload") from None
    try:
        return WebhookEvent.model_validate(body)
    except PydanticValidationError:
        raise InvalidSignatureError("Malformed webhook payload") from None


def _require(value: Any, what: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise InvalidSignatureError(f"Malformed webhook payload: missing {what}")
    return value


def _organization_created_or_updated(db: Session, data: dict[str, Any]) -> None:
    workspace_id = _require(data.get("id"), "organization id")
    upsert_workspace(db, workspace_id, data.get("name"))
    logger.info("Workspace synced from provider: %s", workspace_id)


def _organization_deleted(db: Session, data: dict[str, Any]) -> None:
    workspace_id = _require(data.get("id"), "organization id")
    if remove_workspace(db, workspace_id):
        logger.info("Workspace deleted by provider: %s", workspace_id)
    else:
        logger.info("Workspace %s already absent, nothing to delete", workspace_id)


def _membership_keys(data: dict[str, Any]) -> tuple[str, str, str | None]:
    organization = data.get("organization") or {}
    user_data = data.get("public_user_data") or {}
    workspace_id = _require(organization.get("id"), "organization id")
    user_id = _require(user_data.get("user_id"), "user id")
    return workspace_id, user_id, organization.get("name")


def _membership_created(db: Session, data: dict[str, Any]) -> None:
    workspace_id, user_id, workspace_name = _membership_keys(data)
    role = map_provider_role(data.get("role"))
    upsert_membership(db, workspace_id, user_id, role, workspace_name=workspace_name)
    logger.info("Membership created: %s in %s as %s", user_id, workspace_id, role)


def _membership_updated(db: Session, data: dict[str, Any]) -> None:
    workspace_id, user_id, workspace_name = _membership_keys(data)
    role = map_provider_role(data.get("role"))
    update_membership_role(db, workspace_id, user_id, role, workspace_name=workspace_name)
    logger.info("Membership role updated: %s in %s to %s", user_id, workspace_id, role)


def _membership_deleted(db: Session, data: dict[str, Any]) -> None:
    workspace_id, user_id, _ = _membership_keys(data)
    if delete_membership(db, workspace_id, user_id):
        logger.info("Membership deleted: %s from %s", user_id, workspace_id)
    else:
        logger.info("Membership %s/%s already absent", workspace_id, user_id)


EVENT_HANDLERS: dict[str, Callable[[Session, dict[str, Any]], None]] = {
    "organization.created": _organization_created_or_updated,
    "organization.updated": _organization_created_or_updated,
    "organization.deleted": _organization_deleted,
    "organizationMembership.created": _membership_created,
    "organizationMembership.updated": _membership_updated,
    "organizationMembership.deleted": _membership_deleted,
    # Short aliases
    "membership.created": _membership_created,
    "membership.updated": _membership_updated,
    "membership.deleted": _membership_deleted,
}


def process_event(db: Session, event: WebhookEvent) -> bool:
    """Apply a verified event. Returns False for unknown event types (acknowledged no-op).

    Store failures are rolled back and re-raised so the provider retries.
    """
    handler = EVENT_HANDLERS.get(event.type)
    if handler is None:
        logger.info("Unhandled webhook type: %s", event.type)
        return False
    logger.info("Webhook with ID %s and type %s", event.data.get("id"), event.type)
    try:
        handler(db, event.data)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Error processing webhook %s", event.type)
        raise
    return True
