"""Service error taxonomy.

Services raise these; the API layer renders them as ``{"error": message}``
with the attached HTTP status.
"""

from __future__ import annotations


class TaskHubError(Exception):
    """Base class for expected, client-visible failures."""

    status_code: int = 400
    default_message: str = "Bad request"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class NotFoundError(TaskHubError):
    """Resource absent, or caller has no relationship to it (existence is not leaked)."""

    status_code = 404
    default_message = "Not found"


class ForbiddenError(TaskHubError):
    """Caller is a member but lacks the required role."""

    status_code = 403
    default_message = "Access denied"


class ValidationError(TaskHubError):
    status_code = 400
    default_message = "Invalid request"


class ConflictError(TaskHubError):
    """Duplicate unique key (workspace id, membership, tag name)."""

    status_code = 409
    default_message = "Already exists"


class PayloadTooLargeError(TaskHubError):
    status_code = 400
    default_message = "File size exceeds limit"


class UnsupportedMediaTypeError(TaskHubError):
    status_code = 400
    default_message = "File type not allowed"


class InvalidSignatureError(TaskHubError):
    """Webhook payload failed verification or is malformed."""

    status_code = 400
    default_message = "Invalid webhook signature"
