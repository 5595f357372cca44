"""Filesystem blob area for uploaded attachment bytes.

Files are stored flat under ``settings.upload_dir`` as ``<uuid>.<ext>`` and
served at ``<upload_url_prefix>/<name>``.
"""

from __future__ import annotations

import logging
import uuid
from pathlib import Path, PurePosixPath

from taskhub.config import get_settings
from taskhub.services.errors import ValidationError

logger = logging.getLogger(__name__)


def upload_root() -> Path:
    return Path(get_settings().upload_dir)


def generate_stored_name(original_name: str) -> str:
    """Collision-free name that keeps the original extension (lower-cased)."""
    suffix = PurePosixPath(original_name or "").suffix.lower()
    return f"{uuid.uuid4().hex}{suffix}"


def file_url_for(stored_name: str) -> str:
    return f"{get_settings().upload_url_prefix}/{stored_name}"


def stored_name_from_url(file_url: str) -> str:
    return file_url.rstrip("/").rsplit("/", 1)[-1]


def safe_blob_path(stored_name: str) -> Path:
    """Resolve a stored name inside the upload root; rejects anything that is not a bare file name."""
    if (
        not stored_name
        or stored_name in (".", "..")
        or stored_name.startswith(".")
        or PurePosixPath(stored_name).name != stored_name
        or "\\" in stored_name
    ):
        raise ValidationError("Invalid file name")
    return upload_root() / stored_name


def write_blob(stored_name: str, content: bytes) -> Path:
    path = safe_blob_path(stored_name)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(content)
    return path


def remove_blob(stored_name: str) -> None:
    """Delete a stored file. Raises FileNotFoundError/OSError on failure."""
    safe_blob_path(stored_name).unlink()


def remove_blob_best_effort(stored_name: str) -> bool:
    """Delete a stored file, logging instead of raising. Returns True if removed."""
    try:
        remove_blob(stored_name)
        return True
    except (OSError, ValidationError) as exc:
        logger.warning("Could not delete blob %s: %s", stored_name, exc)
        return False
