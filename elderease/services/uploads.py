"""Inline image uploads stored as files in the upload directory."""

from __future__ import annotations

import base64
import binascii
import logging
from pathlib import Path

from fastapi import HTTPException

from elderease.config import settings
from elderease.ids import upload_id

logger = logging.getLogger("elderease.uploads")


def upload_root() -> Path:
    return Path(settings.upload_dir)


def save_upload(data: str) -> dict:
    """Decode base64 *data* and write it as ``<id>.png``. Returns ``{"id": filename}``."""
    try:
        raw = base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError):
        raise HTTPException(status_code=400, detail="Invalid base64 payload") from None
    if len(raw) > settings.max_upload_bytes:
        raise HTTPException(status_code=413, detail="Upload too large")

    name = f"{upload_id()}.png"
    try:
        root = upload_root()
        root.mkdir(parents=True, exist_ok=True)
        (root / name).write_bytes(raw)
    except OSError:
        logger.exception("Error writing upload file %s", name)
        raise HTTPException(status_code=500, detail="Error saving upload") from None

    logger.info("Stored upload %s (%d bytes)", name, len(raw))
    return {"id": name}


def resolve_upload(name: str) -> Path:
    """Path of a stored upload; 404 for anything missing or outside the upload directory."""
    root = upload_root().resolve()
    path = (root / name).resolve()
    if root not in path.parents or not path.is_file():
        raise HTTPException(status_code=404, detail="File not found")
    return path
