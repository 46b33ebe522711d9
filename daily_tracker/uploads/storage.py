# -*- coding: utf-8 -*-
"""Uploads — images on disk under the data root, metadata in SQLite."""

from __future__ import annotations

import hashlib
import re
from pathlib import Path
from typing import Any, Dict, Optional
from uuid import uuid4

from fastapi import HTTPException, UploadFile

from ..app_db import db_conn, utc_now
from ..config import settings

ALLOWED_CONTENT_TYPES = {
    "image/jpeg": ".jpg",
    "image/jpg": ".jpg",
    "image/png": ".png",
    "image/gif": ".gif",
    "image/webp": ".webp",
    "image/heic": ".heic",
    "image/heif": ".heif",
}

MIN_IMAGE_BYTES = 100
_CHUNK_BYTES = 1024 * 256


def _user_uploads_root(user_id: str) -> Path:
    return settings.uploads_root / user_id


def _safe_suffix(filename: str, content_type: str) -> str:
    suffix = Path(filename or "").suffix.lower()
    if suffix and len(suffix) <= 6 and re.fullmatch(r"\.[a-z0-9]+", suffix):
        return suffix
    return ALLOWED_CONTENT_TYPES[content_type]


def upload_url(upload_id: str) -> str:
    return f"/api/uploads/{upload_id}"


def save_image_upload(*, user_id: str, upload: UploadFile) -> Dict[str, Any]:
    """Validate and persist an uploaded image.

    Raises HTTPException 400 for unsupported types or suspiciously small
    files and 413 when the size limit is exceeded.
    """
    content_type = (upload.content_type or "").lower()
    if content_type not in ALLOWED_CONTENT_TYPES:
        raise HTTPException(
            status_code=400,
            detail=f"Invalid file type: {upload.content_type}. Please select a JPEG, PNG, GIF, or WebP image.",
        )

    upload_id = str(uuid4())
    filename = upload.filename or f"upload-{upload_id}"
    target_dir = _user_uploads_root(user_id)
    target_dir.mkdir(parents=True, exist_ok=True)
    target = target_dir / f"{upload_id}{_safe_suffix(filename, content_type)}"

    sha = hashlib.sha256()
    size = 0
    max_bytes = int(settings.max_upload_mb) * 1024 * 1024
    try:
        with target.open("wb") as f:
            while True:
                chunk = upload.file.read(_CHUNK_BYTES)
                if not chunk:
                    break
                size += len(chunk)
                if size > max_bytes:
                    raise HTTPException(
                        status_code=413,
                        detail=f"File too large. Please select an image smaller than {settings.max_upload_mb}MB.",
                    )
                sha.update(chunk)
                f.write(chunk)
        if size < MIN_IMAGE_BYTES:
            raise HTTPException(
                status_code=400,
                detail="File appears to be corrupted or empty. Please try selecting a different image.",
            )
    except HTTPException:
        target.unlink(missing_ok=True)
        raise
    finally:
        upload.file.close()

    row = {
        "id": upload_id,
        "user_id": user_id,
        "filename": filename,
        "content_type": content_type,
        "size_bytes": size,
        "sha256": sha.hexdigest(),
        "stored_relpath": str(target.relative_to(settings.data_root)),
        "created_at": utc_now(),
    }
    with db_conn(settings.app_db_path) as conn:
        conn.execute(
            f"INSERT INTO uploads ({', '.join(row)}) VALUES ({', '.join('?' for _ in row)})",
            tuple(row.values()),
        )
    return row


def get_upload_row(*, user_id: str, upload_id: str) -> Optional[Dict[str, Any]]:
    with db_conn(settings.app_db_path) as conn:
        row = conn.execute("SELECT * FROM uploads WHERE id = ? AND user_id = ?", (upload_id, user_id)).fetchone()
        return dict(row) if row else None


def get_upload_path(row: Dict[str, Any]) -> Path:
    return settings.data_root / row["stored_relpath"]
