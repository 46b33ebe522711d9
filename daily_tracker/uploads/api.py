# -*- coding: utf-8 -*-
"""Uploads — API endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from fastapi.responses import FileResponse

from ..auth.security import get_current_user
from ..subscription.models import UsageAction
from ..subscription.storage import check_usage, increment_usage
from .models import UploadResponse
from .storage import get_upload_path, get_upload_row, save_image_upload, upload_url

router = APIRouter(prefix="/api/uploads", tags=["Uploads"])


@router.post("", response_model=UploadResponse, summary="Upload an image")
def upload_image(file: UploadFile = File(...), user: dict = Depends(get_current_user)):
    usage = check_usage(user["id"], UsageAction.upload)
    if not usage["can_perform"]:
        raise HTTPException(
            status_code=403,
            detail=f"Monthly upload limit reached ({usage['limit']}). Please upgrade to continue.",
        )
    row = save_image_upload(user_id=user["id"], upload=file)
    increment_usage(user["id"], UsageAction.upload)
    return UploadResponse(
        id=row["id"],
        url=upload_url(row["id"]),
        filename=row["filename"],
        content_type=row["content_type"],
        size_bytes=row["size_bytes"],
        sha256=row["sha256"],
        created_at=row["created_at"],
    )


@router.get("/{upload_id}", summary="Serve an uploaded image")
def get_image(upload_id: str, user: dict = Depends(get_current_user)):
    row = get_upload_row(user_id=user["id"], upload_id=upload_id)
    if not row:
        raise HTTPException(status_code=404, detail="Upload not found")
    path = get_upload_path(row)
    if not path.exists():
        raise HTTPException(status_code=404, detail="File missing on disk")
    return FileResponse(path=str(path), media_type=row["content_type"], filename=row["filename"])
