# -*- coding: utf-8 -*-
"""Uploads — Pydantic models."""

from __future__ import annotations

from pydantic import BaseModel, Field


class UploadResponse(BaseModel):
    id: str
    url: str = Field(..., description="Relative URL serving the stored image")
    filename: str
    content_type: str
    size_bytes: int
    sha256: str
    created_at: str
