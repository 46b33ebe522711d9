# -*- coding: utf-8 -*-
"""Auth — Pydantic models."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator


class RegisterRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=254)
    password: str = Field(..., min_length=6, max_length=128)
    name: str = Field(..., min_length=1, max_length=120)

    @field_validator("email")
    @classmethod
    def _looks_like_email(cls, value: str) -> str:
        local, _, domain = value.strip().partition("@")
        if not local or "." not in domain:
            raise ValueError("invalid email address")
        return value.strip()


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=254)
    password: str = Field(..., min_length=1, max_length=128)


class UserPublic(BaseModel):
    id: str
    email: str
    name: str | None = None
    created_at: str


class AuthResponse(BaseModel):
    user: UserPublic
    token: str
