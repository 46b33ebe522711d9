# -*- coding: utf-8 -*-
"""Auth — API endpoints."""

from __future__ import annotations

import logging
import sqlite3
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, Response

from ..config import settings
from .models import AuthResponse, LoginRequest, RegisterRequest, UserPublic
from .security import TOKEN_COOKIE_NAME, create_access_token, get_current_user, hash_password, verify_password
from .storage import create_user, get_user_by_email

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Auth"])

_DUPLICATE = "An account with this email already exists"


def _public(user: Dict[str, Any]) -> UserPublic:
    return UserPublic(id=user["id"], email=user["email"], name=user.get("name"), created_at=user["created_at"])


def _start_session(response: Response, user: Dict[str, Any]) -> AuthResponse:
    """Issue a token for `user`, set it as the session cookie and echo it in the body."""
    token = create_access_token(user_id=user["id"], email=user["email"])
    response.set_cookie(
        key=TOKEN_COOKIE_NAME,
        value=token,
        max_age=int(settings.token_ttl_days) * 86400,
        path="/",
        secure=bool(settings.cookie_secure),
        httponly=True,
        samesite="lax",
    )
    return AuthResponse(user=_public(user), token=token)


@router.post("/register", response_model=AuthResponse, summary="Create an account and sign in")
def register(request: RegisterRequest, response: Response):
    if get_user_by_email(request.email) is not None:
        raise HTTPException(status_code=400, detail=_DUPLICATE)
    try:
        user = create_user(email=request.email, name=request.name, password_hash=hash_password(request.password))
    except sqlite3.IntegrityError as exc:
        # Concurrent registration with the same email.
        raise HTTPException(status_code=400, detail=_DUPLICATE) from exc
    logger.info("Registered user %s", user["id"])
    return _start_session(response, user)


@router.post("/login", response_model=AuthResponse, summary="Sign in with email and password")
def login(request: LoginRequest, response: Response):
    user = get_user_by_email(request.email)
    if user is None or not verify_password(request.password, user["password_hash"]):
        logger.info("Failed sign-in attempt")
        raise HTTPException(status_code=401, detail="Invalid email or password")
    return _start_session(response, user)


@router.post("/logout", summary="Clear the session cookie")
def logout(response: Response):
    response.delete_cookie(TOKEN_COOKIE_NAME, path="/")
    return {"status": "ok"}


@router.get("/me", response_model=UserPublic, summary="The signed-in user")
def me(user: dict = Depends(get_current_user)):
    return _public(user)
