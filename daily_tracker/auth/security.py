# -*- coding: utf-8 -*-
"""Auth — password hashing, session tokens, FastAPI dependencies.

Sessions are HS256 JWTs signed with `DAILY_TRACKER_JWT_SECRET`. Browsers send
them in the `daily_tracker_token` cookie, scripts as `Authorization: Bearer`.
"""

from __future__ import annotations

import base64
import hashlib
import hmac
import json
import os
import time
from typing import Any, Dict, Optional

from fastapi import Depends, HTTPException, Request

from ..config import settings
from .storage import get_user_by_id

TOKEN_COOKIE_NAME = "daily_tracker_token"

_HASH_NAME = "sha256"
_HASH_ROUNDS = 200_000
_JWT_HEADER = {"alg": "HS256", "typ": "JWT"}


def _unpadded_b64(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")


def _from_unpadded_b64(text: str) -> bytes:
    return base64.urlsafe_b64decode(text + "=" * (-len(text) % 4))


def hash_password(password: str) -> str:
    """`pbkdf2_sha256$rounds$salt$digest`, base64url without padding."""
    salt = os.urandom(16)
    digest = hashlib.pbkdf2_hmac(_HASH_NAME, password.encode("utf-8"), salt, _HASH_ROUNDS)
    return "$".join((f"pbkdf2_{_HASH_NAME}", str(_HASH_ROUNDS), _unpadded_b64(salt), _unpadded_b64(digest)))


def verify_password(password: str, stored: str) -> bool:
    parts = stored.split("$")
    if len(parts) != 4 or not parts[0].startswith("pbkdf2_"):
        return False
    scheme, rounds, salt, digest = parts
    try:
        candidate = hashlib.pbkdf2_hmac(
            scheme[len("pbkdf2_"):], password.encode("utf-8"), _from_unpadded_b64(salt), int(rounds)
        )
        return hmac.compare_digest(candidate, _from_unpadded_b64(digest))
    except ValueError:
        return False


def _signature(message: str) -> str:
    mac = hmac.new(settings.jwt_secret.encode("utf-8"), message.encode("utf-8"), hashlib.sha256)
    return _unpadded_b64(mac.digest())


def _json_segment(value: Dict[str, Any]) -> str:
    return _unpadded_b64(json.dumps(value, separators=(",", ":")).encode("utf-8"))


def create_access_token(*, user_id: str, email: str) -> str:
    issued = int(time.time())
    claims = {
        "sub": user_id,
        "email": email,
        "iat": issued,
        "exp": issued + int(settings.token_ttl_days) * 86400,
    }
    message = f"{_json_segment(_JWT_HEADER)}.{_json_segment(claims)}"
    return f"{message}.{_signature(message)}"


def decode_token(token: str) -> Dict[str, Any]:
    """Claims of a valid, unexpired token; HTTP 401 otherwise."""
    message, _, signature = token.rpartition(".")
    expected = _signature(message).encode("ascii")
    if message.count(".") != 1 or not hmac.compare_digest(expected, signature.encode("utf-8")):
        raise HTTPException(status_code=401, detail="Invalid token")
    try:
        claims = json.loads(_from_unpadded_b64(message.split(".")[1]))
    except ValueError as exc:
        raise HTTPException(status_code=401, detail="Invalid token") from exc
    if not isinstance(claims, dict):
        raise HTTPException(status_code=401, detail="Invalid token")
    if int(claims.get("exp") or 0) < time.time():
        raise HTTPException(status_code=401, detail="Token expired")
    return claims


def get_token_from_request(request: Request) -> Optional[str]:
    scheme, _, credentials = (request.headers.get("authorization") or "").partition(" ")
    if scheme.lower() == "bearer" and credentials.strip():
        return credentials.strip()
    return request.cookies.get(TOKEN_COOKIE_NAME) or None


def get_current_user_from_request(request: Request) -> Dict[str, Any]:
    cached = getattr(request.state, "user", None)
    if cached:
        return cached

    token = get_token_from_request(request)
    if token is None:
        raise HTTPException(status_code=401, detail="Not authenticated")
    user_id = decode_token(token).get("sub")
    user = get_user_by_id(str(user_id)) if user_id else None
    if user is None:
        raise HTTPException(status_code=401, detail="User not found")

    request.state.user = user
    return user


def get_current_user(user: Dict[str, Any] = Depends(get_current_user_from_request)) -> Dict[str, Any]:
    return user
