# -*- coding: utf-8 -*-
"""Subscription — minimal Stripe REST client and webhook signature check."""

from __future__ import annotations

import hashlib
import hmac
import json
import logging
import time
from typing import Any, Dict, List, Optional

import httpx

from ..config import settings

logger = logging.getLogger(__name__)

WEBHOOK_TOLERANCE_SECONDS = 300


class StripeError(RuntimeError):
    """Stripe could not be reached or rejected the request."""


class WebhookSignatureError(ValueError):
    """The `Stripe-Signature` header does not match the payload."""


def _post(path: str, data: Dict[str, Any]) -> Dict[str, Any]:
    if not settings.stripe_secret_key:
        raise StripeError("STRIPE_SECRET_KEY is not configured")
    url = f"{settings.stripe_api_base.rstrip('/')}{path}"
    try:
        with httpx.Client(timeout=30, follow_redirects=True) as client:
            resp = client.post(url, data=data, auth=(settings.stripe_secret_key, ""))
    except httpx.HTTPError as exc:
        raise StripeError(f"Stripe request failed: {exc}") from exc
    if resp.status_code >= 400:
        try:
            message = (resp.json().get("error") or {}).get("message") or resp.text
        except ValueError:
            message = resp.text
        raise StripeError(f"Stripe returned {resp.status_code}: {message}")
    return resp.json()


def create_customer(*, email: str, user_id: str) -> str:
    customer = _post("/v1/customers", {"email": email, "metadata[userId]": user_id})
    return str(customer["id"])


def create_checkout_session(
    *,
    customer_id: str,
    price_id: str,
    success_url: str,
    cancel_url: str,
    user_id: str,
    trial_period_days: Optional[int] = None,
) -> str:
    data: Dict[str, Any] = {
        "customer": customer_id,
        "mode": "subscription",
        "payment_method_types[0]": "card",
        "line_items[0][price]": price_id,
        "line_items[0][quantity]": 1,
        "success_url": success_url,
        "cancel_url": cancel_url,
        "metadata[userId]": user_id,
    }
    if trial_period_days:
        data["subscription_data[trial_period_days]"] = int(trial_period_days)
    session = _post("/v1/checkout/sessions", data)
    return str(session["url"])


def create_portal_session(*, customer_id: str, return_url: str) -> str:
    session = _post("/v1/billing_portal/sessions", {"customer": customer_id, "return_url": return_url})
    return str(session["url"])


def _parse_signature_header(header: str) -> tuple[int, List[str]]:
    timestamp: Optional[int] = None
    signatures: List[str] = []
    for item in header.split(","):
        key, _, value = item.strip().partition("=")
        if key == "t":
            try:
                timestamp = int(value)
            except ValueError as exc:
                raise WebhookSignatureError("Malformed signature timestamp") from exc
        elif key == "v1" and value:
            signatures.append(value)
    if timestamp is None or not signatures:
        raise WebhookSignatureError("Signature header missing t or v1")
    return timestamp, signatures


def sign_payload(payload: bytes, secret: str, timestamp: int) -> str:
    signed = f"{timestamp}.".encode("ascii") + payload
    return hmac.new(secret.encode("utf-8"), signed, hashlib.sha256).hexdigest()


def construct_event(
    payload: bytes,
    sig_header: str,
    secret: str,
    *,
    tolerance: int = WEBHOOK_TOLERANCE_SECONDS,
    now: Optional[float] = None,
) -> Dict[str, Any]:
    """Verify a webhook delivery and return the decoded event."""
    timestamp, signatures = _parse_signature_header(sig_header or "")
    expected = sign_payload(payload, secret, timestamp)
    if not any(hmac.compare_digest(expected, sig) for sig in signatures):
        raise WebhookSignatureError("No signature matches the payload")
    current = time.time() if now is None else now
    if abs(current - timestamp) > tolerance:
        raise WebhookSignatureError("Signature timestamp outside the tolerance zone")
    try:
        event = json.loads(payload.decode("utf-8"))
    except (UnicodeDecodeError, ValueError) as exc:
        raise WebhookSignatureError("Payload is not JSON") from exc
    if not isinstance(event, dict):
        raise WebhookSignatureError("Payload is not an event object")
    return event
