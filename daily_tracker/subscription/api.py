# -*- coding: utf-8 -*-
"""Subscription — API endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Header, HTTPException, Request

from ..auth.security import get_current_user
from ..config import settings
from .models import (
    CheckoutRequest,
    FreeLimits,
    GrantUnlimitedRequest,
    PortalRequest,
    SessionUrlResponse,
    SubscriptionConfigResponse,
    SubscriptionStatus,
    SubscriptionStatusResponse,
    UsageCheckResponse,
    UsageRequest,
)
from .storage import check_usage, grant_unlimited, has_unlimited_access, increment_usage, refresh_usage, set_customer_id
from .stripe_client import (
    StripeError,
    WebhookSignatureError,
    construct_event,
    create_checkout_session,
    create_customer,
    create_portal_session,
)
from .webhooks import handle_event

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/subscription", tags=["Subscription"])


def _limits() -> FreeLimits:
    return FreeLimits(ai_calculations=int(settings.free_ai_calculations), uploads=int(settings.free_uploads))


@router.get("/config", response_model=SubscriptionConfigResponse, summary="Price id and free-tier limits")
def get_config(user: dict = Depends(get_current_user)):  # noqa: ARG001
    return SubscriptionConfigResponse(
        premium_price_id=settings.stripe_premium_price_id,
        limits=_limits(),
        trial_period_days=int(settings.trial_period_days),
    )


@router.get("/status", response_model=SubscriptionStatusResponse, summary="My subscription and usage")
def get_status(user: dict = Depends(get_current_user)):
    row = refresh_usage(user["id"])
    if not row:
        raise HTTPException(status_code=404, detail="User not found")
    return SubscriptionStatusResponse(
        subscription_status=SubscriptionStatus(row.get("subscription_status") or "free"),
        trial_end_date=row.get("trial_end_date"),
        subscription_end_date=row.get("subscription_end_date"),
        monthly_ai_usage=int(row["monthly_ai_usage"]),
        monthly_uploads=int(row["monthly_uploads"]),
        last_usage_reset=row["last_usage_reset"],
        is_unlimited=bool(row["is_unlimited"]),
        has_unlimited_access=has_unlimited_access(row),
        limits=_limits(),
    )


@router.post("/usage/check", response_model=UsageCheckResponse, summary="Can I perform this action?")
def usage_check(request: UsageRequest, user: dict = Depends(get_current_user)):
    return UsageCheckResponse(**check_usage(user["id"], request.action))


@router.post("/usage/increment", summary="Count one action against the free tier")
def usage_increment(request: UsageRequest, user: dict = Depends(get_current_user)):
    increment_usage(user["id"], request.action)
    return {"success": True}


@router.post("/checkout", response_model=SessionUrlResponse, summary="Start a Stripe checkout session")
def checkout(request: CheckoutRequest, user: dict = Depends(get_current_user)):
    price_id = request.price_id or settings.stripe_premium_price_id
    if not price_id:
        raise HTTPException(status_code=400, detail="No price configured")
    try:
        customer_id = user.get("customer_id")
        if not customer_id:
            customer_id = create_customer(email=user["email"], user_id=user["id"])
            set_customer_id(user["id"], customer_id)
        url = create_checkout_session(
            customer_id=customer_id,
            price_id=price_id,
            success_url=request.success_url,
            cancel_url=request.cancel_url,
            user_id=user["id"],
            trial_period_days=int(settings.trial_period_days),
        )
    except StripeError as exc:
        logger.error("Stripe checkout error for user %s: %s", user["id"], exc)
        raise HTTPException(status_code=502, detail="Failed to create checkout session") from exc
    return SessionUrlResponse(session_url=url)


@router.post("/portal", response_model=SessionUrlResponse, summary="Open the Stripe customer portal")
def portal(request: PortalRequest, user: dict = Depends(get_current_user)):
    customer_id = user.get("customer_id")
    if not customer_id:
        raise HTTPException(status_code=400, detail="No customer found")
    try:
        url = create_portal_session(customer_id=customer_id, return_url=request.return_url)
    except StripeError as exc:
        logger.error("Stripe portal error for user %s: %s", user["id"], exc)
        raise HTTPException(status_code=502, detail="Failed to create portal session") from exc
    return SessionUrlResponse(session_url=url)


@router.post("/admin/grant-unlimited", summary="Admin: grant unlimited access")
def admin_grant_unlimited(request: GrantUnlimitedRequest, user: dict = Depends(get_current_user)):
    if user["email"].lower() not in settings.admin_emails:
        raise HTTPException(status_code=403, detail="Admin access required")
    if not grant_unlimited(request.user_email):
        raise HTTPException(status_code=404, detail="User not found")
    return {"success": True, "message": f"Unlimited access granted to {request.user_email}"}


@router.post("/webhook", summary="Stripe webhook")
async def webhook(request: Request, stripe_signature: str | None = Header(default=None)):
    if not stripe_signature:
        raise HTTPException(status_code=400, detail="No signature")
    if not settings.stripe_webhook_secret:
        raise HTTPException(status_code=500, detail="Webhook secret not configured")

    payload = await request.body()
    try:
        event = construct_event(payload, stripe_signature, settings.stripe_webhook_secret)
    except WebhookSignatureError as exc:
        logger.warning("Webhook signature verification failed: %s", exc)
        raise HTTPException(status_code=400, detail="Invalid signature") from exc

    handle_event(event)
    return {"received": True}
