# -*- coding: utf-8 -*-
"""Meals — macro estimation via an OpenAI-compatible chat completions API."""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Optional

import httpx
from pydantic import ValidationError

from ..config import settings
from .models import Macros

logger = logging.getLogger(__name__)

_JSON_OBJECT_RE = re.compile(r"\{[^{}]+\}")

_SYSTEM_PROMPT = (
    "You are a nutrition assistant. Return STRICT JSON only. "
    "Do NOT wrap in markdown or code fences. "
    'Output exactly one object: {"calories": number, "protein": number, "carbs": number, "fat": number}. '
    "Protein, carbs and fat are grams. Estimate reasonable values based on typical portions."
)


def _user_prompt(description: str, image_url: Optional[str]) -> str:
    prompt = f'Analyze this food description and estimate its macronutrients: "{description}".'
    if image_url:
        prompt += (
            "\nA photo of the meal is also available. Use it to refine portion sizes, "
            "spot ingredients missing from the description and account for cooking method, "
            f"sides and sauces. Photo: {image_url}"
        )
    return prompt


def _extract_content(data: Any) -> str:
    if not isinstance(data, dict):
        raise ValueError("response is not a JSON object")
    choices = data.get("choices")
    if not isinstance(choices, list) or not choices:
        raise ValueError("response has no choices")
    first = choices[0]
    message = first.get("message") if isinstance(first, dict) else None
    if not isinstance(message, dict):
        raise ValueError("response choice has no message")
    content = message.get("content")
    if not isinstance(content, str) or not content.strip():
        raise ValueError("response has empty content")
    return content


def parse_macros(text: str) -> Macros:
    """Pull the first flat JSON object out of model output."""
    match = _JSON_OBJECT_RE.search(text or "")
    if not match:
        raise ValueError("no JSON object in model output")
    return Macros.model_validate(json.loads(match.group(0)))


def estimate_macros(description: str, image_url: Optional[str] = None) -> Optional[Macros]:
    """Estimate macros for a meal, or None when estimation is unavailable.

    Failures are logged, never raised: a meal is always saved, with or without
    macros.
    """
    if not settings.macros_api_key:
        logger.warning("Macro estimation skipped: MACROS_API_KEY is not set")
        return None

    url = f"{settings.macros_base_url.rstrip('/')}/chat/completions"
    payload = {
        "model": settings.macros_model,
        "temperature": 0,
        "messages": [
            {"role": "system", "content": _SYSTEM_PROMPT},
            {"role": "user", "content": _user_prompt(description, image_url)},
        ],
    }
    headers = {"Authorization": f"Bearer {settings.macros_api_key}"}

    try:
        with httpx.Client(timeout=settings.macros_timeout, follow_redirects=True) as client:
            resp = client.post(url, headers=headers, json=payload)
            resp.raise_for_status()
            content = _extract_content(resp.json())
        return parse_macros(content)
    except httpx.HTTPError as exc:
        logger.warning("Macro estimation request failed: %s", exc)
    except (ValidationError, ValueError) as exc:
        logger.warning("Macro estimation returned unusable output: %s", exc)
    return None
