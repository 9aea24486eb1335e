"""Client for the remote goal-planning webhook.

The webhook receives the user's text as ``?query=...`` and answers with a
JSON object carrying ``ahorro_mensual``, ``fecha_proyectada`` and
``recomendaciones``. Any failure is logged and reported as ``None``, the
same signal as "no plan", so the view only has one error path.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from http.client import HTTPException
from typing import Any, List, Optional, Union
from urllib.parse import urlencode
from urllib.request import urlopen

from dotenv import load_dotenv
from pydantic import BaseModel, ValidationError

from logging_setup import get_logger

load_dotenv()

_logger = get_logger("finance_dashboard.goal_webhook")

DEFAULT_TIMEOUT_SECONDS = 30.0
SUGGESTION_KEYS = ("sugerencia", "suggestion")


class GoalWebhookPayload(BaseModel):
    ahorro_mensual: Union[float, str]
    fecha_proyectada: str
    recomendaciones: Any


@dataclass(frozen=True)
class RemoteGoalPlan:
    monthly_amount: Union[float, str]
    projected_date: str
    recommendations: Any


class GoalWebhookUnavailable(RuntimeError):
    """Raised when the webhook cannot be reached or answers badly."""


def webhook_url() -> Optional[str]:
    return os.getenv("GOAL_WEBHOOK_URL") or None


def _timeout() -> float:
    raw = os.getenv("GOAL_WEBHOOK_TIMEOUT")
    try:
        return float(raw) if raw else DEFAULT_TIMEOUT_SECONDS
    except ValueError:
        return DEFAULT_TIMEOUT_SECONDS


def _request_plan(query: str, url: str, timeout: float) -> GoalWebhookPayload:
    separator = "&" if "?" in url else "?"
    full_url = f"{url}{separator}{urlencode({'query': query})}"
    try:
        with urlopen(full_url, timeout=timeout) as response:
            status = getattr(response, "status", 200)
            if not 200 <= status < 300:
                raise GoalWebhookUnavailable(f"Goal webhook answered {status}")
            payload = json.load(response)
    # OSError covers URLError and timeouts; ValueError covers bad JSON and bad URLs.
    except (OSError, HTTPException, ValueError) as exc:
        raise GoalWebhookUnavailable("Goal webhook unavailable") from exc

    try:
        return GoalWebhookPayload.model_validate(payload)
    except ValidationError as exc:
        raise GoalWebhookUnavailable("Goal webhook response missing fields") from exc


def fetch_goal_plan(
    query: str,
    url: Optional[str] = None,
    timeout: Optional[float] = None,
) -> Optional[RemoteGoalPlan]:
    """Ask the webhook for a plan; ``None`` on any failure."""
    target = url or webhook_url()
    if not target:
        _logger.warning("Goal webhook requested but GOAL_WEBHOOK_URL is not set")
        return None

    try:
        payload = _request_plan(query, target, timeout or _timeout())
    except GoalWebhookUnavailable:
        _logger.exception("Goal webhook call failed")
        return None

    return RemoteGoalPlan(
        monthly_amount=payload.ahorro_mensual,
        projected_date=payload.fecha_proyectada,
        recommendations=payload.recomendaciones,
    )


def _dump(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False)


def _suggestion_text(item: Any) -> str:
    if isinstance(item, str):
        return item
    if isinstance(item, dict):
        for key in SUGGESTION_KEYS:
            if isinstance(item.get(key), str):
                return item[key]
    return _dump(item)


def recommendation_lines(value: Any) -> List[str]:
    """Flatten the webhook's recommendations into display lines.

    Handles a list of strings, a mapping of category to string, a mapping
    of category to an object with a ``sugerencia``/``suggestion`` field, and
    falls back to JSON for anything else.
    """
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, (list, tuple)):
        return [_suggestion_text(item) for item in value]
    if isinstance(value, dict):
        return [f"{category}: {_suggestion_text(item)}" for category, item in value.items()]
    return [_dump(value)]
