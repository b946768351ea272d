"""Notifications sent to a Slack incoming webhook."""

from __future__ import annotations

import logging
import math
from decimal import Decimal
from typing import Any

import requests

from coinbot.errors import ApiError
from coinbot.models import NewOrder, NewSummary
from coinbot.settings import load_env, require_env

logger = logging.getLogger(__name__)

WEBHOOK_ENV = "SLACK_INCOMMING_WEBHOOK_URL"

_I32_MAX = 2**31 - 1
_I32_MIN = -(2**31)


def _display(value: float) -> str:
    """Format a number the way a plain decimal display shows it (``2``, ``0.5``)."""
    value = float(value)
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    if value == 0:
        return "-0" if math.copysign(1.0, value) < 0 else "0"
    if value.is_integer():
        return str(int(value))
    return format(Decimal(repr(value)), "f")


def _round_i32(value: float) -> int:
    """Round half away from zero and saturate to the 32-bit integer range."""
    if math.isnan(value):
        return 0
    if value >= _I32_MAX:
        return _I32_MAX
    if value <= _I32_MIN:
        return _I32_MIN
    floor = math.floor(value)
    diff = value - floor
    if diff > 0.5 or (diff == 0.5 and value > 0):
        floor += 1
    return int(floor)


def _webhook_url(url: str | None) -> str:
    if url is not None:
        return url
    load_env()
    return require_env(WEBHOOK_ENV)


def order_payload(new_order: NewOrder) -> dict[str, Any]:
    """Build the message announcing an executed order."""
    return {
        "type": "section",
        "text": {"type": "mrkdwn", "text": ":coin: *注文を実行しました！*"},
        "fields": [
            {"type": "mrkdwn", "text": f"*通貨:* {new_order.pair}"},
            {"type": "mrkdwn", "text": f"*オペレーション:* {new_order.order_type}"},
            {"type": "mrkdwn", "text": f"*Amount:* {_display(new_order.amount)}"},
        ],
    }


def summary_payload(new_summary: NewSummary) -> dict[str, Any]:
    """Build the daily portfolio report message."""
    text = (
        ":moneybag: *本日の資産レポート*\n"
        f" *Total invested:* {_display(new_summary.total_invested)}円\n"
        f" *Total JPY value:* {_round_i32(new_summary.total_jpy_value)}円\n"
        f" *P/L:* {_round_i32(new_summary.pl)}円"
    )
    return {"blocks": [{"type": "section", "text": {"type": "mrkdwn", "text": text}}]}


def send_order_information(new_order: NewOrder, url: str | None = None) -> None:
    """Post an order notification; the webhook URL defaults to the environment."""
    target = _webhook_url(url)
    try:
        response = requests.post(target, json=order_payload(new_order))
    except requests.RequestException as exc:
        raise ApiError(exc) from exc
    logger.info(
        "Order slack response debug: status=%s, body=%s",
        response.status_code,
        response.text,
    )


def send_summary(new_summary: NewSummary, url: str | None = None) -> None:
    """Post the portfolio report; raises ``ApiError`` on a failing status."""
    target = _webhook_url(url)
    try:
        response = requests.post(target, json=summary_payload(new_summary))
        response.raise_for_status()
    except requests.RequestException as exc:
        raise ApiError(exc) from exc