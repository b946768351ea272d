"""Trading signals from moving averages of stored tickers."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from enum import Enum

from sqlalchemy import func, select
from sqlalchemy.engine import Connection
from sqlalchemy.exc import SQLAlchemyError

from coinbot import db
from coinbot.errors import DatabaseError, InvalidDataError
from coinbot.settings import load_env, require_env

_INT_RE = re.compile(r"[+-]?\d+")
_FLOAT_RE = re.compile(
    r"[+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf|infinity|nan)",
    re.IGNORECASE,
)


class SignalKind(Enum):
    """What to do with a currency."""

    BUY = "buy"
    SELL = "sell"
    HOLD = "hold"
    INSUFFICIENT_DATA = "insufficient_data"


@dataclass(frozen=True)
class TradeSignal:
    """A decision; ``amount`` is the quantity to buy or sell."""

    kind: SignalKind
    amount: float = 0.0


@dataclass(frozen=True)
class TradeSettings:
    """Moving-average periods and trading ratios."""

    ma_short: int
    ma_long: int
    spread_threshold: float = 1.0
    buy_ratio: float = 0.3
    sell_ratio: float = 0.5

    @classmethod
    def from_env(cls) -> TradeSettings:
        """Read ``MA_SHORT``, ``MA_LONG``, ``SPREAD_THRESHOLD``, ``BUY_RATIO``, ``SELL_RATIO``.

        All must be set; unparsable ratios fall back to their defaults.
        """
        load_env()
        return cls(
            ma_short=_parse_i32(require_env("MA_SHORT")),
            ma_long=_parse_i32(require_env("MA_LONG")),
            spread_threshold=_parse_float(require_env("SPREAD_THRESHOLD"), 1.0),
            buy_ratio=_parse_float(require_env("BUY_RATIO"), 0.3),
            sell_ratio=_parse_float(require_env("SELL_RATIO"), 0.5),
        )


def _parse_i32(text: str) -> int:
    if not _INT_RE.fullmatch(text):
        raise InvalidDataError(f"Parse error: invalid digit in {text!r}")
    value = int(text)
    if not -(2**31) <= value < 2**31:
        raise InvalidDataError(f"Parse error: number out of range: {text!r}")
    return value


def _parse_float(text: str, default: float) -> float:
    return float(text) if _FLOAT_RE.fullmatch(text) else default


def _divide(numerator: float, denominator: float) -> float:
    try:
        return numerator / denominator
    except ZeroDivisionError:
        if numerator == 0 or math.isnan(numerator):
            return math.nan
        return math.copysign(math.inf, numerator) * math.copysign(1.0, denominator)


def moving_average(conn: Connection, currency: str, period: int) -> float | None:
    """Average ``last`` of the ``period`` newest tickers of ``currency``."""
    recent = (
        select(db.tickers.c.last)
        .where(db.tickers.c.pair == currency)
        .order_by(db.tickers.c.timestamp.desc().nulls_first())
        .limit(period)
        .subquery()
    )
    try:
        value = conn.execute(select(func.avg(recent.c.last))).scalar()
    except SQLAlchemyError as exc:
        raise DatabaseError(exc) from exc
    return None if value is None else float(value)


def decide_signal(
    short_avg: float | None,
    long_avg: float | None,
    current_bid: float,
    current_ask: float,
    jpy_balance: float,
    crypto_balance: float,
    settings: TradeSettings,
) -> TradeSignal:
    """Hold on a wide spread, else buy on a golden cross and sell on a dead cross."""
    spread_rate = _divide(current_ask - current_bid, current_bid) * 100.0
    if spread_rate > settings.spread_threshold:
        return TradeSignal(SignalKind.HOLD)
    if short_avg is None or long_avg is None:
        return TradeSignal(SignalKind.INSUFFICIENT_DATA)
    if short_avg > long_avg:
        return TradeSignal(
            SignalKind.BUY, _divide(jpy_balance * settings.buy_ratio, current_ask)
        )
    if short_avg < long_avg:
        return TradeSignal(SignalKind.SELL, crypto_balance * settings.sell_ratio)
    return TradeSignal(SignalKind.HOLD)


def determine_trade_signal(
    conn: Connection,
    currency: str,
    current_bid: float,
    current_ask: float,
    jpy_balance: float,
    crypto_balance: float,
    settings: TradeSettings | None = None,
) -> TradeSignal:
    """Decide a signal for ``currency`` from stored tickers and current prices."""
    if settings is None:
        settings = TradeSettings.from_env()
    short_avg = moving_average(conn, currency, settings.ma_short)
    long_avg = moving_average(conn, currency, settings.ma_long)
    return decide_signal(
        short_avg,
        long_avg,
        current_bid,
        current_ask,
        jpy_balance,
        crypto_balance,
        settings,
    )