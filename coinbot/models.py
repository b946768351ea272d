"""Records stored in the database and the functions that insert them."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from contextlib import contextmanager
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any

from sqlalchemy.engine import Connection
from sqlalchemy.exc import SQLAlchemyError

from coinbot import db
from coinbot.errors import DatabaseError, InvalidDataError
from coinbot.timeutil import (
    format_naive_datetime,
    from_unix_timestamp,
    parse_naive_datetime,
    to_unix_timestamp,
)


def _field(data: Mapping[str, Any], key: str) -> Any:
    if not isinstance(data, Mapping):
        raise InvalidDataError(f"expected an object, got {data!r}")
    try:
        return data[key]
    except KeyError:
        raise InvalidDataError(f"missing field `{key}`") from None


def _number(data: Mapping[str, Any], key: str) -> float:
    value = _field(data, key)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidDataError(f"field `{key}` must be a number, got {value!r}")
    return float(value)


def _integer(data: Mapping[str, Any], key: str) -> int:
    value = _field(data, key)
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidDataError(f"field `{key}` must be an integer, got {value!r}")
    return value


def _string(data: Mapping[str, Any], key: str) -> str:
    value = _field(data, key)
    if not isinstance(value, str):
        raise InvalidDataError(f"field `{key}` must be a string, got {value!r}")
    return value


@contextmanager
def _database_errors() -> Iterator[None]:
    try:
        yield
    except SQLAlchemyError as exc:
        raise DatabaseError(exc) from exc


@dataclass
class NewOrder:
    """An order about to be placed and recorded."""

    pair: str
    order_type: str
    amount: float
    rate: float = 0.0


@dataclass(frozen=True)
class Order:
    """A stored order."""

    id: int
    rate: float
    amount: float
    order_type: str
    pair: str
    created_at: datetime


@dataclass(frozen=True)
class NewSummary:
    """Totals of a portfolio report about to be stored."""

    total_invested: float
    total_jpy_value: float
    pl: float


@dataclass(frozen=True)
class Summary:
    """A stored portfolio report."""

    id: int
    total_invested: float
    total_jpy_value: float
    pl: float
    created_at: datetime


@dataclass(frozen=True)
class NewSummaryRecord:
    """One currency's line of a portfolio report."""

    currency: str
    amount: float
    rate: float
    jpy_value: float
    summary_id: int | None = None


@dataclass(frozen=True)
class SummaryRecord:
    """A stored line of a portfolio report."""

    id: int
    summary_id: int
    currency: str
    amount: float
    rate: float
    jpy_value: float
    created_at: datetime


@dataclass
class NewTicker:
    """Market ticker values as delivered by the exchange."""

    last: float
    bid: float
    ask: float
    high: float
    low: float
    volume: float
    timestamp: datetime
    pair: str | None = None

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> NewTicker:
        """Build a ticker from decoded JSON; ``timestamp`` is UNIX seconds."""
        pair = data.get("pair") if isinstance(data, Mapping) else None
        if pair is not None and not isinstance(pair, str):
            raise InvalidDataError(f"field `pair` must be a string, got {pair!r}")
        return cls(
            last=_number(data, "last"),
            bid=_number(data, "bid"),
            ask=_number(data, "ask"),
            high=_number(data, "high"),
            low=_number(data, "low"),
            volume=_number(data, "volume"),
            timestamp=from_unix_timestamp(_integer(data, "timestamp")),
            pair=pair,
        )

    def to_json(self) -> dict[str, Any]:
        """Return a JSON-ready mapping with ``timestamp`` as UNIX seconds."""
        return {
            "pair": self.pair,
            "last": self.last,
            "bid": self.bid,
            "ask": self.ask,
            "high": self.high,
            "low": self.low,
            "volume": self.volume,
            "timestamp": to_unix_timestamp(self.timestamp),
        }


@dataclass(frozen=True)
class Ticker:
    """A stored ticker."""

    id: int
    pair: str
    last: float
    bid: float
    ask: float
    high: float
    low: float
    volume: float
    timestamp: datetime | None


@dataclass(frozen=True)
class NewTransaction:
    """An executed trade about to be stored."""

    order_id: int
    created_at: datetime
    rate: float
    amount: float
    order_type: str
    pair: str
    price: float
    fee_currency: str
    fee: float

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> NewTransaction:
        """Build a transaction from decoded JSON with a text ``created_at``."""
        return cls(
            order_id=_integer(data, "order_id"),
            created_at=parse_naive_datetime(_string(data, "created_at")),
            rate=_number(data, "rate"),
            amount=_number(data, "amount"),
            order_type=_string(data, "order_type"),
            pair=_string(data, "pair"),
            price=_number(data, "price"),
            fee_currency=_string(data, "fee_currency"),
            fee=_number(data, "fee"),
        )

    def to_json(self) -> dict[str, Any]:
        """Return a JSON-ready mapping with ``created_at`` as text."""
        return {
            "order_id": self.order_id,
            "created_at": format_naive_datetime(self.created_at),
            "rate": self.rate,
            "amount": self.amount,
            "order_type": self.order_type,
            "pair": self.pair,
            "price": self.price,
            "fee_currency": self.fee_currency,
            "fee": self.fee,
        }


@dataclass(frozen=True)
class Transaction:
    """A stored trade."""

    id: int
    order_id: int
    created_at: datetime
    rate: float
    amount: float
    order_type: str
    pair: str
    price: float
    fee_currency: str
    fee: float


def insert_order(conn: Connection, new_order: NewOrder) -> int:
    """Store an order and return its id."""
    with _database_errors():
        result = conn.execute(
            db.orders.insert().values(
                rate=new_order.rate,
                pair=new_order.pair,
                order_type=new_order.order_type,
                amount=new_order.amount,
            )
        )
        return result.inserted_primary_key[0]


def insert_summary_record(conn: Connection, record: NewSummaryRecord) -> int:
    """Store one report line and return its id."""
    with _database_errors():
        result = conn.execute(
            db.summary_records.insert().values(
                summary_id=record.summary_id,
                currency=record.currency,
                amount=record.amount,
                rate=record.rate,
                jpy_value=record.jpy_value,
            )
        )
        return result.inserted_primary_key[0]


def insert_summary(
    conn: Connection,
    new_summary: NewSummary,
    new_summary_records: Iterable[NewSummaryRecord],
) -> int:
    """Store a report and its lines, linking the lines to it; return its id."""
    with _database_errors():
        result = conn.execute(
            db.summaries.insert().values(
                total_invested=new_summary.total_invested,
                total_jpy_value=new_summary.total_jpy_value,
                pl=new_summary.pl,
            )
        )
        summary_id = result.inserted_primary_key[0]
    for record in new_summary_records:
        insert_summary_record(conn, replace(record, summary_id=summary_id))
    return summary_id


def insert_ticker(conn: Connection, new_ticker: NewTicker) -> int:
    """Store a ticker and return its id."""
    with _database_errors():
        result = conn.execute(
            db.tickers.insert().values(
                pair=new_ticker.pair,
                last=new_ticker.last,
                bid=new_ticker.bid,
                ask=new_ticker.ask,
                high=new_ticker.high,
                low=new_ticker.low,
                volume=new_ticker.volume,
                timestamp=new_ticker.timestamp,
            )
        )
        return result.inserted_primary_key[0]


def insert_transaction(conn: Connection, new_transaction: NewTransaction) -> int:
    """Store a trade and return its id."""
    with _database_errors():
        result = conn.execute(
            db.transactions.insert().values(
                order_id=new_transaction.order_id,
                created_at=new_transaction.created_at,
                rate=new_transaction.rate,
                amount=new_transaction.amount,
                order_type=new_transaction.order_type,
                pair=new_transaction.pair,
                price=new_transaction.price,
                fee_currency=new_transaction.fee_currency,
                fee=new_transaction.fee,
            )
        )
        return result.inserted_primary_key[0]