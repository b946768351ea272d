"""Import of exchange transaction history from a CSV export."""

from __future__ import annotations

import argparse
import csv
import logging
import math
import sys
from collections.abc import Iterator, Mapping, Sequence
from typing import TextIO

from sqlalchemy.engine import Connection

from coinbot.db import establish_connection
from coinbot.errors import AppError, DatabaseError, InvalidDataError
from coinbot.models import NewTransaction, insert_transaction
from coinbot.settings import load_env
from coinbot.timeutil import parse_naive_datetime

logger = logging.getLogger(__name__)

DEFAULT_PATH = "./transactions.csv"

_REQUIRED = ("id", "time", "operation", "amount", "trading_currency")
_OPERATIONS = {"Buy": "buy", "Sell": "sell"}


def _required(row: Mapping[str, str | None], key: str) -> str:
    value = row.get(key)
    if value is None:
        raise InvalidDataError(f"missing field `{key}`")
    return value


def _optional(row: Mapping[str, str | None], key: str) -> str | None:
    return row.get(key) or None


def _parse_float(text: str, field: str) -> float:
    if text != text.strip() or "_" in text:
        raise InvalidDataError(f"field `{field}` is not a number: {text!r}")
    try:
        return float(text)
    except ValueError:
        raise InvalidDataError(f"field `{field}` is not a number: {text!r}") from None


def _divide(numerator: float, denominator: float) -> float:
    try:
        return numerator / denominator
    except ZeroDivisionError:
        if numerator == 0 or math.isnan(numerator):
            return math.nan
        return math.copysign(math.inf, numerator) * math.copysign(1.0, denominator)


def parse_csv_row(row: Mapping[str, str | None], order_id: int) -> NewTransaction | None:
    """Turn one CSV row into a trade; rows that are not buys or sells give ``None``."""
    for key in _REQUIRED:
        _required(row, key)

    order_type = _OPERATIONS.get(_required(row, "operation"))
    if order_type is None:
        return None

    time_text = _required(row, "time")
    if len(time_text) < 19:
        raise InvalidDataError(f"time too short: {time_text!r}")
    created_at = parse_naive_datetime(time_text[:19])

    original = _optional(row, "original_currency") or "N/A"
    pair = f"{_required(row, 'trading_currency')}_{original}".lower()

    amount = abs(_parse_float(_required(row, "amount"), "amount"))
    price_text = _optional(row, "price")
    if price_text is None:
        raise InvalidDataError("missing field `price`")
    price = abs(_parse_float(price_text, "price"))

    return NewTransaction(
        order_id=order_id,
        created_at=created_at,
        rate=_divide(price, amount),
        amount=amount,
        order_type=order_type,
        pair=pair,
        price=price,
        fee_currency="",
        fee=0.0,
    )


def read_transactions(stream: TextIO) -> Iterator[NewTransaction]:
    """Yield the buys and sells of a CSV export, numbering them from 1."""
    order_id = 1
    for row in csv.DictReader(stream):
        transaction = parse_csv_row(row, order_id)
        if transaction is None:
            continue
        yield transaction
        order_id += 1


def import_transactions(conn: Connection, path: str = DEFAULT_PATH) -> int:
    """Store every trade in the CSV file; rows that fail to store are skipped.

    Each trade is committed on its own. Returns how many were stored.
    """
    stored = 0
    with open(path, newline="", encoding="utf-8") as stream:
        for transaction in read_transactions(stream):
            try:
                insert_transaction(conn, transaction)
                conn.commit()
            except DatabaseError as exc:
                conn.rollback()
                logger.warning("Skipping order %s: %s", transaction.order_id, exc)
                continue
            stored += 1
    return stored


def main(argv: Sequence[str] | None = None) -> int:
    """Import a transaction export into the database."""
    parser = argparse.ArgumentParser(description="Import exchange transactions from CSV.")
    parser.add_argument("path", nargs="?", default=DEFAULT_PATH, help="CSV export to read")
    args = parser.parse_args(argv)

    load_env()
    try:
        engine = establish_connection()
        try:
            with engine.connect() as conn:
                import_transactions(conn, args.path)
        finally:
            engine.dispose()
    except (AppError, OSError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0