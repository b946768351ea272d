"""Queries over stored trades."""

from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.engine import Connection
from sqlalchemy.exc import SQLAlchemyError

from coinbot import db
from coinbot.errors import DatabaseError


def total_invested(conn: Connection) -> float:
    """Sum of ``price`` over all buy trades, 0.0 when there are none."""
    trades = db.transactions.c
    query = select(func.coalesce(func.sum(trades.price), 0.0)).where(
        trades.order_type == "buy"
    )
    try:
        return float(conn.scalar(query))
    except SQLAlchemyError as exc:
        raise DatabaseError(str(exc)) from exc