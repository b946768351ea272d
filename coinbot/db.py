"""Database tables and engine creation."""

from __future__ import annotations

from sqlalchemy import (
    Column,
    DateTime,
    Float,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    create_engine,
    func,
)
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from coinbot.errors import DatabaseError
from coinbot.settings import load_env, require_env

metadata = MetaData()


def _key() -> Column:
    return Column("id", Integer, primary_key=True)


def _created_at() -> Column:
    return Column("created_at", DateTime, nullable=False, server_default=func.now())


def _floats(*names: str) -> list[Column]:
    return [Column(name, Float, nullable=False) for name in names]


def _labels(*names: str) -> list[Column]:
    return [Column(name, String(255), nullable=False) for name in names]


orders = Table(
    "orders",
    metadata,
    _key(),
    *_floats("rate", "amount"),
    *_labels("order_type", "pair"),
    _created_at(),
)

summaries = Table(
    "summaries",
    metadata,
    _key(),
    *_floats("total_invested", "total_jpy_value", "pl"),
    _created_at(),
)

summary_records = Table(
    "summary_records",
    metadata,
    _key(),
    Column("summary_id", Integer, nullable=False),
    *_labels("currency"),
    *_floats("amount", "rate", "jpy_value"),
    _created_at(),
)

tickers = Table(
    "tickers",
    metadata,
    _key(),
    Column("pair", Text, nullable=False),
    *_floats("last", "bid", "ask", "high", "low", "volume"),
    Column("timestamp", DateTime, nullable=True),
)

transactions = Table(
    "transactions",
    metadata,
    _key(),
    Column("order_id", Integer, nullable=False),
    _created_at(),
    *_floats("rate", "amount"),
    *_labels("order_type", "pair"),
    *_floats("price"),
    *_labels("fee_currency"),
    *_floats("fee"),
)


def establish_connection(database_url: str | None = None) -> Engine:
    """Create an engine for ``database_url``, or for ``DATABASE_URL`` if omitted."""
    if database_url is None:
        load_env()
        database_url = require_env("DATABASE_URL")
    try:
        return create_engine(database_url)
    except (SQLAlchemyError, ImportError, ValueError) as exc:
        raise DatabaseError(f"Failed to create pool: {exc}") from exc


def create_schema(engine: Engine) -> None:
    """Create any tables that do not exist yet."""
    try:
        metadata.create_all(engine)
    except SQLAlchemyError as exc:
        raise DatabaseError(exc) from exc