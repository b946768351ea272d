from datetime import datetime

import pytest

from coinbot.db import create_schema, establish_connection
from coinbot.models import NewTransaction, insert_transaction
from coinbot.repositories.transaction import total_invested


@pytest.fixture
def memory_conn():
    engine = establish_connection("sqlite://")
    create_schema(engine)
    connection = engine.connect()
    yield connection
    connection.close()
    engine.dispose()


@pytest.mark.parametrize(
    "trades, expected",
    [
        ([], 0.0),
        ([("buy", 1500.0), ("sell", 9999.0), ("buy", 250.5)], 1750.5),
        ([("sell", 700.0)], 0.0),
    ],
)
def test_total_invested_counts_buys_only(memory_conn, trades, expected):
    for order_id, (order_type, price) in enumerate(trades, start=1):
        insert_transaction(
            memory_conn,
            NewTransaction(
                order_id=order_id,
                created_at=datetime(2024, 1, 1, 12),
                rate=1.0,
                amount=price,
                order_type=order_type,
                pair="btc_jpy",
                price=price,
                fee_currency="",
                fee=0.0,
            ),
        )
    assert total_invested(memory_conn) == pytest.approx(expected)