from datetime import datetime, timedelta

import pytest

from coinbot.db import create_schema, establish_connection
from coinbot.errors import EnvVarError, InvalidDataError
from coinbot.models import NewTicker, insert_ticker
from coinbot.repositories.ticker import (
    SignalKind,
    TradeSettings,
    decide_signal,
    determine_trade_signal,
    moving_average,
)


@pytest.fixture
def conn():
    engine = establish_connection("sqlite://")
    create_schema(engine)
    with engine.begin() as connection:
        yield connection
    engine.dispose()


def _store(conn, pair, values):
    start = datetime(2024, 1, 1)
    for offset, last in enumerate(values):
        insert_ticker(
            conn,
            NewTicker(
                last=last,
                bid=1.0,
                ask=1.0,
                high=1.0,
                low=1.0,
                volume=1.0,
                timestamp=start + timedelta(minutes=offset),
                pair=pair,
            ),
        )


SETTINGS = TradeSettings(ma_short=2, ma_long=4, buy_ratio=1.0, sell_ratio=1.0)


def test_buy_on_golden_cross():
    signal = decide_signal(110.0, 100.0, 100.0, 100.0, 500.0, 2.0, SETTINGS)
    assert signal.kind is SignalKind.BUY
    assert signal.amount * 100.0 == pytest.approx(500.0)


def test_sell_on_dead_cross():
    signal = decide_signal(90.0, 100.0, 100.0, 100.0, 500.0, 2.0, SETTINGS)
    assert signal.kind is SignalKind.SELL
    assert signal.amount == 2.0


def test_hold_on_equal_averages():
    assert decide_signal(100.0, 100.0, 100.0, 100.0, 1.0, 1.0, SETTINGS).kind is SignalKind.HOLD


def test_hold_on_wide_spread_even_with_cross():
    assert decide_signal(110.0, 100.0, 100.0, 105.0, 1.0, 1.0, SETTINGS).kind is SignalKind.HOLD


def test_hold_on_zero_bid():
    assert decide_signal(1.0, 2.0, 0.0, 1.0, 1.0, 1.0, SETTINGS).kind is SignalKind.HOLD


@pytest.mark.parametrize("short_avg, long_avg", [(None, 1.0), (1.0, None), (None, None)])
def test_insufficient_data(short_avg, long_avg):
    signal = decide_signal(short_avg, long_avg, 100.0, 100.0, 1.0, 1.0, SETTINGS)
    assert signal.kind is SignalKind.INSUFFICIENT_DATA


def test_settings_from_env(monkeypatch):
    for name, value in {
        "MA_SHORT": "5",
        "MA_LONG": "25",
        "SPREAD_THRESHOLD": "2.5",
        "BUY_RATIO": "oops",
        "SELL_RATIO": "0.75",
    }.items():
        monkeypatch.setenv(name, value)
    settings = TradeSettings.from_env()
    assert (settings.ma_short, settings.ma_long) == (5, 25)
    assert settings.spread_threshold == 2.5
    assert settings.buy_ratio == 0.3
    assert settings.sell_ratio == 0.75


def test_settings_bad_period(monkeypatch):
    monkeypatch.setenv("MA_SHORT", "abc")
    monkeypatch.setenv("MA_LONG", "25")
    with pytest.raises(InvalidDataError):
        TradeSettings.from_env()


def test_settings_missing_variable(monkeypatch):
    monkeypatch.setenv("MA_SHORT", "5")
    monkeypatch.delenv("MA_LONG", raising=False)
    with pytest.raises(EnvVarError):
        TradeSettings.from_env()


def test_moving_average_uses_newest(conn):
    _store(conn, "btc", [10.0, 20.0, 30.0])
    _store(conn, "eth", [1000.0])
    assert moving_average(conn, "btc", 2) == pytest.approx(25.0)


def test_moving_average_empty(conn):
    assert moving_average(conn, "btc", 5) is None


def test_determine_trade_signal_buy(conn):
    _store(conn, "btc", [10.0, 10.0, 30.0, 30.0])
    signal = determine_trade_signal(conn, "btc", 100.0, 100.0, 100.0, 3.0, SETTINGS)
    assert signal.kind is SignalKind.BUY
    assert signal.amount * 100.0 == pytest.approx(100.0)


def test_determine_trade_signal_sell(conn):
    _store(conn, "btc", [30.0, 30.0, 10.0, 10.0])
    signal = determine_trade_signal(conn, "btc", 100.0, 100.0, 100.0, 3.0, SETTINGS)
    assert signal.kind is SignalKind.SELL
    assert signal.amount == 3.0