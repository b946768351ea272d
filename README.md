# coinbot

Building blocks for a small crypto trading setup:

- database tables for orders, tickers, trades and portfolio summaries, and
  functions that store records in them,
- a moving-average crossover that turns stored ticker history and current
  bid/ask prices into a buy, sell or hold signal,
- Slack webhook messages announcing an order or a daily portfolio report,
- a command that imports an exchange transaction history CSV into the
  database.

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Configuration

Settings are read from the environment; a `.env` file found from the working
directory upwards is loaded, and variables already set are kept.

```
DATABASE_URL=sqlite:///coinbot.db

SLACK_INCOMMING_WEBHOOK_URL=https://hooks.example.com/services/placeholder

MA_SHORT=5
MA_LONG=25
SPREAD_THRESHOLD=1.0
BUY_RATIO=0.3
SELL_RATIO=0.5
```

- `DATABASE_URL` is any SQLAlchemy database URL, used by
  `coinbot.db.establish_connection()` when no URL is passed.
- `SLACK_INCOMMING_WEBHOOK_URL` is the webhook used by `coinbot.slack` when
  no URL is passed.
- `MA_SHORT` and `MA_LONG` are the number of most recent tickers averaged for
  the short and long moving averages; both must be integers.
- `SPREAD_THRESHOLD` is the largest bid/ask spread, in percent, at which a
  trade is still signalled; above it the signal is to hold.
- `BUY_RATIO` is the share of the JPY balance spent on a buy, `SELL_RATIO`
  the share of the crypto balance sold on a sell.

`TradeSettings.from_env()` requires all five trading variables to be set; a
value of `SPREAD_THRESHOLD`, `BUY_RATIO` or `SELL_RATIO` that is not a number
falls back to 1.0, 0.3 or 0.5. A missing variable raises `EnvVarError`.

## Command

```
coinbot-import [path]
```

Reads a transaction history CSV (default `./transactions.csv`) and stores its
trades in the `transactions` table. The file needs the columns `id`, `time`,
`operation`, `amount` and `trading_currency`; `price` and
`original_currency` are used when present.

- Only rows whose `operation` is `Buy` or `Sell` are imported; they are
  numbered as order ids from 1 in file order.
- The first 19 characters of `time` are read as `YYYY-MM-DD HH:MM:SS`.
- The pair is `<trading_currency>_<original_currency>` in lower case, with
  `N/A` when the original currency is empty.
- Amount and price are stored as absolute values and the rate as
  price / amount; fee is 0 and the fee currency empty.
- Each trade is committed on its own; a trade the database rejects is
  skipped with a warning.

The tables must already exist (see `coinbot.db.create_schema`). On an error
the command prints `Error: ...` to standard error and exits with status 1.

## Library use

```python
from coinbot.db import create_schema, establish_connection
from coinbot.repositories.ticker import TradeSettings, determine_trade_signal
from coinbot.repositories.transaction import total_invested

engine = establish_connection("sqlite:///coinbot.db")
create_schema(engine)

with engine.connect() as conn:
    settings = TradeSettings(ma_short=5, ma_long=25)
    signal = determine_trade_signal(
        conn, "btc", current_bid=10_000_000.0, current_ask=10_010_000.0,
        jpy_balance=100_000.0, crypto_balance=0.01, settings=settings,
    )
    print(signal.kind, signal.amount)
    print(total_invested(conn))
```

- `coinbot.repositories.ticker.decide_signal` does the decision alone, from
  given moving averages: hold when the spread is above the threshold,
  `INSUFFICIENT_DATA` when either average is missing, buy
  `jpy_balance * buy_ratio / ask` when the short average is above the long
  one, sell `crypto_balance * sell_ratio` when it is below, hold when equal.
- `coinbot.repositories.ticker.moving_average` averages `last` over the
  newest tickers of a pair, or returns `None` when there are none.
- `coinbot.repositories.transaction.total_invested` sums the price of all
  buy trades.
- `coinbot.models` holds the record dataclasses (`NewOrder`, `NewSummary`,
  `NewSummaryRecord`, `NewTicker`, `NewTransaction` and their stored
  counterparts) and `insert_order`, `insert_summary`,
  `insert_summary_record`, `insert_ticker` and `insert_transaction`, each
  returning the new row's id. `insert_summary` links every record to the new
  summary. `NewTicker.from_json` reads a ticker whose `timestamp` is UNIX
  seconds.
- `coinbot.slack.order_payload` and `summary_payload` build the messages;
  `send_order_information` and `send_summary` post them. `send_summary`
  raises `ApiError` on a failing HTTP status.

Errors raised by the package derive from `coinbot.errors.AppError`:
`DatabaseError`, `ApiError`, `EnvVarError` and `InvalidDataError`.

## What it does not do

The package has no exchange API client. It does not fetch balances, tickers
or rates from the exchange, and it does not place orders there: ticker rows
and current bid/ask prices must come from elsewhere, and a signal is only
returned, not acted on. There are no scheduled jobs for recording tickers,
placing orders or writing the daily summary; only `coinbot-import` is
installed as a command.