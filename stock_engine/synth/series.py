"""
Stock Dashboard — Series Synthesizer
──────────────────────────────────────
Generates a daily OHLCV series as a multiplicative random walk.

For each weekday in [start, end]:
    seed   += 1
    change  = (r(seed) - 0.48) * 0.02          slight upward drift
    close   = open * (1 + change)
    high    = max(open, close) * (1 + r(seed + 0.1) * 0.01)
    low     = min(open, close) * (1 - r(seed + 0.2) * 0.01)
    volume  = floor(r(seed + 0.3) * 1e7) + 1e6

The unrounded close carries over as the next day's open, so the walk is
continuous. The seed root is the ticker's code-point sum; the only
non-deterministic input is the base price of tickers missing from the
catalog, drawn from the injected RandomSource.
"""

import logging
import math
from datetime import date, timedelta
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Optional, Union

from stock_engine.models.payloads import Bar
from stock_engine.synth.catalog import base_price
from stock_engine.synth.random_source import RandomSource, default_source, seeded_random, ticker_seed
from stock_engine.synth.timeframe import parse_date

log = logging.getLogger("sd.synth.series")

VOLATILITY    = 0.02
DRIFT_CENTER  = 0.48
WICK_MAX      = 0.01
VOLUME_SCALE  = 10_000_000
VOLUME_FLOOR  = 1_000_000

_CENT = Decimal("0.01")


def round2(value: float) -> float:
    """Round half away from zero on the exact binary value."""
    return float(Decimal(value).quantize(_CENT, rounding=ROUND_HALF_UP))


def iso_instant(d: date) -> str:
    return f"{d.isoformat()}T00:00:00.000Z"


def is_weekday(d: date) -> bool:
    return d.weekday() < 5


def synthesize_series(
    ticker: str,
    start: Union[date, str],
    end: Union[date, str],
    source: Optional[RandomSource] = None,
) -> List[Bar]:
    start_d = parse_date(start)
    end_d   = parse_date(end)
    log.debug(f"Generating sample data for {ticker} from {start_d} to {end_d}")

    price = base_price(ticker, source or default_source)
    seed  = ticker_seed(ticker)

    bars: List[Bar] = []
    current = start_d
    while current <= end_d:
        if is_weekday(current):
            seed += 1
            change = (seeded_random(seed) - DRIFT_CENTER) * VOLATILITY

            day_open  = price
            day_close = day_open * (1 + change)
            day_high  = max(day_open, day_close) * (1 + seeded_random(seed + 0.1) * WICK_MAX)
            day_low   = min(day_open, day_close) * (1 - seeded_random(seed + 0.2) * WICK_MAX)
            volume    = math.floor(seeded_random(seed + 0.3) * VOLUME_SCALE) + VOLUME_FLOOR

            close = round2(day_close)
            bars.append(Bar(
                date=iso_instant(current),
                open=round2(day_open),
                high=round2(day_high),
                low=round2(day_low),
                close=close,
                volume=volume,
                adj_close=close,
            ))
            price = day_close
        current += timedelta(days=1)

    log.debug(f"Generated {len(bars)} sample data points for {ticker}")
    return bars
