"""
Stock Dashboard — Quote Synthesizer
─────────────────────────────────────
A live-looking snapshot. Every draw comes from the RandomSource, so two
calls never agree unless the source is pinned.
"""

import logging
import math
from typing import Optional

from stock_engine.models.payloads import Quote
from stock_engine.synth.catalog import base_price, display_name
from stock_engine.synth.random_source import RandomSource, default_source
from stock_engine.synth.series import round2

log = logging.getLogger("sd.synth.quote")


def synthesize_quote(symbol: str, source: Optional[RandomSource] = None) -> Quote:
    rng    = source or default_source
    symbol = symbol.upper()
    base   = base_price(symbol, rng)

    change_pct = (rng.random() - 0.4) * 3
    change     = base * (change_pct / 100)
    price      = base + change
    day_open   = base * (1 + (rng.random() - 0.5) * 0.01)
    day_high   = price * (1 + rng.random() * 0.01)
    day_low    = price * (1 - rng.random() * 0.01)
    volume     = math.floor(rng.random() * 10_000_000) + 1_000_000
    market_cap = math.floor(price * (rng.random() * 1_000_000_000 + 5_000_000_000))

    log.debug(f"Generated sample quote for {symbol} @ {price:.2f}")
    return Quote(
        symbol=symbol,
        short_name=display_name(symbol),
        regular_market_price=round2(price),
        regular_market_change=round2(change),
        regular_market_change_percent=round2(change_pct),
        regular_market_open=round2(day_open),
        regular_market_day_high=round2(day_high),
        regular_market_day_low=round2(day_low),
        regular_market_volume=volume,
        market_cap=market_cap,
    )
