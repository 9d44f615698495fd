"""
Stock Dashboard — Stock Service
─────────────────────────────────
What the /api/stocks routes call. Each lookup:
  1. Resolve the date range from the timeframe (fixed reference date)
  2. Check the cache under a request-shaped key
  3. On miss → synthesize, store, return

Synthesis is pure in-memory work, so nothing here needs a timeout.
"""

import asyncio
import logging
import time
from datetime import date
from typing import Callable, Dict, List, Optional

from stock_engine.cache.keys import key_quote, key_search, key_series
from stock_engine.cache.store import CacheService
from stock_engine.cache.ttl_config import TTL
from stock_engine.config import DEFAULT_REFERENCE_DATE
from stock_engine.models.payloads import DateRange, series_to_dicts
from stock_engine.synth.quote import synthesize_quote
from stock_engine.synth.random_source import RandomSource, default_source
from stock_engine.synth.search import search_symbols
from stock_engine.synth.series import synthesize_series
from stock_engine.synth.timeframe import DEFAULT_TIMEFRAME, interval_for, resolve_range

log = logging.getLogger("sd.api.stocks")


def normalise_symbol(symbol: str) -> str:
    return symbol.upper().strip()


def split_tickers(raw: str) -> List[str]:
    """'aapl, MSFT,,aapl' -> ['AAPL', 'MSFT'] (order kept, duplicates dropped)"""
    seen: Dict[str, None] = {}
    for part in raw.split(","):
        sym = normalise_symbol(part)
        if sym:
            seen.setdefault(sym, None)
    return list(seen)


class StockService:

    def __init__(
        self,
        cache: CacheService,
        reference_date: date = DEFAULT_REFERENCE_DATE,
        source: Optional[RandomSource] = None,
        clock: Callable[[], float] = time.time,
        series_fn: Callable = synthesize_series,
        quote_fn: Callable = synthesize_quote,
    ):
        self.cache = cache
        self.reference_date = reference_date
        self.source = source or default_source
        self._clock = clock
        self._series_fn = series_fn
        self._quote_fn = quote_fn

    # ── Series ───────────────────────────────────────────────
    def date_range(self, timeframe: Optional[str]) -> DateRange:
        rng = resolve_range(timeframe, self.reference_date)
        log.debug(
            f"Using fixed date range: start={rng.start}, end={rng.end}, "
            f"timeframe={timeframe}, interval={self.interval(timeframe)}"
        )
        return rng

    def interval(self, timeframe: Optional[str]) -> str:
        """Sampling granularity of the bars served for a timeframe."""
        return interval_for(timeframe)

    async def get_series(self, ticker: str, timeframe: str, date_range: DateRange) -> List[dict]:
        cache_key = key_series(ticker, timeframe, date_range)
        cached = await self.cache.get(cache_key)
        if cached is not None:
            log.debug(f"Using cached data for {ticker}")
            return cached

        log.info(f"Generating sample data for {ticker} ({timeframe})")
        bars = self._series_fn(ticker, date_range.start, date_range.end, self.source)
        data = series_to_dicts(bars)
        await self.cache.set(cache_key, data, TTL["series"])
        return data

    async def get_series_batch(self, tickers: List[str], timeframe: Optional[str] = None) -> Dict[str, List[dict]]:
        timeframe = timeframe or DEFAULT_TIMEFRAME
        date_range = self.date_range(timeframe)
        results = await asyncio.gather(*[
            self.get_series(t, timeframe, date_range) for t in tickers
        ])
        return {t: series for t, series in zip(tickers, results)}

    # ── Search ───────────────────────────────────────────────
    async def search(self, query: str) -> List[dict]:
        cache_key = key_search(query)
        cached = await self.cache.get(cache_key)
        if cached is not None:
            return cached

        log.info(f"Searching for stocks matching: {query}")
        data = [s.to_dict() for s in search_symbols(query)]
        await self.cache.set(cache_key, data, TTL["search"])
        return data

    # ── Quote ────────────────────────────────────────────────
    async def get_quote(self, symbol: str) -> dict:
        symbol = normalise_symbol(symbol)
        cache_key = key_quote(symbol, int(self._clock() * 1000))
        cached = await self.cache.get(cache_key)
        if cached is not None:
            return cached

        data = self.fallback_quote(symbol)
        await self.cache.set(cache_key, data, TTL["quote"])
        return data

    def fallback_quote(self, symbol: str) -> dict:
        """Fresh quote that bypasses the cache entirely."""
        return self._quote_fn(symbol, self.source).to_dict()
