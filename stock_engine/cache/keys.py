"""
Stock Dashboard — Cache Keys
──────────────────────────────
Identical logical requests must collide; distinct ones must not.
"""

from stock_engine.cache.ttl_config import QUOTE_BUCKET_DIGITS
from stock_engine.models.payloads import DateRange


def key_series(ticker: str, timeframe: str, date_range: DateRange) -> str:
    # The timeframe token is redundant with the dates but stays in the key
    return f"{ticker}_{timeframe}_{date_range.start.isoformat()}_{date_range.end.isoformat()}"


def key_search(query: str) -> str:
    return f"search_{query}"


def quote_bucket(now_ms: int) -> str:
    return str(int(now_ms))[:QUOTE_BUCKET_DIGITS]


def key_quote(symbol: str, now_ms: int) -> str:
    return f"quote_{symbol}_{quote_bucket(now_ms)}"
