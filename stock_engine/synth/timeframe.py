"""
Stock Dashboard — Timeframe Resolver
──────────────────────────────────────
Maps a dashboard timeframe token to an inclusive date range that ends on
the configured reference date. Wall-clock time is never consulted.

  1D   → 3 days back        3M   → 3 months back
  1W   → 7 days back        1Y   → 1 year back
  1M   → 1 month back       YTD  → Jan 1 of reference year
  MTD  → 1st of month       custom / anything else → 1 month back
"""

from datetime import date, datetime, timedelta
from typing import Optional

from stock_engine.models.payloads import DateRange

TIMEFRAMES = ("1D", "1W", "1M", "3M", "1Y", "YTD", "MTD", "custom")
DEFAULT_TIMEFRAME = "1M"

# All timeframes are sampled daily
DEFAULT_INTERVAL = "1d"


def shift_months(d: date, months: int) -> date:
    """
    Move `d` by a signed number of months, keeping the day of month.
    A day past the end of the target month rolls into the next month
    (2023-03-31 minus one month is 2023-03-03).
    """
    total = d.year * 12 + (d.month - 1) + months
    year, month = divmod(total, 12)
    return date(year, month + 1, 1) + timedelta(days=d.day - 1)


def resolve_start(timeframe: Optional[str], reference: date) -> date:
    if timeframe == "1D":
        return reference - timedelta(days=3)
    if timeframe == "1W":
        return reference - timedelta(days=7)
    if timeframe == "3M":
        return shift_months(reference, -3)
    if timeframe == "1Y":
        return shift_months(reference, -12)
    if timeframe == "YTD":
        return date(reference.year, 1, 1)
    if timeframe == "MTD":
        return date(reference.year, reference.month, 1)
    # 1M, custom, unknown
    return shift_months(reference, -1)


def resolve_range(timeframe: Optional[str], reference: date) -> DateRange:
    return DateRange(start=resolve_start(timeframe, reference), end=reference)


def interval_for(timeframe: Optional[str]) -> str:
    return DEFAULT_INTERVAL


def parse_date(value) -> date:
    """Accept a datetime, a date or a YYYY-MM-DD string."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])
