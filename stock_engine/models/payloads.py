"""
Stock Dashboard — Payload Models
──────────────────────────────────
Canonical shapes of everything the stock routes return and the cache stores.
Cache backends hold the `to_dict()` form so Redis and memory agree.
"""

from dataclasses import dataclass, asdict
from datetime import date
from typing import List


@dataclass(frozen=True)
class DateRange:
    start: date
    end:   date

    def to_dict(self) -> dict:
        return {"start": self.start.isoformat(), "end": self.end.isoformat()}


@dataclass
class Bar:
    date:      str     # ISO instant, midnight UTC
    open:      float
    high:      float
    low:       float
    close:     float
    volume:    int
    adj_close: float   # mirrors close

    def to_dict(self) -> dict:
        return {
            "date":     self.date,
            "open":     self.open,
            "high":     self.high,
            "low":      self.low,
            "close":    self.close,
            "volume":   self.volume,
            "adjClose": self.adj_close,
        }


@dataclass
class Quote:
    symbol:                        str
    short_name:                    str
    regular_market_price:          float
    regular_market_change:         float
    regular_market_change_percent: float
    regular_market_open:           float
    regular_market_day_high:       float
    regular_market_day_low:        float
    regular_market_volume:         int
    market_cap:                    int

    def to_dict(self) -> dict:
        return {
            "symbol":                     self.symbol,
            "shortName":                  self.short_name,
            "regularMarketPrice":         self.regular_market_price,
            "regularMarketChange":        self.regular_market_change,
            "regularMarketChangePercent": self.regular_market_change_percent,
            "regularMarketOpen":          self.regular_market_open,
            "regularMarketDayHigh":       self.regular_market_day_high,
            "regularMarketDayLow":        self.regular_market_day_low,
            "regularMarketVolume":        self.regular_market_volume,
            "marketCap":                  self.market_cap,
        }


@dataclass(frozen=True)
class SearchResult:
    symbol:   str
    name:     str
    exchange: str
    type:     str = "EQUITY"

    def to_dict(self) -> dict:
        return asdict(self)


def series_to_dicts(bars: List[Bar]) -> List[dict]:
    return [b.to_dict() for b in bars]
