"""
Stock Dashboard — Symbol Catalog
──────────────────────────────────
Static reference data shared by the synthesizers and search.
"""

from typing import Dict, List, Optional

from stock_engine.models.payloads import SearchResult
from stock_engine.synth.random_source import RandomSource

# ── Anchor prices for well-known tickers ──────────────────────
BASE_PRICES: Dict[str, float] = {
    "AAPL":  145.85,
    "MSFT":  265.3,
    "GOOGL": 105.55,
    "AMZN":  98.75,
    "META":  232.8,
    "TSLA":  192.5,
}

# ── Popular symbols (search catalog, display names) ───────────
POPULAR_STOCKS: List[SearchResult] = [
    SearchResult("AAPL",  "Apple Inc.",            "NASDAQ"),
    SearchResult("MSFT",  "Microsoft Corporation", "NASDAQ"),
    SearchResult("GOOGL", "Alphabet Inc.",         "NASDAQ"),
    SearchResult("AMZN",  "Amazon.com Inc.",       "NASDAQ"),
    SearchResult("META",  "Meta Platforms Inc.",   "NASDAQ"),
    SearchResult("TSLA",  "Tesla, Inc.",           "NASDAQ"),
    SearchResult("NVDA",  "NVIDIA Corporation",    "NASDAQ"),
    SearchResult("JPM",   "JPMorgan Chase & Co.",  "NYSE"),
    SearchResult("JNJ",   "Johnson & Johnson",     "NYSE"),
    SearchResult("V",     "Visa Inc.",             "NYSE"),
]

STOCK_NAMES: Dict[str, str] = {s.symbol: s.name for s in POPULAR_STOCKS}


def base_price(ticker: str, source: RandomSource) -> float:
    """Anchor price for a ticker; unknown tickers draw from [100, 300)."""
    price: Optional[float] = BASE_PRICES.get(ticker.upper())
    if price is None:
        price = 100 + source.random() * 200
    return price


def display_name(symbol: str) -> str:
    symbol = symbol.upper()
    return STOCK_NAMES.get(symbol) or f"{symbol} Inc."
