"""Symbol search over the static catalog."""

from typing import List, Sequence

from stock_engine.models.payloads import SearchResult
from stock_engine.synth.catalog import POPULAR_STOCKS

FALLBACK_COUNT = 3


def search_symbols(
    query: str,
    catalog: Sequence[SearchResult] = POPULAR_STOCKS,
) -> List[SearchResult]:
    """
    Case-insensitive substring match on symbol or name, catalog order.
    No match returns the first FALLBACK_COUNT entries instead of nothing.
    """
    q = query.lower()
    results = [
        s for s in catalog
        if q in s.symbol.lower() or q in s.name.lower()
    ]
    if not results:
        results = list(catalog[:FALLBACK_COUNT])
    return results
