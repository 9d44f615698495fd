"""
Stock Dashboard Engine
───────────────────────
Deterministic synthetic market data for the dashboard API.

    from stock_engine.api.stock_service import StockService
    service = StockService(cache=MemoryCache())
    data = await service.get_series_batch(["AAPL", "MSFT"], "1M")
"""

__version__ = "1.0.0"
