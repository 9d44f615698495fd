"""Pytest configuration and fixtures."""

from datetime import date

import pytest
from fastapi.testclient import TestClient

from app import create_app
from stock_engine.api.stock_service import StockService
from stock_engine.cache.store import MemoryCache
from stock_engine.config import Settings
from stock_engine.synth.random_source import FixedRandomSource, RandomSource

REFERENCE_DATE = date(2023, 1, 15)
TOKEN = "test-token"


class FakeClock:
    """Manually advanced clock in seconds."""

    def __init__(self, start: float = 1_673_740_800.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def memory_cache(clock: FakeClock) -> MemoryCache:
    return MemoryCache(clock=clock)


@pytest.fixture
def fixed_source() -> FixedRandomSource:
    return FixedRandomSource([0.5])


@pytest.fixture
def service(memory_cache: MemoryCache, clock: FakeClock) -> StockService:
    return StockService(
        memory_cache,
        reference_date=REFERENCE_DATE,
        source=RandomSource(seed=7),
        clock=clock,
    )


@pytest.fixture
def settings() -> Settings:
    return Settings(reference_date=REFERENCE_DATE, api_tokens={TOKEN: "alice", "other-token": "bob"})


@pytest.fixture
def client(settings: Settings):
    app = create_app(settings=settings, cache=MemoryCache(), source=RandomSource(seed=7))
    with TestClient(app) as c:
        yield c


@pytest.fixture
def auth_headers() -> dict:
    return {"Authorization": f"Bearer {TOKEN}"}
