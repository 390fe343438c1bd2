import asyncio
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Dict, List, Optional

import pytest

from ledgerfx.core.errors import RateProviderError
from ledgerfx.db.dal import Database
from ledgerfx.db.migrate import apply_migrations
from ledgerfx.services.currency_facade import CurrencyFacade
from ledgerfx.services.rates.base import RateProvider
from ledgerfx.services.rates.cache_service import RateCacheStore
from ledgerfx.services.rates.manager import ExchangeRateManager


class FakeClock:
    def __init__(self, now: Optional[datetime] = None):
        self.now = now or datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


class FakeProvider(RateProvider):
    """Records every fetch; optionally blocks per currency until its gate is set."""

    def __init__(self, rates: Optional[Dict[str, float]] = None, fail: bool = False):
        self.rates = dict(rates or {})
        self.fail = fail
        self.calls: List[str] = []
        self.gates: Dict[str, asyncio.Event] = {}
        self.closed = False

    def gate(self, currency: str) -> asyncio.Event:
        event = asyncio.Event()
        self.gates[currency] = event
        return event

    async def fetch(self, currency: str) -> float:
        self.calls.append(currency)
        gate = self.gates.get(currency)
        if gate is not None:
            await gate.wait()
        if self.fail or currency not in self.rates:
            raise RateProviderError(f"simulated failure for {currency}")
        return self.rates[currency]

    async def aclose(self) -> None:
        self.closed = True


async def wait_for_call(provider: FakeProvider, currency: str, timeout: float = 2.0) -> None:
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while currency not in provider.calls:
        if loop.time() > deadline:
            raise AssertionError(f"provider never asked for {currency}")
        await asyncio.sleep(0.005)


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    path = tmp_path / "ledgerfx-test.sqlite3"
    apply_migrations(path)
    return path


@pytest.fixture
def database(db_path: Path) -> Database:
    return Database(db_path)


@pytest.fixture
def store(database: Database) -> RateCacheStore:
    return RateCacheStore(database)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def make_facade(database: Database, store: RateCacheStore, clock: FakeClock):
    def _make(provider: RateProvider) -> CurrencyFacade:
        manager = ExchangeRateManager(store, provider, clock=clock)
        return CurrencyFacade(database, manager)

    return _make
