import sqlite3
from contextlib import closing
from datetime import datetime, timezone

import pytest

from ledgerfx.core.errors import StorageError
from ledgerfx.db.dal import Database
from ledgerfx.models.rates import ExchangeRateRecord
from ledgerfx.services.rates.cache_service import RateCacheStore

FETCHED = datetime(2026, 1, 1, 9, 30, 15, 123456, tzinfo=timezone.utc)


@pytest.mark.asyncio
async def test_missing_currency_returns_none(store):
    assert await store.get("EUR") is None


@pytest.mark.asyncio
async def test_record_returned_verbatim(store):
    await store.put(ExchangeRateRecord(rate=0.92, currency="EUR", fetched_at=FETCHED))
    record = await store.get("eur")
    assert record == ExchangeRateRecord(rate=0.92, currency="EUR", fetched_at=FETCHED)


@pytest.mark.asyncio
async def test_put_replaces_and_keeps_currencies_independent(store, database):
    await store.put(ExchangeRateRecord(rate=0.92, currency="EUR", fetched_at=FETCHED))
    await store.put(ExchangeRateRecord(rate=0.79, currency="GBP", fetched_at=FETCHED))
    later = FETCHED.replace(hour=11)
    await store.put(ExchangeRateRecord(rate=0.93, currency="EUR", fetched_at=later))

    assert (await store.get("EUR")).rate == 0.93
    assert (await store.get("EUR")).fetched_at == later
    assert (await store.get("GBP")).rate == 0.79
    assert await database.count_exchange_rates() == 2


@pytest.mark.asyncio
async def test_records_survive_new_connection(store, db_path):
    await store.put(ExchangeRateRecord(rate=151.4, currency="JPY", fetched_at=FETCHED))
    reopened = RateCacheStore(Database(db_path))
    assert (await reopened.get("JPY")).rate == 151.4


@pytest.mark.asyncio
async def test_corrupt_row_raises_storage_error(store, db_path):
    with closing(sqlite3.connect(db_path)) as conn, conn:
        conn.execute(
            "INSERT INTO exchange_rates (base_currency, quote_currency, rate, fetched_at) VALUES ('USD','EUR',0.9,'not-a-date')"
        )
    with pytest.raises(StorageError):
        await store.get("EUR")


@pytest.mark.asyncio
async def test_missing_schema_raises_storage_error(tmp_path):
    bare = RateCacheStore(Database(tmp_path / "bare.sqlite3"))
    with pytest.raises(StorageError):
        await bare.get("EUR")
    with pytest.raises(StorageError):
        await bare.put(ExchangeRateRecord(rate=0.92, currency="EUR", fetched_at=FETCHED))
