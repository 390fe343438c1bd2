from __future__ import annotations

"""Persistent exchange-rate cache.

One record per quote currency, stored verbatim with its original fetch time.
No expiry logic lives here: deciding whether a record is fresh is the
ExchangeRateManager's job.
"""
import sqlite3
from datetime import datetime
from typing import Optional

from pydantic import ValidationError

from ledgerfx.core.errors import StorageError
from ledgerfx.db.dal import Database
from ledgerfx.models.constants import BASE_CURRENCY
from ledgerfx.models.rates import ExchangeRateRecord


class RateCacheStore:
    def __init__(self, db: Database, base_currency: str = BASE_CURRENCY):
        self._db = db
        self._base = base_currency.upper()

    async def get(self, currency: str) -> Optional[ExchangeRateRecord]:
        code = currency.upper()
        try:
            row = await self._db.get_exchange_rate(self._base, code)
        except sqlite3.Error as e:
            raise StorageError(f"failed to read cached rate for {code}: {e}") from e
        if row is None:
            return None
        try:
            return ExchangeRateRecord(
                rate=row["rate"],
                currency=row["quote_currency"],
                fetched_at=datetime.fromisoformat(row["fetched_at"]),
            )
        except (ValidationError, ValueError, TypeError) as e:
            raise StorageError(f"corrupt cached rate row for {code}: {e}") from e

    async def put(self, record: ExchangeRateRecord) -> None:
        try:
            await self._db.upsert_exchange_rate(
                self._base, record.currency, record.rate, record.fetched_at.isoformat()
            )
        except sqlite3.Error as e:
            raise StorageError(f"failed to write cached rate for {record.currency}: {e}") from e
