"""Data Access Layer for the currency subsystem.

Responsibilities
----------------
- Read and upsert the single cached exchange-rate row per (base, quote) pair.
- Read and write metadata key/value pairs backing user preferences.

Every call opens a short-lived aiosqlite connection so callers never hold a
connection across an await on the network.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional

import aiosqlite

UTC_NOW_SQL = "strftime('%Y-%m-%dT%H:%M:%fZ','now')"


class Database:
    def __init__(self, db_path: Path):
        self.db_path = db_path

    # ------------------------------------------------------------------
    # Connection helpers
    def _connect(self) -> aiosqlite.Connection:
        return aiosqlite.connect(self.db_path)

    # ------------------------------------------------------------------
    # Metadata
    async def get_metadata_value(self, key: str) -> Optional[str]:
        async with self._connect() as conn:
            cursor = await conn.execute("SELECT value FROM metadata WHERE key = ?", (key,))
            row = await cursor.fetchone()
            return row[0] if row else None

    async def set_metadata_value(self, key: str, value: str) -> None:
        async with self._connect() as conn:
            await conn.execute(
                f"""
                INSERT INTO metadata (key, value) VALUES (?, ?)
                ON CONFLICT(key) DO UPDATE SET
                    value = excluded.value,
                    updated_at = ({UTC_NOW_SQL})
                """,
                (key, value),
            )
            await conn.commit()

    # ------------------------------------------------------------------
    # Exchange rates
    async def get_exchange_rate(
        self, base_currency: str, quote_currency: str
    ) -> Optional[Dict[str, Any]]:
        async with self._connect() as conn:
            conn.row_factory = aiosqlite.Row
            cursor = await conn.execute(
                """
                SELECT base_currency, quote_currency, rate, fetched_at
                FROM exchange_rates
                WHERE base_currency = ? AND quote_currency = ?
                """,
                (base_currency, quote_currency),
            )
            row = await cursor.fetchone()
            return dict(row) if row else None

    async def upsert_exchange_rate(
        self, base_currency: str, quote_currency: str, rate: float, fetched_at: str
    ) -> None:
        async with self._connect() as conn:
            await conn.execute(
                """
                INSERT INTO exchange_rates (base_currency, quote_currency, rate, fetched_at)
                VALUES (?, ?, ?, ?)
                ON CONFLICT(base_currency, quote_currency) DO UPDATE SET
                    rate = excluded.rate,
                    fetched_at = excluded.fetched_at
                """,
                (base_currency, quote_currency, rate, fetched_at),
            )
            await conn.commit()

    async def count_exchange_rates(self) -> int:
        async with self._connect() as conn:
            cursor = await conn.execute("SELECT COUNT(*) FROM exchange_rates")
            row = await cursor.fetchone()
            return int(row[0] if row and row[0] is not None else 0)
