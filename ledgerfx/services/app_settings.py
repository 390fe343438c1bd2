"""User preferences backed by the metadata table.

Provides typed accessors for the persisted currency preferences. Readers are
resilient: if a key is missing, invalid or the store fails, they fall back to
sensible defaults. Writers raise StorageError so callers decide how loud to be.

Metadata keys:
  - active_currency: ISO code of the display currency (default settings.default_currency)
  - last_currency: most recently selected code (kept for the currency picker)
  - show_decimals: bool (0/1), default True
"""

from __future__ import annotations

import logging
import sqlite3
from typing import Optional

from ledgerfx.core.errors import StorageError
from ledgerfx.db.dal import Database

logger = logging.getLogger("ledgerfx.currency")

ACTIVE_CURRENCY_KEY = "active_currency"
LAST_CURRENCY_KEY = "last_currency"
SHOW_DECIMALS_KEY = "show_decimals"

# ------------- Low level helpers -----------------


async def _get_metadata_value(db: Database, key: str) -> Optional[str]:
    try:
        return await db.get_metadata_value(key)
    except sqlite3.Error as e:
        logger.warning("failed to read preference %s: %s", key, e)
        return None


async def _set_metadata_value(db: Database, key: str, value: str) -> None:
    try:
        await db.set_metadata_value(key, value)
    except sqlite3.Error as e:
        raise StorageError(f"failed to save preference {key}: {e}") from e


async def _get_bool(db: Database, key: str, default: bool = False) -> bool:
    val = await _get_metadata_value(db, key)
    if val is None:
        return default
    return val in ("1", "true", "True", "yes", "on")


# ------------- Currency preferences -------------


async def get_active_currency(db: Database, default: str) -> str:
    code = await _get_metadata_value(db, ACTIVE_CURRENCY_KEY)
    return code.upper() if code else default


async def set_active_currency(db: Database, code: str) -> None:
    await _set_metadata_value(db, ACTIVE_CURRENCY_KEY, code.upper())
    await _set_metadata_value(db, LAST_CURRENCY_KEY, code.upper())


async def get_last_currency(db: Database) -> Optional[str]:
    return await _get_metadata_value(db, LAST_CURRENCY_KEY)


async def get_show_decimals(db: Database) -> bool:
    return await _get_bool(db, SHOW_DECIMALS_KEY, True)


async def set_show_decimals(db: Database, value: bool) -> None:
    await _set_metadata_value(db, SHOW_DECIMALS_KEY, "1" if value else "0")


__all__ = [
    "get_active_currency",
    "set_active_currency",
    "get_last_currency",
    "get_show_decimals",
    "set_show_decimals",
]
