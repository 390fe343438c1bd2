"""Smoke script for the persistent rate cache.

Demonstrates:
 1. First access for a currency triggers a provider fetch and writes the cache.
 2. Subsequent access within TTL uses the cached record (same fetched_at).
 3. Backdating the record beyond the TTL forces a refresh.
 4. A failing provider falls back to the stale cached rate.

NOTE: This is a lightweight diagnostic and not a formal test.
"""

import asyncio
import tempfile
from datetime import datetime, timedelta, timezone
from pathlib import Path
from pprint import pprint

from ledgerfx.core.errors import RateProviderError
from ledgerfx.db.dal import Database
from ledgerfx.db.migrate import apply_migrations
from ledgerfx.models.rates import ExchangeRateRecord
from ledgerfx.services.rates.cache_service import RateCacheStore
from ledgerfx.services.rates.manager import ExchangeRateManager
from ledgerfx.services.rates.providers import StaticRateProvider


class _DownProvider(StaticRateProvider):
    async def fetch(self, currency: str) -> float:
        raise RateProviderError("simulated outage")


async def run():
    with tempfile.TemporaryDirectory() as d:
        db_path = Path(d) / "smoke.sqlite3"
        apply_migrations(db_path)
        store = RateCacheStore(Database(db_path))
        mgr = ExchangeRateManager(store, StaticRateProvider())
        out = {"initial": {}, "second": {}, "forced_refresh": {}, "outage": {}}

        for c in ("EUR", "GBP"):
            res = await mgr.ensure_rate(c)
            out["initial"][c] = {"rate": res.rate, "source": res.source.value, "fetched_at": str(res.fetched_at)}

        for c in ("EUR", "GBP"):
            res = await mgr.ensure_rate(c)
            out["second"][c] = {"rate": res.rate, "source": res.source.value, "fetched_at": str(res.fetched_at)}

        # Backdate beyond TTL
        old = datetime.now(timezone.utc) - timedelta(hours=2)
        for c in ("EUR", "GBP"):
            rec = await store.get(c)
            await store.put(ExchangeRateRecord(rate=rec.rate, currency=c, fetched_at=old))
            res = await mgr.ensure_rate(c)
            out["forced_refresh"][c] = {"rate": res.rate, "source": res.source.value}

        await store.put(ExchangeRateRecord(rate=0.91, currency="EUR", fetched_at=old))
        down = ExchangeRateManager(store, _DownProvider())
        for c in ("EUR", "JPY"):
            res = await down.ensure_rate(c)
            out["outage"][c] = {"rate": res.rate, "source": res.source.value, "degraded": down.is_degraded(c)}

        pprint(out)


if __name__ == "__main__":
    asyncio.run(run())
