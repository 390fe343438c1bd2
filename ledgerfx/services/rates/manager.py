"""Exchange-rate manager: decides between cache, network and fallback.

Per-currency lifecycle::

    Cold --fetch--> Fresh --(age >= ttl)--> Stale --fetch--> Fresh
                                                  \\--fail--> StaleFallback

Resolution order for a non-base currency:
    1. cached record younger than the TTL (unless it is a suspect 1:1 rate)
    2. fresh fetch from the provider, written back to the cache
    3. on fetch failure: last cached record regardless of age
    4. otherwise rate 1, and the currency is flagged as degraded

At most one fetch per currency is in flight; concurrent callers share it.
Only the most recently requested currency may replace the active rate.
"""

from __future__ import annotations

import asyncio
import enum
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, Optional, Set

from ledgerfx.core.errors import RateProviderError, StorageError
from ledgerfx.models.constants import BASE_CURRENCY
from ledgerfx.models.rates import ExchangeRateRecord
from ledgerfx.services.money import is_valid_number

from .base import RateProvider, is_suspect_rate
from .cache_service import RateCacheStore

logger = logging.getLogger("ledgerfx.rates")

DEFAULT_TTL = timedelta(hours=1)


class RateSource(str, enum.Enum):
    BASE = "base"
    CACHE = "cache"
    FETCHED = "fetched"
    STALE_CACHE = "stale_cache"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class RateResolution:
    currency: str
    rate: float
    source: RateSource
    fetched_at: Optional[datetime] = None

    @property
    def degraded(self) -> bool:
        return self.source is RateSource.FALLBACK


@dataclass(frozen=True)
class ActiveRate:
    currency: str
    rate: float
    source: RateSource


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ExchangeRateManager:
    def __init__(
        self,
        store: RateCacheStore,
        provider: RateProvider,
        *,
        base_currency: str = BASE_CURRENCY,
        ttl: timedelta = DEFAULT_TTL,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self._store = store
        self._provider = provider
        self._base = base_currency.upper()
        self._ttl = ttl
        self._clock = clock
        self._pending: Dict[str, "asyncio.Task[RateResolution]"] = {}
        self._degraded: Set[str] = set()
        self._requested: Optional[str] = None
        self._active = ActiveRate(self._base, 1.0, RateSource.BASE)

    @property
    def base_currency(self) -> str:
        return self._base

    @property
    def active_rate(self) -> ActiveRate:
        return self._active

    def is_degraded(self, currency: str) -> bool:
        return currency.upper() in self._degraded

    # Internal --------------------------------------------------
    def _is_fresh(self, record: ExchangeRateRecord) -> bool:
        return record.age_seconds(self._clock()) < self._ttl.total_seconds()

    async def _read_cache(self, currency: str) -> Optional[ExchangeRateRecord]:
        try:
            return await self._store.get(currency)
        except StorageError as e:
            logger.warning("rate cache read failed, treating as miss: %s", e, extra={"currency": currency})
            return None

    async def _refresh(
        self, currency: str, cached: Optional[ExchangeRateRecord]
    ) -> RateResolution:
        try:
            rate = await self._provider.fetch(currency)
            if not is_valid_number(rate) or rate <= 0:
                raise RateProviderError(f"provider returned unusable rate {rate!r}")
        except (RateProviderError, asyncio.TimeoutError, OSError) as e:
            return self._fallback(currency, cached, e)
        except Exception as e:
            # Provider implementations may raise anything
            logger.warning(
                "unexpected error from rate provider for %s", currency, exc_info=True,
                extra={"currency": currency},
            )
            return self._fallback(currency, cached, e)

        if is_suspect_rate(rate, currency, self._base):
            logger.warning(
                "fetched rate is 1 for %s; keeping it but it will be refetched next time",
                currency,
                extra={"currency": currency, "rate": rate},
            )
        record = ExchangeRateRecord(rate=rate, currency=currency, fetched_at=self._clock())
        try:
            await self._store.put(record)
        except StorageError as e:
            logger.warning("rate cache write failed: %s", e, extra={"currency": currency})
        self._degraded.discard(currency)
        logger.info("fetched exchange rate", extra={"currency": currency, "rate": rate, "source": "fetched"})
        return RateResolution(currency, rate, RateSource.FETCHED, record.fetched_at)

    def _fallback(
        self, currency: str, cached: Optional[ExchangeRateRecord], error: Exception
    ) -> RateResolution:
        if cached is not None:
            logger.warning(
                "rate fetch failed for %s, using cached rate: %s",
                currency,
                error,
                extra={"currency": currency, "rate": cached.rate, "source": "stale_cache"},
            )
            self._degraded.discard(currency)
            return RateResolution(currency, cached.rate, RateSource.STALE_CACHE, cached.fetched_at)
        logger.warning(
            "rate fetch failed for %s and nothing cached, showing unconverted amounts: %s",
            currency,
            error,
            extra={"currency": currency, "rate": 1.0, "source": "fallback"},
        )
        self._degraded.add(currency)
        return RateResolution(currency, 1.0, RateSource.FALLBACK)

    async def _shared_refresh(
        self, currency: str, cached: Optional[ExchangeRateRecord]
    ) -> RateResolution:
        task = self._pending.get(currency)
        if task is None:
            task = asyncio.create_task(self._refresh(currency, cached))
            self._pending[currency] = task
            task.add_done_callback(lambda _t, c=currency: self._pending.pop(c, None))
        return await asyncio.shield(task)

    # Public API -----------------------------------------------
    async def ensure_rate(self, currency: str) -> RateResolution:
        code = currency.upper()
        if code == self._base:
            return RateResolution(code, 1.0, RateSource.BASE)

        # Join an in-flight fetch before touching the cache again
        if code in self._pending:
            return await asyncio.shield(self._pending[code])

        cached = await self._read_cache(code)
        if cached is not None and self._is_fresh(cached):
            if is_suspect_rate(cached.rate, code, self._base):
                logger.warning(
                    "cached rate is 1 for %s, forcing refresh", code, extra={"currency": code}
                )
            else:
                logger.debug(
                    "using cached exchange rate",
                    extra={
                        "currency": code,
                        "rate": cached.rate,
                        "age_seconds": round(cached.age_seconds(self._clock())),
                    },
                )
                self._degraded.discard(code)
                return RateResolution(code, cached.rate, RateSource.CACHE, cached.fetched_at)
        elif cached is not None:
            logger.info(
                "cached rate expired, fetching fresh rate",
                extra={"currency": code, "age_seconds": round(cached.age_seconds(self._clock()))},
            )

        return await self._shared_refresh(code, cached)

    async def activate(self, currency: str) -> RateResolution:
        """Resolve `currency` and make it the active rate unless a newer request superseded it."""
        code = currency.upper()
        self._requested = code
        resolution = await self.ensure_rate(code)
        if self._requested == code:
            self._active = ActiveRate(code, resolution.rate, resolution.source)
        else:
            logger.debug("discarding superseded rate for %s", code, extra={"currency": code})
        return resolution

    @property
    def requested_currency(self) -> Optional[str]:
        return self._requested

    async def aclose(self) -> None:
        for task in list(self._pending.values()):
            await asyncio.shield(task)
        await self._provider.aclose()
