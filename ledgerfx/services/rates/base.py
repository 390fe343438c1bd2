"""Rate provider abstraction.

A provider is the only component that performs network I/O. It returns
"units of `currency` per 1 unit of base currency" and raises RateProviderError
on network failure or malformed responses.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from ledgerfx.models.constants import BASE_CURRENCY

logger = logging.getLogger("ledgerfx.rates")


def is_suspect_rate(rate: float, currency: str, base_currency: str = BASE_CURRENCY) -> bool:
    """A 1:1 rate for a non-base currency almost always means the upstream failed silently.

    Known false positive: currencies genuinely pegged 1:1 to the base.
    """
    return rate == 1 and currency.upper() != base_currency.upper()


class RateProvider(ABC):
    base_currency: str = BASE_CURRENCY

    @abstractmethod
    async def fetch(self, currency: str) -> float:
        """Return units of `currency` per 1 unit of base currency."""
        raise NotImplementedError

    async def aclose(self) -> None:
        """Release any pooled resources (no-op by default)."""

    def _warn_if_suspect(self, rate: float, currency: str) -> None:
        if is_suspect_rate(rate, currency, self.base_currency):
            logger.warning(
                "provider returned rate 1 for non-base currency %s; value may be invalid",
                currency,
                extra={"currency": currency, "rate": rate},
            )
