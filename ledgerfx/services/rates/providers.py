from __future__ import annotations

"""Concrete rate providers and factory.

'static' serves a built-in approximate table (offline / tests); 'external-http'
calls the backend exchange-rate endpoint which answers {"rate": number}.
"""
from typing import Any, Dict, Mapping, Optional

import httpx

from .base import RateProvider
from ledgerfx.core.config import Settings
from ledgerfx.core.errors import RateProviderError
from ledgerfx.services.http_client import get_json, HttpError

# Units of currency per 1 USD; approximate, for offline use only.
_STATIC_RATES: Dict[str, float] = {
    "USD": 1.0,
    "EUR": 0.92,
    "GBP": 0.79,
    "JPY": 151.4,
    "AUD": 1.52,
    "CAD": 1.36,
    "CHF": 0.9,
    "CNY": 7.24,
    "INR": 83.3,
    "PKR": 278.5,
    "SGD": 1.35,
    "HKD": 7.82,
    "NZD": 1.66,
    "SEK": 10.6,
    "NOK": 10.8,
    "DKK": 6.87,
    "PLN": 3.98,
    "MXN": 16.9,
    "BRL": 5.05,
    "ZAR": 18.7,
    "KRW": 1345.0,
    "THB": 36.4,
    "MYR": 4.72,
    "IDR": 15850.0,
    "PHP": 56.4,
    "AED": 3.6725,
    "SAR": 3.75,
    "ILS": 3.7,
    "TRY": 32.2,
    "RUB": 92.5,
}


class StaticRateProvider(RateProvider):
    def __init__(self, rates: Optional[Mapping[str, float]] = None):
        self._rates = dict(rates) if rates is not None else dict(_STATIC_RATES)

    async def fetch(self, currency: str) -> float:
        code = currency.upper()
        rate = self._rates.get(code)
        if rate is None:
            raise RateProviderError(f"no static rate for {code}")
        self._warn_if_suspect(rate, code)
        return rate


def parse_rate_payload(payload: Mapping[str, Any]) -> float:
    """Extract a positive rate from {"rate": x} or {"data": {"rate": x}}."""
    body: Any = payload
    if "rate" not in body and isinstance(body.get("data"), Mapping):
        body = body["data"]
    raw = body.get("rate")
    if isinstance(raw, bool) or not isinstance(raw, (int, float, str)):
        raise RateProviderError(f"malformed rate payload: {payload!r}")
    try:
        rate = float(raw)
    except (ValueError, OverflowError) as e:
        raise RateProviderError(f"unusable rate in payload: {raw!r}") from e
    if not rate > 0 or rate == float("inf"):
        raise RateProviderError(f"rate must be positive and finite, got {rate!r}")
    return rate


class ExternalHTTPRateProvider(RateProvider):
    """GET {base_url}{path}?to=XXX against the backend; one pooled client per provider."""

    def __init__(
        self,
        url: str,
        *,
        timeout: float = 5.0,
        retries: int = 2,
        backoff: float = 0.5,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self._url = url
        self._timeout = timeout
        self._retries = retries
        self._backoff = backoff
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def fetch(self, currency: str) -> float:
        code = currency.upper()
        try:
            data = await get_json(
                self._client,
                self._url,
                params={"to": code, "from": self.base_currency},
                timeout=self._timeout,
                retries=self._retries,
                backoff=self._backoff,
            )
        except HttpError as e:
            raise RateProviderError(str(e)) from e
        rate = parse_rate_payload(data)
        self._warn_if_suspect(rate, code)
        return rate

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()


def _make_static(settings: Settings) -> RateProvider:
    return StaticRateProvider()


def _make_external_http(settings: Settings) -> RateProvider:
    return ExternalHTTPRateProvider(
        settings.exchange_rate_url,
        timeout=settings.http_timeout_seconds,
        retries=settings.http_retries,
    )


_PROVIDER_REGISTRY = {
    "static": _make_static,
    "external-http": _make_external_http,
}


def make_rate_provider(kind: str, settings: Settings) -> RateProvider:
    factory = _PROVIDER_REGISTRY.get(kind)
    if not factory:
        raise ValueError(f"Unknown rate provider kind '{kind}'")
    provider = factory(settings)
    provider.base_currency = settings.base_currency
    return provider
