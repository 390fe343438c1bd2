"""Public currency surface consumed by the rest of the application.

Amounts are stored in USD (the ledger currency). The facade converts them to
the user's display currency with the manager's active rate and formats them.
Reads are synchronous; only `initialize`, `set_currency` and
`set_show_decimals` touch storage or the network.

One instance per process: build it with `build_currency_facade`, call
`initialize()` once, then pass it to consumers.
"""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import Any, List, Optional

from ledgerfx.core.config import Settings
from ledgerfx.core.errors import StorageError, UnsupportedCurrencyError
from ledgerfx.db.dal import Database
from ledgerfx.models.currency import (
    Currency,
    DEFAULT_CURRENCY,
    get_currency_by_code,
    list_currencies,
)
from ledgerfx.services import app_settings
from ledgerfx.services.formatting import format_amount, locale_for_currency
from ledgerfx.services.money import is_valid_number
from ledgerfx.services.rates.cache_service import RateCacheStore
from ledgerfx.services.rates.conversion import convert_from_base, convert_to_base
from ledgerfx.services.rates.manager import ExchangeRateManager, RateResolution
from ledgerfx.services.rates.providers import make_rate_provider
from ledgerfx.services.transactions import Caption, resolve_display_amount, secondary_caption

logger = logging.getLogger("ledgerfx.currency")


class CurrencyFacade:
    def __init__(
        self,
        db: Database,
        manager: ExchangeRateManager,
        *,
        default_currency: str = DEFAULT_CURRENCY.code,
    ):
        self._db = db
        self._manager = manager
        self._default_code = default_currency.upper()
        self._currency: Currency = get_currency_by_code(manager.base_currency) or DEFAULT_CURRENCY
        self._show_decimals = True
        self._requested_code: Optional[str] = None
        self._last_code: Optional[str] = None

    # State --------------------------------------------------------------
    @property
    def active_currency(self) -> Currency:
        return self._currency

    def get_active_currency(self) -> Currency:
        return self._currency

    @property
    def currency_code(self) -> str:
        return self._currency.code

    @property
    def show_decimals(self) -> bool:
        return self._show_decimals

    @property
    def exchange_rate(self) -> float:
        return self._rate()

    @property
    def degraded(self) -> bool:
        return self._manager.is_degraded(self._currency.code)

    @property
    def last_currency(self) -> Optional[str]:
        """Most recently selected code, persisted across restarts."""
        return self._last_code

    def list_currencies(self, recent_first: bool = False) -> List[Currency]:
        currencies = list_currencies()
        if recent_first and self._last_code:
            currencies.sort(key=lambda c: c.code != self._last_code)
        return currencies

    def get_currency_symbol(self) -> str:
        return self._currency.symbol

    def _is_base(self) -> bool:
        return self._currency.code == self._manager.base_currency

    def _rate(self) -> float:
        if self._is_base():
            return 1.0
        active = self._manager.active_rate
        if active.currency != self._currency.code or not active.rate:
            return 1.0
        return active.rate

    # Lifecycle ----------------------------------------------------------
    async def initialize(self) -> None:
        """Load persisted currency + decimal preference and resolve the rate."""
        self._show_decimals = await app_settings.get_show_decimals(self._db)
        last = await app_settings.get_last_currency(self._db)
        self._last_code = last.upper() if last else None
        code = await app_settings.get_active_currency(self._db, self._default_code)
        currency = get_currency_by_code(code)
        if currency is None:
            logger.warning("persisted currency %s is not supported, using %s", code, self._default_code)
            currency = get_currency_by_code(self._default_code) or DEFAULT_CURRENCY
        await self._switch(currency)

    async def aclose(self) -> None:
        await self._manager.aclose()

    async def _switch(self, currency: Currency) -> Optional[RateResolution]:
        self._requested_code = currency.code
        resolution = await self._manager.activate(currency.code)
        # A later set_currency owns the visible state now
        if self._requested_code != currency.code:
            return None
        self._currency = currency
        return resolution

    # Mutations ----------------------------------------------------------
    async def set_currency(self, code: str) -> None:
        currency = get_currency_by_code(code)
        if currency is None:
            raise UnsupportedCurrencyError(code)
        try:
            await app_settings.set_active_currency(self._db, currency.code)
        except StorageError as e:
            logger.warning("could not persist currency choice: %s", e, extra={"currency": currency.code})
        self._last_code = currency.code
        resolution = await self._switch(currency)
        if resolution is not None:
            logger.info(
                "display currency changed",
                extra={"currency": currency.code, "rate": resolution.rate, "source": resolution.source.value},
            )

    async def set_show_decimals(self, show: bool) -> None:
        self._show_decimals = bool(show)
        try:
            await app_settings.set_show_decimals(self._db, self._show_decimals)
        except StorageError as e:
            logger.warning("could not persist decimal preference: %s", e)

    # Conversion ---------------------------------------------------------
    def convert_to_usd(self, amount: Any) -> float:
        """Display currency -> USD (use before sending amounts to the ledger)."""
        if not is_valid_number(amount):
            logger.warning("invalid amount passed to convert_to_usd: %r", amount)
            return 0.0
        if self._is_base():
            return amount
        return convert_to_base(amount, self._rate())

    def convert_from_usd(self, amount: Any) -> float:
        """USD -> display currency (use for display and editing)."""
        if not is_valid_number(amount):
            logger.warning("invalid amount passed to convert_from_usd: %r", amount)
            return 0.0
        if self._is_base():
            return amount
        return convert_from_base(amount, self._rate())

    # Formatting ---------------------------------------------------------
    def _format(self, amount: Any, disable_abbreviation: bool = False) -> str:
        return format_amount(
            amount,
            self._currency.symbol,
            locale_for_currency(self._currency.code),
            show_decimals=self._show_decimals,
            disable_abbreviation=disable_abbreviation,
        )

    def format_currency(self, amount: Any, disable_abbreviations: bool = False) -> str:
        """Format a USD amount in the display currency."""
        if not is_valid_number(amount):
            return self._format(amount)
        return self._format(amount * self._rate(), disable_abbreviations)

    def get_transaction_display_amount(
        self,
        amount: Any,
        original_amount: Optional[float] = None,
        original_currency: Optional[str] = None,
    ) -> float:
        return resolve_display_amount(
            amount, original_amount, original_currency, self._currency.code, self.convert_from_usd
        )

    def format_transaction_amount(
        self,
        amount: Any,
        original_amount: Optional[float] = None,
        original_currency: Optional[str] = None,
    ) -> str:
        if not is_valid_number(amount):
            return self._format(amount)
        return self._format(
            self.get_transaction_display_amount(amount, original_amount, original_currency)
        )

    def transaction_caption(
        self,
        amount: Any,
        original_amount: Optional[float] = None,
        original_currency: Optional[str] = None,
    ) -> Optional[Caption]:
        return secondary_caption(
            amount,
            original_amount,
            original_currency,
            self._currency.code,
            self._manager.base_currency,
        )


def build_currency_facade(settings: Settings) -> CurrencyFacade:
    """Wire store, provider and manager from settings. Call `initialize()` before use."""
    db = Database(settings.db_path)  # type: ignore[arg-type]
    store = RateCacheStore(db, settings.base_currency)
    provider = make_rate_provider(settings.exchange_rate_provider, settings)
    manager = ExchangeRateManager(
        store,
        provider,
        base_currency=settings.base_currency,
        ttl=timedelta(seconds=settings.rates_cache_ttl_seconds),
    )
    return CurrencyFacade(db, manager, default_currency=settings.default_currency)
