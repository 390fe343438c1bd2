"""Pydantic domain models for the ledger currency subsystem."""

from .constants import (
    BASE_CURRENCY,
    CURRENCIES,
    DEFAULT_LOCALE,
    LOCALE_BY_CURRENCY,
)  # re-export
from .currency import Currency, DEFAULT_CURRENCY, get_currency_by_code, list_currencies
from .rates import ExchangeRateRecord
from .transaction import TransactionAmount

__all__ = [
    "BASE_CURRENCY",
    "CURRENCIES",
    "DEFAULT_LOCALE",
    "LOCALE_BY_CURRENCY",
    "Currency",
    "DEFAULT_CURRENCY",
    "get_currency_by_code",
    "list_currencies",
    "ExchangeRateRecord",
    "TransactionAmount",
]
