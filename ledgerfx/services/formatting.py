"""Amount formatting: plain locale grouping vs abbreviated k/M/B notation.

Rules:
    - abs(amount) >= 100,000 (unless abbreviation disabled) -> '{symbol}{n}{k|M|B}'
    - otherwise -> '{symbol}{grouped}' using the locale's separators
    - invalid input never raises; it renders as zero and logs a warning
"""

from __future__ import annotations

import logging
from typing import Any

from ledgerfx.models.constants import (
    ABBREVIATION_THRESHOLD,
    DEFAULT_LOCALE,
    LOCALE_BY_CURRENCY,
    LOCALE_CONVENTIONS,
)
from ledgerfx.services.money import is_valid_number, to_fixed

logger = logging.getLogger("ledgerfx.format")

_MAGNITUDES = (
    (1_000_000_000, "B"),
    (1_000_000, "M"),
    (1_000, "k"),
)


def locale_for_currency(code: str) -> str:
    return LOCALE_BY_CURRENCY.get((code or "").upper(), DEFAULT_LOCALE)


def zero_amount(symbol: str, show_decimals: bool) -> str:
    return f"{symbol}0{'.00' if show_decimals else ''}"


def _group_digits(digits: str, separator: str, lakh: bool) -> str:
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    step = 2 if lakh else 3
    groups = []
    while len(head) > step:
        groups.insert(0, head[-step:])
        head = head[:-step]
    groups.insert(0, head)
    return separator.join(groups + [tail])


def format_grouped(amount: float, locale: str, decimals: int) -> str:
    """Locale-grouped number without a symbol, e.g. 1234.5 -> '1,234.50'."""
    group_sep, decimal_sep, lakh = LOCALE_CONVENTIONS.get(
        locale, LOCALE_CONVENTIONS[DEFAULT_LOCALE]
    )
    text = to_fixed(amount, decimals)
    sign = ""
    if text.startswith("-"):
        sign, text = "-", text[1:]
    int_part, _, frac_part = text.partition(".")
    grouped = _group_digits(int_part, group_sep, lakh)
    if frac_part:
        grouped = f"{grouped}{decimal_sep}{frac_part}"
    return f"{sign}{grouped}"


def format_large_number(amount: float, show_decimals: bool) -> str:
    """Abbreviate with k/M/B; values under 1,000 fall through unabbreviated."""
    places = 2 if show_decimals else 0
    abs_amount = abs(amount)
    sign = "-" if amount < 0 else ""
    for divisor, suffix in _MAGNITUDES:
        if abs_amount >= divisor:
            return f"{sign}{to_fixed(abs_amount / divisor, places)}{suffix}"
    return to_fixed(amount, places)


def format_amount(
    amount: Any,
    currency_symbol: str,
    locale: str = DEFAULT_LOCALE,
    *,
    show_decimals: bool = True,
    disable_abbreviation: bool = False,
) -> str:
    if not is_valid_number(amount):
        logger.warning("invalid amount passed to formatter: %r", amount)
        return zero_amount(currency_symbol, show_decimals)

    if not disable_abbreviation and abs(amount) >= ABBREVIATION_THRESHOLD:
        return f"{currency_symbol}{format_large_number(amount, show_decimals)}"

    decimals = 2 if show_decimals else 0
    return f"{currency_symbol}{format_grouped(amount, locale, decimals)}"
