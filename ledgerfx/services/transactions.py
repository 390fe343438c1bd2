"""Transaction amount resolution.

Which number to show for a transaction, and whether to show a smaller
caption under it:

    original currency == active   -> show original amount, no caption
    original currency != active   -> show converted ledger amount, caption in original currency
    no original, active != base   -> show converted ledger amount, caption with raw ledger amount
    no original, active == base   -> show ledger amount, no caption
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from ledgerfx.models.constants import BASE_CURRENCY
from ledgerfx.models.currency import symbol_for
from ledgerfx.services.formatting import format_grouped
from ledgerfx.services.money import is_valid_number

logger = logging.getLogger("ledgerfx.currency")


@dataclass(frozen=True)
class Caption:
    currency: str
    symbol: str
    amount: float
    text: str


def _same_code(a: Optional[str], b: Optional[str]) -> bool:
    return bool(a) and bool(b) and a.strip().upper() == b.strip().upper()


def has_original(original_amount: Optional[float], original_currency: Optional[str]) -> bool:
    return is_valid_number(original_amount) and bool(original_currency and original_currency.strip())


def resolve_display_amount(
    amount: Optional[float],
    original_amount: Optional[float],
    original_currency: Optional[str],
    active_currency: str,
    convert_from_usd: Callable[[float], float],
) -> float:
    if not is_valid_number(amount):
        logger.warning("invalid transaction amount: %r", amount)
        return 0.0

    # Exact value the user typed wins over any converted figure
    if has_original(original_amount, original_currency) and _same_code(
        original_currency, active_currency
    ):
        return float(original_amount)  # type: ignore[arg-type]

    return convert_from_usd(amount)  # type: ignore[arg-type]


def secondary_caption(
    amount: Optional[float],
    original_amount: Optional[float],
    original_currency: Optional[str],
    active_currency: str,
    base_currency: str = BASE_CURRENCY,
) -> Optional[Caption]:
    if has_original(original_amount, original_currency):
        if _same_code(original_currency, active_currency):
            return None
        code = original_currency.strip().upper()  # type: ignore[union-attr]
        symbol = symbol_for(code)
        value = float(original_amount)  # type: ignore[arg-type]
        return Caption(code, symbol, value, f"{symbol}{format_grouped(value, 'en-US', 2)}")

    if _same_code(active_currency, base_currency) or not is_valid_number(amount):
        return None
    symbol = symbol_for(base_currency)
    value = float(amount)  # type: ignore[arg-type]
    return Caption(base_currency.upper(), symbol, value, f"{symbol}{format_grouped(value, 'en-US', 2)}")
