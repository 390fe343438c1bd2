"""Helpers for amount entry fields: format as the user types, parse back to numbers.

These are display-only helpers (en-US style commas); conversion to the ledger
currency still goes through CurrencyFacade.convert_to_usd.
"""

from __future__ import annotations

import math
import re
from typing import Union

from ledgerfx.services.formatting import format_grouped

_NON_NUMERIC = re.compile(r"[^0-9.]")
_THOUSANDS = re.compile(r"\B(?=(\d{3})+(?!\d))")
# Longest numeric prefix, so "12abc" reads as 12 and "1.2.3" as 1.2
_LEADING_NUMBER = re.compile(r"\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def format_currency_input(value: Union[str, float, int], allow_decimals: bool = True) -> str:
    text = _NON_NUMERIC.sub("", str(value))

    # Keep only the first decimal point
    parts = text.split(".")
    if len(parts) > 2:
        text = parts[0] + "." + "".join(parts[1:])

    if not allow_decimals:
        text = text.replace(".", "")

    integer_part, dot, decimal_part = text.partition(".")
    formatted_integer = _THOUSANDS.sub(",", integer_part)

    if dot:
        # '12.' while typing stays '12.'; decimals capped at two
        return f"{formatted_integer}.{decimal_part[:2]}"
    return formatted_integer


def parse_currency_input(formatted_value: str) -> str:
    return formatted_value.replace(",", "")


def currency_input_to_number(formatted_value: str) -> float:
    match = _LEADING_NUMBER.match(parse_currency_input(formatted_value))
    if not match:
        return 0.0
    number = float(match.group())
    return number if math.isfinite(number) else 0.0


def is_valid_currency_input(value: str) -> bool:
    if not value or value == ".":
        return False
    return currency_input_to_number(value) > 0


def format_currency_display(
    amount: float, currency_symbol: str = "$", show_decimals: bool = True
) -> str:
    return f"{currency_symbol}{format_grouped(amount, 'en-US', 2 if show_decimals else 0)}"
