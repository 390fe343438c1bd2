from __future__ import annotations
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from .constants import BASE_CURRENCY, CURRENCY_CATALOG


class Currency(BaseModel):
    """Display currency descriptor; replaced wholesale, never mutated."""

    model_config = ConfigDict(frozen=True)

    code: str
    name: str
    symbol: str
    flag: str = ""

    @field_validator("code")
    @classmethod
    def upper_code(cls, v: str) -> str:
        v = v.strip().upper()
        if len(v) != 3 or not v.isalpha():
            raise ValueError("currency code must be a 3-letter ISO-4217 code")
        return v


_BY_CODE: Dict[str, Currency] = {
    code: Currency(code=code, name=name, symbol=symbol, flag=flag)
    for code, name, symbol, flag in CURRENCY_CATALOG
}

DEFAULT_CURRENCY: Currency = _BY_CODE[BASE_CURRENCY]


def get_currency_by_code(code: Optional[str]) -> Optional[Currency]:
    if not code:
        return None
    return _BY_CODE.get(code.strip().upper())


def list_currencies() -> List[Currency]:
    return list(_BY_CODE.values())


def symbol_for(code: str) -> str:
    """Symbol for a catalog code, or the code itself when unknown."""
    currency = get_currency_by_code(code)
    return currency.symbol if currency else code.upper()
