from __future__ import annotations
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class TransactionAmount(BaseModel):
    """One transaction's monetary value as recorded.

    `amount` is always in the ledger currency. `original_amount` and
    `original_currency` capture what the user typed when it differed.
    """

    amount: float
    original_amount: Optional[float] = None
    original_currency: Optional[str] = Field(None, min_length=1)

    @field_validator("original_currency")
    @classmethod
    def upper_original(cls, v: Optional[str]) -> Optional[str]:
        return v.strip().upper() if v else v
