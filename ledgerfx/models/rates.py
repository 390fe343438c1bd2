from __future__ import annotations
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ExchangeRateRecord(BaseModel):
    """1 unit of base currency = `rate` units of `currency`, as of `fetched_at`."""

    model_config = ConfigDict(frozen=True)

    rate: float = Field(..., gt=0)
    currency: str
    fetched_at: datetime

    @field_validator("currency")
    @classmethod
    def upper_currency(cls, v: str) -> str:
        return v.strip().upper()

    @field_validator("fetched_at")
    @classmethod
    def aware_timestamp(cls, v: datetime) -> datetime:
        # Naive timestamps from older rows are taken as UTC
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    def age_seconds(self, now: datetime) -> float:
        return (now - self.fetched_at).total_seconds()
