"""Pydantic schema for exchange-rate tables."""

from __future__ import annotations

from datetime import datetime
from typing import Dict, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

CURRENCY_CODE_PATTERN = r"^[A-Za-z]{3}$"


class RateTable(BaseModel):
    """Units of each currency per one unit of ``base``."""

    model_config = ConfigDict(frozen=True)

    base: str
    rates: Dict[str, float]
    source: Literal["live", "cache", "fallback"]
    fetchedAt: datetime = Field(..., description="UTC time the rates were obtained.")


class CurrencyQuery(BaseModel):
    """Query-string currency codes accepted by the projection and rates routes."""

    currency: Optional[str] = Field(None, pattern=CURRENCY_CODE_PATTERN)
    display: Optional[str] = Field(None, pattern=CURRENCY_CODE_PATTERN)
    base: Optional[str] = Field(None, pattern=CURRENCY_CODE_PATTERN)
