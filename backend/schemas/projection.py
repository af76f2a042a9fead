"""Data contracts for savings-goal projections."""

from __future__ import annotations

import datetime as dt
from enum import Enum
from typing import List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from backend.core.dates import to_utc_date

UNREACHABLE = "unreachable"

# Upper bounds keep every balance the loop can produce finite.
MAX_AMOUNT = 1e15
MAX_RATE_PERCENT = 1000.0


class ProjectionInput(BaseModel):
    """Everything the engine needs for one run. All amounts share one currency."""

    model_config = ConfigDict(extra="forbid", frozen=True, allow_inf_nan=False)

    startingBalance: float = Field(..., ge=0, le=MAX_AMOUNT, description="Balance at period 0.")
    periodicIncome: float = Field(..., ge=0, le=MAX_AMOUNT, description="Income per month.")
    periodicExpenses: float = Field(..., ge=0, le=MAX_AMOUNT, description="Expenses per month.")
    additionalDeposit: float = Field(
        0.0,
        ge=0,
        le=MAX_AMOUNT,
        description="Extra amount put aside every month on top of income - expenses.",
    )
    annualInterestRatePercent: float = Field(
        0.0,
        ge=0,
        le=MAX_RATE_PERCENT,
        description="Nominal annual rate in percent (1.2 means 1.2%), compounded monthly.",
    )
    targetBalance: float = Field(..., ge=0, le=MAX_AMOUNT, description="Balance to reach.")
    startDate: Optional[dt.date] = Field(
        None, description="Calendar date of period 0; periods are unlabeled without it."
    )

    @field_validator("startDate", mode="before")
    @classmethod
    def _start_date_in_utc(cls, value):
        if isinstance(value, dt.datetime):
            return to_utc_date(value)
        if isinstance(value, str) and "T" in value:
            return to_utc_date(dt.datetime.fromisoformat(value.replace("Z", "+00:00")))
        return value

    @property
    def periodic_surplus(self) -> float:
        return self.periodicIncome - self.periodicExpenses + self.additionalDeposit

    @property
    def period_rate(self) -> float:
        return self.annualInterestRatePercent / 100 / 12


class ProjectionOutcome(str, Enum):
    ALREADY_REACHED = "already_reached"
    REACHED = "reached"
    NO_GROWTH = "no_growth"
    STAGNATED = "stagnated"
    DECLINING = "declining"
    HORIZON_EXCEEDED = "horizon_exceeded"


class LedgerEntry(BaseModel):
    """Balance at the end of one period, rounded to cents."""

    model_config = ConfigDict(frozen=True)

    periodIndex: int = Field(
        ...,
        ge=0,
        description="Simulated periods count from 1; 0 only marks the starting balance when the target is already met.",
    )
    date: Optional[dt.date] = None
    balance: float


class ProjectionResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    periodsNeeded: Union[int, Literal["unreachable"]]
    endDate: Optional[dt.date] = None
    ledger: List[LedgerEntry] = Field(default_factory=list)
    finalBalance: float
    totalContributions: float
    totalInterestEarned: float
    summaryText: str
    unreachable: bool
    outcome: ProjectionOutcome
