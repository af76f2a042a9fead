from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Dict, List, Optional, Union

from pydantic import ValidationError

from backend.core.dates import add_months
from backend.core.money import round_cents
from backend.schemas.projection import (
    UNREACHABLE,
    LedgerEntry,
    ProjectionInput,
    ProjectionOutcome,
    ProjectionResult,
)

logger = logging.getLogger(__name__)

# ~833 years of months; anything needing more is treated as out of reach.
MAX_PERIODS = 10000

_UNREACHABLE_REASONS = {
    ProjectionOutcome.NO_GROWTH: "Expenses cover all income and there is no interest to grow the balance.",
    ProjectionOutcome.STAGNATED: "The balance stopped changing before reaching the target.",
    ProjectionOutcome.DECLINING: "Expenses outpace income and interest, so the balance keeps shrinking.",
    ProjectionOutcome.HORIZON_EXCEEDED: "The target is not reached within {max_periods} months.",
}


class ProjectionValidationError(ValueError):
    def __init__(self, errors: List[Dict[str, str]]):
        super().__init__("; ".join(f"{err['field']}: {err['message']}" for err in errors))
        self.errors = errors
        self.field = errors[0]["field"] if errors else None


def validate_input(params: Union[ProjectionInput, Mapping[str, Any]]) -> ProjectionInput:
    """Validate raw or already-built input before any simulation work.

    A ProjectionInput is re-validated from its dump so instances made with
    ``model_construct`` cannot smuggle negative or non-finite numbers in.
    """
    raw = params.model_dump() if isinstance(params, ProjectionInput) else params
    if not isinstance(raw, Mapping):
        raise ProjectionValidationError(
            [{"field": "__root__", "message": "projection input must be an object"}]
        )
    try:
        return ProjectionInput.model_validate(dict(raw))
    except ValidationError as exc:
        raise ProjectionValidationError(
            [
                {
                    "field": ".".join(str(part) for part in err["loc"]) or "__root__",
                    "message": err["msg"],
                }
                for err in exc.errors()
            ]
        ) from exc


def compute(
    params: Union[ProjectionInput, Mapping[str, Any]],
    *,
    max_periods: int = MAX_PERIODS,
) -> ProjectionResult:
    """
    Project a savings balance month by month until it reaches the target.

    Order of operations (per period):
      1) Add the period's surplus (income - expenses + additional deposit).
      2) Apply one month of interest to the post-surplus balance.
      3) Round to cents (half-up) and record the ledger entry.
      4) Stop as unreachable if the balance equals (stagnated) or falls below
         (declining) the previous period's balance.
      5) Stop as reached once the balance is at or above the target.

    Raises ProjectionValidationError before simulating if any field is
    negative, missing or not a finite number.
    """
    if max_periods < 1:
        raise ValueError("max_periods must be at least 1")
    inputs = validate_input(params)

    if inputs.startingBalance >= inputs.targetBalance:
        result = _already_reached(inputs)
        logger.debug("projection: target already met at %.2f", inputs.startingBalance)
        return result

    surplus = inputs.periodic_surplus
    rate = inputs.period_rate

    if surplus <= 0 and rate == 0:
        logger.debug("projection: no growth possible (surplus=%.2f, rate=0)", surplus)
        return _build_result(inputs, [], ProjectionOutcome.NO_GROWTH, max_periods)

    balance = inputs.startingBalance
    ledger: List[LedgerEntry] = []
    outcome = ProjectionOutcome.HORIZON_EXCEEDED

    for period in range(1, max_periods + 1):
        balance = round_cents((balance + surplus) * (1 + rate))
        previous = ledger[-1].balance if ledger else None
        ledger.append(
            LedgerEntry(
                periodIndex=period,
                date=_period_date(inputs, period),
                balance=balance,
            )
        )

        if previous is not None and balance == previous:
            outcome = ProjectionOutcome.STAGNATED
            break
        if previous is not None and balance < previous:
            outcome = ProjectionOutcome.DECLINING
            break
        if balance >= inputs.targetBalance:
            outcome = ProjectionOutcome.REACHED
            break

    logger.debug("projection: %s after %d periods", outcome.value, len(ledger))
    return _build_result(inputs, ledger, outcome, max_periods)


def _period_date(inputs: ProjectionInput, period: int):
    if inputs.startDate is None:
        return None
    # always offset from the start so a 31st start keeps landing on month ends
    return add_months(inputs.startDate, period)


def _already_reached(inputs: ProjectionInput) -> ProjectionResult:
    balance = round_cents(inputs.startingBalance)
    return ProjectionResult(
        periodsNeeded=0,
        endDate=inputs.startDate,
        ledger=[LedgerEntry(periodIndex=0, date=inputs.startDate, balance=balance)],
        finalBalance=balance,
        totalContributions=0.0,
        totalInterestEarned=0.0,
        summaryText=summarize(ProjectionOutcome.ALREADY_REACHED, 0, None),
        unreachable=False,
        outcome=ProjectionOutcome.ALREADY_REACHED,
    )


def _build_result(
    inputs: ProjectionInput,
    ledger: List[LedgerEntry],
    outcome: ProjectionOutcome,
    max_periods: int,
) -> ProjectionResult:
    reached = outcome == ProjectionOutcome.REACHED
    final_balance = ledger[-1].balance if ledger else round_cents(inputs.startingBalance)

    # surplus is constant, so what was applied is surplus * periods simulated
    contributions = round_cents(inputs.periodic_surplus * len(ledger))
    interest = round_cents(final_balance - inputs.startingBalance - contributions)

    periods = len(ledger) if reached else None
    end_date = (
        add_months(inputs.startDate, periods)
        if reached and inputs.startDate is not None
        else None
    )

    return ProjectionResult(
        periodsNeeded=periods if reached else UNREACHABLE,
        endDate=end_date,
        ledger=ledger,
        finalBalance=final_balance,
        totalContributions=contributions,
        totalInterestEarned=interest,
        summaryText=summarize(outcome, periods, end_date, max_periods=max_periods),
        unreachable=not reached,
        outcome=outcome,
    )


def summarize(
    outcome: ProjectionOutcome,
    periods: Optional[int],
    end_date,
    max_periods: int = MAX_PERIODS,
) -> str:
    """Human-readable one-liner for the results panel."""
    if outcome == ProjectionOutcome.ALREADY_REACHED:
        return "You have already reached your savings goal!"

    if outcome == ProjectionOutcome.REACHED:
        unit = "month" if periods == 1 else "months"
        text = f"You will reach your goal in {periods} {unit}"
        if end_date is not None:
            text += f" (by {end_date.isoformat()})"
        return text

    reason = _UNREACHABLE_REASONS[outcome].format(max_periods=max_periods)
    return f"Goal is impossible to reach with current parameters. {reason}"


__all__ = [
    "MAX_PERIODS",
    "ProjectionValidationError",
    "validate_input",
    "compute",
    "summarize",
]
