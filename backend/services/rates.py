"""Exchange rates for displaying projections in another currency.

Rates only ever rescale an already-computed projection; they never feed back
into the simulation itself.
"""

from __future__ import annotations

import logging
import threading
import time
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Callable, Dict, Mapping, Optional, Tuple

import requests

from backend.core.money import round_cents
from backend.schemas.projection import LedgerEntry, ProjectionResult
from backend.schemas.rates import RateTable

logger = logging.getLogger(__name__)

DEFAULT_BASE = "EUR"
DEFAULT_RATES_URL = "https://api.exchangerate.host/latest"
CACHE_SECONDS = 60 * 60

# Units per 1 EUR, served whenever the live feed is unavailable.
FALLBACK_RATES_EUR: Dict[str, float] = {
    "USD": 1.08,
    "EUR": 1.0,
    "JPY": 170.0,
    "GBP": 0.86,
    "AUD": 1.62,
    "CAD": 1.47,
    "CHF": 0.95,
    "CNY": 7.65,
    "INR": 90.0,
    "MXN": 19.5,
}

SUPPORTED_CURRENCIES = tuple(FALLBACK_RATES_EUR)


class UnsupportedCurrencyError(ValueError):
    def __init__(self, code: str):
        super().__init__(f"unsupported currency: {code}")
        self.code = code


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def rebase(rates: Mapping[str, float], old_base: str, new_base: str) -> Dict[str, float]:
    """Express a table quoted against ``old_base`` against ``new_base`` instead."""
    new_base = new_base.upper()
    if new_base == old_base:
        return dict(rates)
    if new_base not in rates:
        raise UnsupportedCurrencyError(new_base)
    pivot = rates[new_base]
    return {code: rate / pivot for code, rate in rates.items()}


def fallback_table(base: str = DEFAULT_BASE) -> RateTable:
    return RateTable(
        base=base.upper(),
        rates=rebase(FALLBACK_RATES_EUR, "EUR", base),
        source="fallback",
        fetchedAt=_utcnow(),
    )


class RateProvider(ABC):
    """Anything that can hand out a rate table for a base currency."""

    @abstractmethod
    def get_rates(self, base: str = DEFAULT_BASE) -> RateTable:
        raise NotImplementedError


class StaticRateProvider(RateProvider):
    """Serves the built-in table. Used offline and in tests."""

    def get_rates(self, base: str = DEFAULT_BASE) -> RateTable:
        return fallback_table(base)


class HttpRateProvider(RateProvider):
    """
    Fetches live rates over HTTP and caches them per base currency.

    Cache and fallback rules:
      - a table younger than ``cache_seconds`` is served from memory
      - any network, HTTP or payload problem is logged and the static table
        is served instead; it is cached too so a dead feed is not hammered
    """

    def __init__(
        self,
        url: str = DEFAULT_RATES_URL,
        timeout: float = 5.0,
        cache_seconds: float = CACHE_SECONDS,
        session: Optional[requests.Session] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.url = url
        self.timeout = timeout
        self.cache_seconds = cache_seconds
        self.session = session or requests.Session()
        self._clock = clock
        self._cache: Dict[str, Tuple[float, RateTable]] = {}
        self._lock = threading.Lock()

    def get_rates(self, base: str = DEFAULT_BASE) -> RateTable:
        base = base.upper()
        if base not in SUPPORTED_CURRENCIES:
            raise UnsupportedCurrencyError(base)

        with self._lock:
            cached = self._cache.get(base)
            if cached and self._clock() - cached[0] < self.cache_seconds:
                logger.debug("rates: cache hit for %s", base)
                table = cached[1]
                if table.source == "live":
                    table = table.model_copy(update={"source": "cache"})
                return table

        table = self._fetch(base)
        with self._lock:
            self._cache[base] = (self._clock(), table)
        return table

    def clear_cache(self) -> None:
        with self._lock:
            self._cache.clear()

    def _fetch(self, base: str) -> RateTable:
        params = {"base": base, "symbols": ",".join(SUPPORTED_CURRENCIES)}
        try:
            response = self.session.get(self.url, params=params, timeout=self.timeout)
            response.raise_for_status()
            payload = response.json()
            rates = {
                code.upper(): float(rate)
                for code, rate in payload["rates"].items()
                if code.upper() in SUPPORTED_CURRENCIES
            }
        except (requests.RequestException, ValueError, KeyError, TypeError, AttributeError) as exc:
            logger.warning("rates: fetch for %s failed (%s); using built-in table", base, exc)
            return fallback_table(base)

        if not rates or any(rate <= 0 for rate in rates.values()):
            logger.warning("rates: feed returned an unusable table for %s; using built-in table", base)
            return fallback_table(base)

        rates.setdefault(base, 1.0)
        logger.info("rates: fetched %d live rates for %s", len(rates), base)
        return RateTable(base=base, rates=rates, source="live", fetchedAt=_utcnow())


def convert_amount(amount: float, source: str, target: str, table: RateTable) -> float:
    """Convert through the table base: amount / rate[source] * rate[target]."""
    source, target = source.upper(), target.upper()
    for code in (source, target):
        if code not in table.rates:
            raise UnsupportedCurrencyError(code)
    if source == target:
        return amount
    return amount / table.rates[source] * table.rates[target]


def convert_result(
    result: ProjectionResult, source: str, target: str, table: RateTable
) -> ProjectionResult:
    """Rescale every money value of a projection into ``target``."""
    factor = convert_amount(1.0, source, target, table)

    def scale(value: float) -> float:
        return round_cents(value * factor)

    return result.model_copy(
        update={
            "ledger": [
                LedgerEntry(periodIndex=entry.periodIndex, date=entry.date, balance=scale(entry.balance))
                for entry in result.ledger
            ],
            "finalBalance": scale(result.finalBalance),
            "totalContributions": scale(result.totalContributions),
            "totalInterestEarned": scale(result.totalInterestEarned),
        }
    )
