"""Cent rounding and form-text parsing for money values."""

from __future__ import annotations

import math
import re
import unicodedata
from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Optional, Union

CENT = Decimal("0.01")

_NUMBER = re.compile(r"-?[\d.,]+")
_CURRENCY_CODE = re.compile(r"^([A-Za-z]{3})?(?P<number>[^A-Za-z]*?)([A-Za-z]{3})?$")


def round_cents(value: float) -> float:
    """Round half-up to two decimals.

    Goes through the shortest repr of the float so 1.005 rounds to 1.01
    instead of falling to 1.00 on its binary expansion. Precision grows with
    the magnitude, so any finite float can be quantized.
    """
    if not math.isfinite(value):
        return value
    amount = Decimal(repr(value))
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, amount.adjusted() + 3)
        return float(amount.quantize(CENT, rounding=ROUND_HALF_UP))


def _drop_decoration(text: str) -> str:
    """Remove whitespace, currency symbols, apostrophe grouping and an ISO code."""
    kept = "".join(
        char
        for char in text
        if not char.isspace() and char not in "'’" and unicodedata.category(char) != "Sc"
    )
    match = _CURRENCY_CODE.match(kept)
    return match.group("number") if match else kept


def _normalize_separators(number: str) -> Optional[str]:
    if "," in number and "." in number:
        # whichever mark comes last is the decimal one
        decimal_mark = "," if number.rfind(",") > number.rfind(".") else "."
        grouping = "." if decimal_mark == "," else ","
        whole, _, fraction = number.rpartition(decimal_mark)
        if decimal_mark in whole:
            return None
        return whole.replace(grouping, "") + "." + fraction

    for mark in (",", "."):
        if number.count(mark) > 1:
            groups = number.split(mark)
            if all(len(group) == 3 for group in groups[1:]):
                return number.replace(mark, "")
            return None

    if "," in number:
        whole, _, fraction = number.partition(",")
        return whole + fraction if len(fraction) == 3 else whole + "." + fraction
    return number


def parse_amount(text: Optional[Union[str, float, int]]) -> float:
    """Turn a form field into a number.

    Blank input counts as 0. Spaces, currency symbols/codes and thousands
    separators are dropped. With both "." and "," present the last one is
    the decimal mark ("1,234.56" and "1.234,56"); a lone comma is a decimal
    mark unless exactly three digits follow it ("12,5" vs "2,000").
    Anything else (letters, exponents, misplaced separators) comes back as
    NaN so validation can reject it with the field name attached.
    """
    if text is None:
        return 0.0
    if isinstance(text, (int, float)):
        return float(text)

    stripped = text.strip()
    if not stripped:
        return 0.0

    number = _drop_decoration(stripped)
    if not _NUMBER.fullmatch(number):
        return math.nan

    normalized = _normalize_separators(number)
    if normalized is None:
        return math.nan
    try:
        return float(normalized)
    except ValueError:
        return math.nan
