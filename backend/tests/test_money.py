from __future__ import annotations

import math

import pytest

from backend.core.money import parse_amount, round_cents


@pytest.mark.parametrize(
    "value,expected",
    [
        (1.005, 1.01),
        (2.675, 2.68),
        (1.004, 1.0),
        (-1.005, -1.01),
        (4007.003, 4007.0),
        (10052.1421, 10052.14),
        (0.0, 0.0),
    ],
)
def test_round_cents_rounds_half_up(value, expected):
    assert round_cents(value) == expected


def test_round_cents_passes_non_finite_through():
    assert math.isinf(round_cents(math.inf))


@pytest.mark.parametrize(
    "text,expected",
    [
        ("", 0.0),
        ("   ", 0.0),
        (None, 0.0),
        ("1200", 1200.0),
        ("$1,234.50", 1234.5),
        ("1 234,50 €", 1234.5),
        ("12,5", 12.5),
        ("1,000,000", 1000000.0),
        ("2,000", 2000.0),
        ("1.234,56", 1234.56),
        ("1.234.567,89", 1234567.89),
        ("CHF 1'500.25", 1500.25),
        ("EUR 99", 99.0),
        ("-40", -40.0),
        (15, 15.0),
    ],
)
def test_parse_amount(text, expected):
    assert parse_amount(text) == expected


def test_parse_amount_marks_garbage_as_nan():
    assert math.isnan(parse_amount("abc"))
    assert math.isnan(parse_amount("1.2.3"))
    assert math.isnan(parse_amount("1e5"))
    assert math.isnan(parse_amount("12 apples"))
    assert math.isnan(parse_amount("1,234.5,6"))


@pytest.mark.parametrize("value", [1e26, 1.2345678901234567e27, 1e30, 1.7976931348623157e308])
def test_round_cents_handles_huge_values(value):
    assert round_cents(value) == value
