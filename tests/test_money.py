from __future__ import annotations

from decimal import Decimal

import pytest
from returns.maybe import Nothing

from marketplace.core.domain.model.money import Money, normalize_money
from marketplace.core.domain.model.text import sanitize_text


@pytest.mark.parametrize(
    "raw, expected",
    [
        (19.99, "19.99"),
        (1.005, "1.01"),
        (2.675, "2.68"),
        ("12.5", "12.50"),
        (" 7 ", "7.00"),
        (10, "10.00"),
        (Decimal("0.125"), "0.13"),
        (-0.125, "-0.13"),
        (-3, "-3.00"),
    ],
)
def test_normalize_money_rounds_half_up_to_cents(raw, expected):
    assert normalize_money(raw).unwrap() == Money(Decimal(expected))


@pytest.mark.parametrize(
    "raw",
    [None, True, False, "", "   ", "abc", "0x10", float("nan"), float("inf"), "-Infinity", [1], {}],
)
def test_normalize_money_rejects_non_finite_or_non_numeric(raw):
    assert normalize_money(raw) == Nothing


def test_money_arithmetic_stays_at_cents():
    unit = Money.of("19.99")
    assert unit * 3 == Money.of("59.97")
    assert Money.of("0.10") + Money.of("0.20") == Money.of("0.30")
    assert (unit * 3).to_json() == 59.97


def test_large_amounts_keep_cent_precision():
    assert normalize_money(1e27).unwrap() == Money.of("1e27")
    assert Money.of("1e25") * 999 == Money.of("9.99e27")
    assert Money.of("12345678901234567890123456.78") + Money.of("0.01") == Money.of(
        "12345678901234567890123456.79"
    )


@pytest.mark.parametrize("raw", ["1e400", Decimal("-1e309")])
def test_normalize_money_rejects_amounts_beyond_json_numbers(raw):
    assert normalize_money(raw) == Nothing


def test_overflowing_product_is_not_representable():
    assert (Money.of("1e308") * 999).is_representable() is False
    assert Money.of("1e308").is_representable() is True


def test_sanitize_text_collapses_trims_and_truncates():
    assert sanitize_text("  Ada \n\t Lovelace  ") == "Ada Lovelace"
    assert sanitize_text("x" * 50, max_len=10) == "x" * 10
    assert sanitize_text("<b>bold</b>") == "<b>bold</b>"


@pytest.mark.parametrize("raw", [None, 42, ["a"], {"a": 1}])
def test_sanitize_text_non_string_is_empty(raw):
    assert sanitize_text(raw) == ""
