import logging

import pytest

from ledgerfx.services.formatting import (
    format_amount,
    format_grouped,
    format_large_number,
    locale_for_currency,
)


def test_just_below_threshold_is_not_abbreviated():
    assert format_amount(99_999.99, "$", "en-US", show_decimals=True) == "$99,999.99"


@pytest.mark.parametrize(
    "show_decimals, expected",
    [(False, "$100k"), (True, "$100.00k")],
)
def test_threshold_switches_to_abbreviation(show_decimals, expected):
    assert format_amount(100_000.00, "$", "en-US", show_decimals=show_decimals) == expected


@pytest.mark.parametrize(
    "amount, expected",
    [
        (1_500_000, "$1.50M"),
        (2_500_000_000, "$2.50B"),
        (-250_000, "$-250.00k"),
    ],
)
def test_magnitude_suffixes(amount, expected):
    assert format_amount(amount, "$", "en-US", show_decimals=True) == expected


def test_disable_abbreviation_groups_full_number():
    assert (
        format_amount(1_234_567.891, "$", "en-US", show_decimals=True, disable_abbreviation=True)
        == "$1,234,567.89"
    )


def test_zero_decimals_rounds_half_up():
    assert format_amount(1234.5, "$", "en-US", show_decimals=False) == "$1,235"
    assert format_amount(2.005, "$", "en-US", show_decimals=True) == "$2.01"


def test_negative_amount_keeps_sign_after_symbol():
    assert format_amount(-1234.5, "£", "en-GB", show_decimals=True) == "£-1,234.50"


def test_tiny_negative_rounds_to_unsigned_zero():
    assert format_amount(-0.001, "$", "en-US", show_decimals=True) == "$0.00"


def test_lakh_grouping_for_indian_locale():
    assert (
        format_amount(12_345_678, "₹", "en-IN", show_decimals=True, disable_abbreviation=True)
        == "₹1,23,45,678.00"
    )


def test_continental_separators():
    assert format_grouped(1234.5, "de-DE", 2) == "1.234,50"


def test_locale_table_lookup():
    assert locale_for_currency("eur") == "en-IE"
    assert locale_for_currency("JPY") == "ja-JP"
    assert locale_for_currency("XYZ") == "en-US"
    # unknown locale tags format like en-US
    assert format_grouped(1234.5, "xx-XX", 2) == "1,234.50"


def test_large_number_below_thousand_falls_through():
    assert format_large_number(999.5, True) == "999.50"


@pytest.mark.parametrize("bad", [float("nan"), None, float("inf"), "12"])
def test_invalid_amount_renders_zero_and_warns(bad, caplog):
    with caplog.at_level(logging.WARNING, logger="ledgerfx.format"):
        assert format_amount(bad, "€", "en-IE", show_decimals=True) == "€0.00"
        assert format_amount(bad, "€", "en-IE", show_decimals=False) == "€0"
    assert "invalid amount" in caplog.text


@pytest.mark.parametrize(
    "amount, expected",
    [
        # half-up on the decimal digits, not on the nearest binary float
        (100_005, "$100.01k"),
        (1_234_565, "$1.23M"),
        (2.675, "$2.68"),
        (1.005, "$1.01"),
    ],
)
def test_half_up_on_decimal_representation(amount, expected):
    assert format_amount(amount, "$", "en-US", show_decimals=True) == expected
