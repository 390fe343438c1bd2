import pytest

from ledgerfx.services.transactions import Caption, has_original, resolve_display_amount, secondary_caption


def _to_gbp(amount):
    return amount * 0.79


def test_original_amount_wins_when_currency_matches():
    assert resolve_display_amount(100, 85, "EUR", "EUR", _to_gbp) == 85.0
    assert resolve_display_amount(100, 85, "eur ", "EUR", _to_gbp) == 85.0


def test_other_currency_uses_converted_ledger_amount():
    assert resolve_display_amount(100, 85, "EUR", "GBP", _to_gbp) == pytest.approx(79.0)
    assert resolve_display_amount(100, None, None, "GBP", _to_gbp) == pytest.approx(79.0)


def test_incomplete_original_is_ignored():
    assert resolve_display_amount(100, 85, "", "EUR", _to_gbp) == pytest.approx(79.0)
    assert resolve_display_amount(100, None, "EUR", "EUR", _to_gbp) == pytest.approx(79.0)
    assert not has_original(float("nan"), "EUR")


@pytest.mark.parametrize("bad", [None, float("nan"), "100"])
def test_invalid_ledger_amount_resolves_to_zero(bad):
    assert resolve_display_amount(bad, 85, "EUR", "EUR", _to_gbp) == 0.0


def test_caption_shows_original_currency():
    caption = secondary_caption(100, 85, "EUR", "GBP")
    assert caption == Caption(currency="EUR", symbol="€", amount=85.0, text="€85.00")


def test_no_caption_when_original_matches_active():
    assert secondary_caption(100, 85, "eur", "EUR") is None


def test_caption_with_ledger_amount_when_no_original():
    caption = secondary_caption(1234.5, None, None, "EUR")
    assert caption.currency == "USD"
    assert caption.text == "$1,234.50"


def test_no_caption_in_base_currency_without_original():
    assert secondary_caption(100, None, None, "USD") is None
    assert secondary_caption(None, None, None, "EUR") is None


def test_unknown_original_currency_uses_code_as_symbol():
    caption = secondary_caption(50, 1000, "xyz", "USD")
    assert caption.symbol == "XYZ"
    assert caption.text == "XYZ1,000.00"
