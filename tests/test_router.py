import logging

import pytest
from fastapi.testclient import TestClient

from ledgerfx.core.config import Settings
from ledgerfx.main import create_app


@pytest.fixture
def client(tmp_path):
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    settings = Settings(
        data_dir=tmp_path,
        db_path=tmp_path / "api.sqlite3",
        exchange_rate_provider="static",
    )
    app = create_app(settings)
    with TestClient(app) as c:
        yield c
    root.handlers[:] = saved_handlers
    root.setLevel(saved_level)


def test_root(client):
    r = client.get("/")
    assert r.status_code == 200
    assert r.json()["version"] == "0.1.0"


def test_initial_state_is_base_currency(client):
    body = client.get("/currency").json()
    assert body["currency"]["code"] == "USD"
    assert body["exchange_rate"] == 1.0
    assert body["show_decimals"] is True
    assert body["degraded"] is False


def test_list_currencies(client):
    codes = [c["code"] for c in client.get("/currency/list").json()]
    assert codes[0] == "USD"
    assert "EUR" in codes


def test_switch_then_format(client):
    r = client.put("/currency", json={"code": "eur"})
    assert r.status_code == 200
    assert r.json()["currency"]["code"] == "EUR"
    assert r.json()["exchange_rate"] == 0.92

    body = client.get("/currency/format", params={"amount": 100}).json()
    assert body == {"amount": 100.0, "currency": "EUR", "formatted": "€92.00"}

    big = client.get("/currency/format", params={"amount": 1_000_000}).json()
    assert big["formatted"] == "€920.00k"
    full = client.get(
        "/currency/format", params={"amount": 1_000_000, "disable_abbreviations": True}
    ).json()
    assert full["formatted"] == "€920,000.00"


def test_decimals_toggle(client):
    client.put("/currency", json={"code": "EUR"})
    r = client.put("/currency/decimals", json={"show_decimals": False})
    assert r.json()["show_decimals"] is False
    assert client.get("/currency/format", params={"amount": 100}).json()["formatted"] == "€92"


def test_convert_both_directions(client):
    client.put("/currency", json={"code": "EUR"})
    to_usd = client.get("/currency/convert", params={"amount": 92, "direction": "to_usd"}).json()
    assert to_usd["converted"] == pytest.approx(100.0)
    from_usd = client.get("/currency/convert", params={"amount": 100}).json()
    assert from_usd["direction"] == "from_usd"
    assert from_usd["converted"] == pytest.approx(92.0)


def test_transaction_display(client):
    client.put("/currency", json={"code": "GBP"})
    body = client.post(
        "/currency/transactions/display",
        json={"amount": 100, "original_amount": 85, "original_currency": "eur"},
    ).json()
    assert body["display_amount"] == pytest.approx(79.0)
    assert body["formatted"] == "£79.00"
    assert body["caption"] == "€85.00"
    assert body["caption_currency"] == "EUR"


def test_unsupported_currency_is_400(client):
    r = client.put("/currency", json={"code": "XYZ"})
    assert r.status_code == 400
    assert r.json()["error"] == "unsupported_currency"
    assert client.get("/currency").json()["currency"]["code"] == "USD"


def test_validation_and_not_found(client):
    r = client.put("/currency", json={"code": "EU"})
    assert r.status_code == 422
    assert r.json()["error"] == "validation_error"
    r = client.get("/currency/convert", params={"amount": 1, "direction": "sideways"})
    assert r.status_code == 422
    r = client.get("/nope")
    assert r.status_code == 404
    assert r.json()["error"] == "not_found"


def test_request_id_is_echoed(client):
    r = client.get("/currency", headers={"x-request-id": "abc-123"})
    assert r.headers["x-request-id"] == "abc-123"
    assert client.get("/currency").headers["x-request-id"]


def test_last_currency_reported_and_listed_first(client):
    assert client.get("/currency").json()["last_currency"] is None
    state = client.put("/currency", json={"code": "GBP"}).json()
    assert state["last_currency"] == "GBP"
    codes = [c["code"] for c in client.get("/currency/list", params={"recent_first": True}).json()]
    assert codes[:2] == ["GBP", "USD"]
    assert client.get("/currency/list").json()[0]["code"] == "USD"
