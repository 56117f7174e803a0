from __future__ import annotations

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

SUGAR_FREE = {"monster-ultra", "celsius-tropical"}


@pytest.fixture()
def client(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> TestClient:
    db_path = tmp_path / "mixbox_selection.db"
    monkeypatch.setenv("DATABASE_URL", f"sqlite+pysqlite:///{db_path}")
    monkeypatch.setenv("MIXBOX_DB_AUTO_CREATE", "true")
    monkeypatch.setenv("MIXBOX_CATALOG", "mock")

    from services.api.app.main import app

    with TestClient(app) as c:
        c.get("/v1/session")
        yield c


def _event_types(client: TestClient) -> list[str]:
    return [e["event_type"] for e in client.get("/v1/session/events").json()]


def test_custom_selection_is_priced_and_stored(client: TestClient) -> None:
    resp = client.post(
        "/v1/selections",
        json={
            "selectedProducts": {"red-bull": 4, "monster-ultra": 4},
            "selectedSize": 8,
            "packageSlug": "mix-8",
        },
    )
    assert resp.status_code == 200

    data = resp.json()
    assert data["success"] is True
    assert data["selectionId"]
    assert data["price"] == 16500
    assert data["recyclingFeePerPackage"] == 400
    assert "SELECTION_CREATED" in _event_types(client)


def test_mismatched_custom_selection_is_rejected_and_not_stored(client: TestClient) -> None:
    resp = client.post(
        "/v1/selections",
        json={
            "selectedProducts": {"red-bull": 4, "monster-ultra": 3},
            "selectedSize": 8,
            "packageSlug": "mix-8",
        },
    )
    assert resp.status_code == 400
    assert "do not match package size" in resp.json()["detail"]
    assert "SELECTION_CREATED" not in _event_types(client)


def test_custom_selection_with_unknown_package_is_404(client: TestClient) -> None:
    resp = client.post(
        "/v1/selections",
        json={"selectedProducts": {"red-bull": 8}, "selectedSize": 8, "packageSlug": "nope"},
    )
    assert resp.status_code == 404


def test_custom_selection_requires_session_cookie(client: TestClient) -> None:
    client.cookies.clear()
    resp = client.post(
        "/v1/selections",
        json={"selectedProducts": {"red-bull": 8}, "selectedSize": 8, "packageSlug": "mix-8"},
    )
    assert resp.status_code == 400


def test_custom_selection_missing_fields_is_400(client: TestClient) -> None:
    resp = client.post("/v1/selections", json={"selectedProducts": {"red-bull": 8}})
    assert resp.status_code == 400
    assert "selectedSize" in resp.json()["detail"]["errors"]


def test_random_selection_respects_sugar_preference(client: TestClient) -> None:
    for _ in range(5):
        resp = client.post(
            "/v1/selections/random",
            json={"slug": "mix-8", "selectedSize": 12, "sugarPreference": "uden_sukker"},
        )
        assert resp.status_code == 200
        data = resp.json()
        assert sum(data["selectedProducts"].values()) == 12
        assert set(data["selectedProducts"]) <= SUGAR_FREE
        assert data["selectionId"]


def test_random_selection_accepts_session_id_in_body(client: TestClient) -> None:
    sid = client.get("/v1/session").json()["session"]["sessionId"]
    client.cookies.clear()

    resp = client.post(
        "/v1/selections/random",
        json={"sessionId": sid, "slug": "mix-8", "selectedSize": 8, "sugarPreference": "alle"},
    )
    assert resp.status_code == 200


def test_random_selection_requires_sugar_preference(client: TestClient) -> None:
    resp = client.post("/v1/selections/random", json={"slug": "mix-8", "selectedSize": 8})
    assert resp.status_code == 400


def test_random_selection_with_no_matching_drinks_is_404(client: TestClient) -> None:
    resp = client.post(
        "/v1/selections/random",
        json={"slug": "sukkerfri-mix", "selectedSize": 8, "sugarPreference": "med_sukker"},
    )
    assert resp.status_code == 404
    assert "sugar preference" in resp.json()["detail"]


@pytest.mark.parametrize("size", [10, 2_000_000])
def test_random_selection_rejects_unoffered_size(client: TestClient, size: int) -> None:
    resp = client.post(
        "/v1/selections/random",
        json={"slug": "mix-8", "selectedSize": size, "sugarPreference": "alle"},
    )
    assert resp.status_code == 400
    assert f"size={size}" in resp.json()["detail"]
    assert "SELECTION_CREATED" not in _event_types(client)


def test_mystery_box_price_rejects_unoffered_size(client: TestClient) -> None:
    resp = client.post(
        "/v1/packages/price",
        json={"slug": "mix-8", "selectedSize": 2_000_000, "isMysteryBox": True},
    )
    assert resp.status_code == 400


def test_custom_mode_passes_products_through(client: TestClient) -> None:
    resp = client.post(
        "/v1/selections/random",
        json={
            "slug": "mix-8",
            "selectedSize": 8,
            "isCustomSelection": True,
            "selectedProducts": {"red-bull": 3, "booster-original": 5},
        },
    )
    assert resp.status_code == 200
    assert resp.json()["selectedProducts"] == {"red-bull": 3, "booster-original": 5}


def test_package_price(client: TestClient) -> None:
    resp = client.post(
        "/v1/packages/price",
        json={
            "slug": "mix-8",
            "selectedSize": "8",
            "selectedProducts": {"red-bull": 4, "monster-ultra": 4},
        },
    )
    assert resp.status_code == 200
    assert resp.json() == {"price": 16500, "recyclingFeePerPackage": 400, "originalPrice": 18000}


def test_mystery_box_price_is_rounded(client: TestClient) -> None:
    resp = client.post(
        "/v1/packages/price",
        json={"slug": "mix-8", "selectedSize": 12, "isMysteryBox": True},
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["price"] % 500 == 0
    assert data["price"] >= data["originalPrice"] * 0.85


def test_package_price_errors(client: TestClient) -> None:
    unknown = client.post(
        "/v1/packages/price", json={"slug": "nope", "selectedSize": 8, "selectedProducts": {}}
    )
    assert unknown.status_code == 404

    bad_size = client.post(
        "/v1/packages/price",
        json={"slug": "mix-8", "selectedSize": 10, "selectedProducts": {"red-bull": 10}},
    )
    assert bad_size.status_code == 400
    assert "size=10" in bad_size.json()["detail"]
