from __future__ import annotations

from pathlib import Path

import pytest
from fastapi.testclient import TestClient


@pytest.fixture()
def client(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> TestClient:
    db_path = tmp_path / "mixbox_audit.db"
    monkeypatch.setenv("DATABASE_URL", f"sqlite+pysqlite:///{db_path}")
    monkeypatch.setenv("MIXBOX_DB_AUTO_CREATE", "true")
    monkeypatch.setenv("MIXBOX_CATALOG", "mock")

    from services.api.app.main import app

    with TestClient(app) as c:
        yield c


def test_session_events_follow_basket_activity(client: TestClient) -> None:
    sid = client.get("/v1/session").json()["session"]["sessionId"]
    client.post("/v1/session/accept-cookies")
    selection_id = client.post(
        "/v1/selections",
        json={"selectedProducts": {"red-bull": 8}, "selectedSize": 8, "packageSlug": "mix-8"},
    ).json()["selectionId"]
    client.post(
        "/v1/basket", json={"action": "addItem", "selectionId": selection_id, "quantity": 1}
    )
    client.post(
        "/v1/basket",
        json={
            "action": "updateCustomerDetails",
            "customerDetails": {
                "fullName": "Ada Lovelace",
                "mobileNumber": "12345678",
                "email": "ada@example.dk",
                "address": "Vestergade 1",
                "postalCode": "8000",
                "city": "Aarhus",
            },
        },
    )

    resp = client.get("/v1/session/events")
    assert resp.status_code == 200
    events = resp.json()

    assert [e["event_type"] for e in events] == [
        "SESSION_CREATED",
        "COOKIES_ACCEPTED",
        "SELECTION_CREATED",
        "BASKET_ITEM_ADDED",
        "CUSTOMER_DETAILS_UPDATED",
    ]
    assert all(e["session_id"] == sid for e in events)
    assert events[2]["entity_id"] == selection_id
    assert "Ada" not in str(events[-1]["payload"])


def test_events_require_session(client: TestClient) -> None:
    assert client.get("/v1/session/events").status_code == 400
