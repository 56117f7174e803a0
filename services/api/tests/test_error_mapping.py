from __future__ import annotations

from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from services.api.app.services.errors import (
    CatalogDataError,
    ConcurrentModificationError,
    InvalidSizeError,
    PackageNotFoundError,
    SessionNotFoundError,
)


class _RaisingCatalog:
    source = "raising"

    def __init__(self, exc: Exception) -> None:
        self._exc = exc

    def get_package(self, slug: str) -> object:
        del slug
        raise self._exc

    def list_packages(self) -> list:
        raise self._exc

    def get_drinks(self, slugs: object) -> dict:
        del slugs
        raise self._exc

    def list_drinks(self) -> list:
        raise self._exc


@pytest.fixture()
def client(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> TestClient:
    db_path = tmp_path / "mixbox_errors.db"
    monkeypatch.setenv("DATABASE_URL", f"sqlite+pysqlite:///{db_path}")
    monkeypatch.setenv("MIXBOX_DB_AUTO_CREATE", "true")

    from services.api.app.main import app

    with TestClient(app, raise_server_exceptions=False) as c:
        yield c


PRICE_PAYLOAD = {"slug": "mix-8", "selectedSize": 8, "selectedProducts": {"red-bull": 8}}


@pytest.mark.parametrize(
    ("exc", "status"),
    [
        (PackageNotFoundError("mix-8"), 404),
        (SessionNotFoundError("abc"), 404),
        (InvalidSizeError("bad size"), 400),
        (ConcurrentModificationError("abc"), 409),
        (CatalogDataError("broken row"), 502),
    ],
)
def test_price_maps_domain_errors(
    client: TestClient,
    monkeypatch: pytest.MonkeyPatch,
    exc: Exception,
    status: int,
) -> None:
    import services.api.app.routers.selection as selection_router

    monkeypatch.setattr(selection_router, "get_catalog", lambda db: _RaisingCatalog(exc))

    response = client.post("/v1/packages/price", json=PRICE_PAYLOAD)
    assert response.status_code == status
    assert "detail" in response.json()


def test_price_unknown_error_is_500(client: TestClient, monkeypatch: pytest.MonkeyPatch) -> None:
    import services.api.app.routers.selection as selection_router

    monkeypatch.setattr(
        selection_router, "get_catalog", lambda db: _RaisingCatalog(RuntimeError("x"))
    )

    response = client.post("/v1/packages/price", json=PRICE_PAYLOAD)
    assert response.status_code == 500
    assert response.json()["detail"] == "Internal Server Error"


def test_unknown_catalog_setting_is_500(
    client: TestClient,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setenv("MIXBOX_CATALOG", "nope")

    response = client.post("/v1/packages/price", json=PRICE_PAYLOAD)
    assert response.status_code == 500
    assert "Unknown MIXBOX_CATALOG" in response.json()["detail"]


def test_malformed_body_is_400(client: TestClient) -> None:
    response = client.post("/v1/packages/price", json={"selectedSize": "many"})
    assert response.status_code == 400
    errors = response.json()["detail"]["errors"]
    assert {"slug", "selectedSize"} <= set(errors)
