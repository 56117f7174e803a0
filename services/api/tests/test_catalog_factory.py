import pytest
from services.api.app.services.catalog_factory import get_catalog


def test_get_catalog_defaults_to_db(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("MIXBOX_CATALOG", raising=False)
    catalog = get_catalog(db=None)  # type: ignore[arg-type]
    assert catalog.source == "db"


def test_get_catalog_mock(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MIXBOX_CATALOG", "Mock")
    catalog = get_catalog(db=None)  # type: ignore[arg-type]
    assert catalog.source == "mock"
    assert catalog.get_package("mix-8").size_option(8).discount == 0.9


def test_get_catalog_rejects_unknown(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MIXBOX_CATALOG", "nope")
    with pytest.raises(ValueError, match="Unknown MIXBOX_CATALOG"):
        get_catalog(db=None)  # type: ignore[arg-type]
