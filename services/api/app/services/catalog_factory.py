from __future__ import annotations

import os

from services.api.app.services.catalog_base import Catalog
from services.api.app.services.catalog_mock import MockCatalog
from sqlalchemy.orm import Session


def get_catalog(db: Session) -> Catalog:
    """Select the catalog source based on env vars.

    Defaults to the database tables. The mock catalog serves a fixed set of packages and
    drinks so tests and local dev are deterministic without seeding.
    """

    mode = os.getenv("MIXBOX_CATALOG", "db").strip().lower()

    if mode == "db":
        from services.api.app.services.catalog_db import SqlCatalog

        return SqlCatalog(db)

    if mode == "mock":
        return MockCatalog()

    raise ValueError(f"Unknown MIXBOX_CATALOG={mode!r}. Expected db or mock.")
