from __future__ import annotations

from collections.abc import Iterable

from services.api.app.db.models import Drink, Package
from services.api.app.services.catalog_base import (
    DrinkRecord,
    PackageDefinition,
    size_options_from_json,
)
from services.api.app.services.errors import PackageNotFoundError
from sqlalchemy.orm import Session


class SqlCatalog:
    source = "db"

    def __init__(self, db: Session) -> None:
        self._db = db

    def get_package(self, slug: str) -> PackageDefinition:
        row = self._db.get(Package, slug)
        if row is None:
            raise PackageNotFoundError(slug)
        return _package_from_row(row)

    def list_packages(self) -> list[PackageDefinition]:
        rows = self._db.query(Package).order_by(Package.slug.asc()).all()
        return [_package_from_row(r) for r in rows]

    def get_drinks(self, slugs: Iterable[str]) -> dict[str, DrinkRecord]:
        wanted = sorted(set(slugs))
        if not wanted:
            return {}
        rows = self._db.query(Drink).filter(Drink.slug.in_(wanted)).all()
        return {r.slug: _drink_from_row(r) for r in rows}

    def list_drinks(self) -> list[DrinkRecord]:
        rows = self._db.query(Drink).order_by(Drink.slug.asc()).all()
        return [_drink_from_row(r) for r in rows]


def _package_from_row(row: Package) -> PackageDefinition:
    return PackageDefinition(
        slug=row.slug,
        title=row.title,
        sizes=size_options_from_json(row.sizes),
        collection_drinks=tuple(row.collection_drinks or ()),
        description=row.description,
        image=row.image,
    )


def _drink_from_row(row: Drink) -> DrinkRecord:
    return DrinkRecord(
        slug=row.slug,
        title=row.title,
        sale_price=row.sale_price,
        recycling_fee=row.recycling_fee or 0,
        is_sugar_free=bool(row.is_sugar_free),
        size=row.size,
    )
