from __future__ import annotations

import argparse

from services.api.app.db.database import db_session
from services.api.app.db.init_db import init_db
from services.api.app.db.models import Drink, Package
from services.api.app.services.catalog_base import size_options_to_json
from services.api.app.services.catalog_mock import MOCK_DRINKS, MOCK_PACKAGES


def main() -> int:
    parser = argparse.ArgumentParser(description="Seed the demo Mixbox catalog")
    parser.add_argument(
        "--update",
        action="store_true",
        help="Overwrite prices and sizes of rows that already exist",
    )
    args = parser.parse_args()

    init_db()

    db = db_session()
    try:
        added = 0
        for d in MOCK_DRINKS:
            row = db.get(Drink, d.slug)
            if row is None:
                db.add(
                    Drink(
                        slug=d.slug,
                        title=d.title,
                        sale_price=d.sale_price,
                        recycling_fee=d.recycling_fee,
                        is_sugar_free=d.is_sugar_free,
                        size=d.size,
                    )
                )
                added += 1
            elif args.update:
                row.title = d.title
                row.sale_price = d.sale_price
                row.recycling_fee = d.recycling_fee
                row.is_sugar_free = d.is_sugar_free
                row.size = d.size

        for p in MOCK_PACKAGES:
            row = db.get(Package, p.slug)
            if row is None:
                db.add(
                    Package(
                        slug=p.slug,
                        title=p.title,
                        description=p.description,
                        image=p.image,
                        sizes=size_options_to_json(p.sizes),
                        collection_drinks=list(p.collection_drinks),
                    )
                )
                added += 1
            elif args.update:
                row.title = p.title
                row.description = p.description
                row.sizes = size_options_to_json(p.sizes)
                row.collection_drinks = list(p.collection_drinks)

        db.commit()
        print(f"Seeded catalog: {added} new rows")
        return 0
    finally:
        db.close()


if __name__ == "__main__":
    raise SystemExit(main())
