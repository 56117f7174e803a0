from __future__ import annotations

import logging
import random
from collections import Counter
from collections.abc import Iterable, Mapping

from packages.shared.schemas.basket_v1 import SugarPreferenceV1
from services.api.app.services.catalog_base import Catalog, DrinkRecord, PackageDefinition
from services.api.app.services.errors import InvalidSizeError, NoMatchingDrinksError
from services.api.app.services.pricing import parse_quantity

logger = logging.getLogger(__name__)


def matches_preference(drink: DrinkRecord, preference: SugarPreferenceV1) -> bool:
    if preference == SugarPreferenceV1.UDEN_SUKKER:
        return drink.is_sugar_free
    if preference == SugarPreferenceV1.MED_SUKKER:
        return not drink.is_sugar_free
    return True


def generate_random_selection(
    candidates: Iterable[DrinkRecord],
    selected_size: int,
    sugar_preference: SugarPreferenceV1,
    rng: random.Random | None = None,
) -> dict[str, int]:
    """Fill a package of `selected_size` cans by drawing from the eligible pool.

    Each can is an independent uniform draw with replacement, so the same drink may appear
    any number of times. Candidate order is preserved, which makes a seeded `rng`
    reproducible.
    """

    if selected_size < 1:
        raise InvalidSizeError(f"Package size must be positive, got {selected_size}")

    pool = [d.slug for d in candidates if matches_preference(d, sugar_preference)]
    if not pool:
        raise NoMatchingDrinksError(sugar_preference.value)

    rng = rng or random.Random()
    counts = Counter(rng.choice(pool) for _ in range(selected_size))

    logger.debug(
        "Random selection size=%s preference=%s pool=%s",
        selected_size,
        sugar_preference.value,
        len(pool),
    )
    return {slug: counts[slug] for slug in pool if counts[slug]}


def custom_selection(selected_products: Mapping[str, object]) -> dict[str, int]:
    """Normalize a caller-supplied mapping; the size check happens at pricing time."""

    out: dict[str, int] = {}
    for slug, raw_quantity in selected_products.items():
        quantity = parse_quantity(slug, raw_quantity)
        if quantity:
            out[slug] = quantity
    return out


def collection_candidates(catalog: Catalog, package: PackageDefinition) -> list[DrinkRecord]:
    """Drinks in the package's random-draw pool, in collection order."""

    drinks = catalog.get_drinks(package.collection_drinks)
    missing = [s for s in package.collection_drinks if s not in drinks]
    if missing:
        logger.warning("Package %s lists unknown drinks: %s", package.slug, ", ".join(missing))
    return [drinks[s] for s in package.collection_drinks if s in drinks]
