"""Delivery fee from approximate parcel weight.

Weights are kilograms as Decimal. Fees are øre. Each table is ordered by ascending max
weight; the first bracket that fits wins and anything heavier pays the last bracket.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Mapping
from decimal import Decimal, InvalidOperation

from packages.shared.schemas.basket_v1 import BasketDetailsV1, BasketItemV1, DeliveryTypeV1
from services.api.app.services.catalog_base import Catalog

logger = logging.getLogger(__name__)

FeeBracket = tuple[Decimal, int]

PICKUP_POINT_FEES: tuple[FeeBracket, ...] = (
    (Decimal(1), 3200),
    (Decimal(2), 3900),
    (Decimal(5), 5500),
    (Decimal(10), 7500),
    (Decimal(15), 8500),
    (Decimal(20), 8900),
    (Decimal(25), 11000),
    (Decimal(30), 12500),
    (Decimal(35), 13500),
)

HOME_DELIVERY_FEES: tuple[FeeBracket, ...] = (
    (Decimal(1), 4300),
    (Decimal(2), 5000),
    (Decimal(5), 6500),
    (Decimal(10), 8300),
    (Decimal(15), 10000),
    (Decimal(20), 11000),
    (Decimal(25), 12000),
    (Decimal(30), 12500),
    (Decimal(35), 13500),
)

_LITERS_RE = re.compile(r"(\d*[.,]?\d+)\s*l", re.IGNORECASE | re.ASCII)

# Packaging overhead per container, in kg.
_CAN_OVERHEAD = {Decimal("0.5"): Decimal("0.02"), Decimal("0.25"): Decimal("0.015")}
_DEFAULT_OVERHEAD_RATIO = Decimal("0.04")


def parse_liters(size_descriptor: str | None) -> Decimal | None:
    if not size_descriptor:
        return None
    match = _LITERS_RE.search(size_descriptor)
    if not match:
        return None
    try:
        return Decimal(match.group(1).replace(",", "."))
    except InvalidOperation:
        return None


def approximate_weight_kg(size_descriptor: str | None) -> Decimal:
    liters = parse_liters(size_descriptor)
    if liters is None:
        return Decimal(0)
    overhead = _CAN_OVERHEAD.get(liters, liters * _DEFAULT_OVERHEAD_RATIO)
    return liters + overhead


def basket_weight_kg(
    items: Iterable[BasketItemV1],
    drink_sizes: Mapping[str, str | None],
) -> Decimal:
    total = Decimal(0)
    for item in items:
        for slug, count in item.selected_drinks.items():
            if slug not in drink_sizes:
                logger.warning("Drink %s missing from catalog; excluded from parcel weight", slug)
                continue
            total += approximate_weight_kg(drink_sizes[slug]) * count * item.quantity
    return total


def fee_table(delivery_type: DeliveryTypeV1) -> tuple[FeeBracket, ...]:
    if delivery_type == DeliveryTypeV1.PICKUP_POINT:
        return PICKUP_POINT_FEES
    return HOME_DELIVERY_FEES


def delivery_fee_cents(weight_kg: Decimal, delivery_type: DeliveryTypeV1) -> int:
    table = fee_table(delivery_type)
    for max_weight, fee in table:
        if weight_kg <= max_weight:
            return fee
    return table[-1][1]


def recalculate_delivery_fee(basket: BasketDetailsV1, catalog: Catalog) -> BasketDetailsV1:
    details = basket.delivery_details
    if details is None or details.delivery_type is None:
        return basket

    slugs = {slug for item in basket.items for slug in item.selected_drinks}
    drinks = catalog.get_drinks(slugs)
    weight = basket_weight_kg(basket.items, {slug: d.size for slug, d in drinks.items()})
    fee = delivery_fee_cents(weight, details.delivery_type)

    return basket.model_copy(
        update={"delivery_details": details.model_copy(update={"delivery_fee": fee})}
    )
