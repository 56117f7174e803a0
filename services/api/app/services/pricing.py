"""Package pricing.

Prices are integer minor units (øre). A package price is the sum of the chosen drinks'
sale prices, multiplied by the size option's discount and rounded up to the option's
granularity (in whole crowns). Recycling fees are summed separately and never discounted.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from decimal import ROUND_CEILING, Decimal

from services.api.app.services.catalog_base import DrinkRecord, PackageDefinition, SizeOption
from services.api.app.services.errors import (
    CatalogDataError,
    DrinkNotFoundError,
    InvalidQuantityError,
    InvalidSizeError,
    QuantityMismatchError,
)

DEFAULT_DISCOUNT = Decimal(1)
DEFAULT_ROUNDING_GRANULARITY = Decimal(5)
MINOR_UNITS_PER_MAJOR = 100


@dataclass(frozen=True, slots=True)
class PriceBreakdown:
    price_per_package: int
    recycling_fee_per_package: int
    original_total_price: int


def parse_size(value: object) -> int:
    if isinstance(value, bool):
        raise InvalidSizeError(f"Invalid package size: {value!r}")
    if isinstance(value, int):
        size = value
    elif isinstance(value, str) and value.strip().isdigit():
        size = int(value.strip())
    elif isinstance(value, float) and value.is_integer():
        size = int(value)
    else:
        raise InvalidSizeError(f"Invalid package size: {value!r}")

    if size < 1:
        raise InvalidSizeError(f"Package size must be positive, got {size}")
    return size


def parse_quantity(slug: str, value: object) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidQuantityError(f"Quantity for {slug} must be a whole number")
    if value < 0:
        raise InvalidQuantityError(f"Quantity for {slug} must not be negative")
    return value


def round_up_to_granularity(amount: Decimal, granularity: Decimal) -> int:
    step = granularity * MINOR_UNITS_PER_MAJOR
    return int((amount / step).to_integral_value(rounding=ROUND_CEILING) * step)


def calculate_price(
    package: PackageDefinition,
    selected_size: object,
    selected_products: Mapping[str, object],
    drinks: Mapping[str, DrinkRecord],
) -> PriceBreakdown:
    size = parse_size(selected_size)

    original_total = 0
    recycling_total = 0
    total_quantity = 0
    for slug, raw_quantity in selected_products.items():
        quantity = parse_quantity(slug, raw_quantity)
        if quantity == 0:
            continue
        drink = drinks.get(slug)
        if drink is None:
            raise DrinkNotFoundError(slug)
        original_total += drink.sale_price * quantity
        recycling_total += (drink.recycling_fee or 0) * quantity
        total_quantity += quantity

    if total_quantity != size:
        raise QuantityMismatchError(size, total_quantity)

    option = package.size_option(size)

    return PriceBreakdown(
        price_per_package=_discounted_price(original_total, option),
        recycling_fee_per_package=recycling_total,
        original_total_price=original_total,
    )


def _discounted_price(original_total: int, option: SizeOption) -> int:
    discount = DEFAULT_DISCOUNT if option.discount is None else Decimal(str(option.discount))
    granularity = (
        DEFAULT_ROUNDING_GRANULARITY
        if option.round_up_or_down is None
        else Decimal(str(option.round_up_or_down))
    )
    if granularity <= 0:
        raise CatalogDataError(
            f"Rounding granularity must be positive for size={option.size}, got {granularity}"
        )
    return round_up_to_granularity(Decimal(original_total) * discount, granularity)
