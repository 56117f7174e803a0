import pytest
from services.api.app.services.catalog_base import DrinkRecord, PackageDefinition, SizeOption
from services.api.app.services.catalog_mock import MockCatalog
from services.api.app.services.errors import (
    CatalogDataError,
    DrinkNotFoundError,
    InvalidQuantityError,
    InvalidSizeError,
    QuantityMismatchError,
)
from services.api.app.services.pricing import calculate_price, parse_size


def _price(package_slug: str, size: object, products: dict) -> object:
    catalog = MockCatalog()
    package = catalog.get_package(package_slug)
    return calculate_price(package, size, products, catalog.get_drinks(products))


def test_mix_of_eight_is_discounted_and_rounded_up() -> None:
    price = _price("mix-8", 8, {"red-bull": 4, "monster-ultra": 4})

    assert price.original_total_price == 18000
    assert price.price_per_package == 16500
    assert price.recycling_fee_per_package == 400


def test_size_may_arrive_as_numeric_string() -> None:
    price = _price("mix-8", " 12 ", {"booster-original": 12})

    # 14400 * 0.85 = 12240, rounded up to the next 5 kr.
    assert price.price_per_package == 12500
    assert price.recycling_fee_per_package == 1200


def test_coarser_granularity_rounds_to_ten_crowns() -> None:
    price = _price("mix-8", 18, {"booster-original": 18})

    # 21600 * 0.8 = 17280 -> 18000
    assert price.price_per_package == 18000


def test_price_on_a_rounding_step_is_not_bumped() -> None:
    package = PackageDefinition(slug="p", title="P", sizes=(SizeOption(2, 0.7, 5),))
    drinks = {"x": DrinkRecord("x", "X", 2500, 0, False, "0.5 l")}

    # 5000 * 0.7 is 3500.0000000000005 in binary floating point.
    price = calculate_price(package, 2, {"x": 2}, drinks)
    assert price.price_per_package == 3500


def test_unset_discount_and_granularity_use_defaults() -> None:
    package = PackageDefinition(slug="p", title="P", sizes=(SizeOption(3),))
    drinks = {"x": DrinkRecord("x", "X", 1234, 50, False, None)}

    price = calculate_price(package, 3, {"x": 3}, drinks)
    assert price.original_total_price == 3702
    assert price.price_per_package == 4000
    assert price.recycling_fee_per_package == 150


def test_recycling_fee_is_never_discounted() -> None:
    package = PackageDefinition(slug="p", title="P", sizes=(SizeOption(2, 0.5, 1),))
    drinks = {"x": DrinkRecord("x", "X", 1000, 100, True, None)}

    price = calculate_price(package, 2, {"x": 2}, drinks)
    assert price.price_per_package == 1000
    assert price.recycling_fee_per_package == 200


@pytest.mark.parametrize(
    "products",
    [{"red-bull": 3, "monster-ultra": 4}, {"red-bull": 5, "monster-ultra": 4}],
)
def test_quantity_mismatch_is_rejected(products: dict[str, int]) -> None:
    with pytest.raises(QuantityMismatchError):
        _price("mix-8", 8, products)


def test_unknown_size_is_rejected() -> None:
    with pytest.raises(InvalidSizeError, match="size=10"):
        _price("mix-8", 10, {"red-bull": 10})


def test_unknown_drink_is_rejected() -> None:
    with pytest.raises(DrinkNotFoundError):
        _price("mix-8", 8, {"red-bull": 4, "nope": 4})


def test_zero_quantities_are_ignored() -> None:
    price = _price("mix-8", 8, {"red-bull": 4, "monster-ultra": 4, "nope": 0})
    assert price.price_per_package == 16500


def test_negative_quantity_is_rejected() -> None:
    with pytest.raises(InvalidQuantityError):
        _price("mix-8", 8, {"red-bull": 10, "monster-ultra": -2})


def test_non_positive_granularity_is_catalog_error() -> None:
    package = PackageDefinition(slug="p", title="P", sizes=(SizeOption(1, 1.0, 0),))
    drinks = {"x": DrinkRecord("x", "X", 1000)}

    with pytest.raises(CatalogDataError):
        calculate_price(package, 1, {"x": 1}, drinks)


@pytest.mark.parametrize("value", ["eight", "8.5", 8.5, True, 0, -3, None])
def test_parse_size_rejects_non_sizes(value: object) -> None:
    with pytest.raises(InvalidSizeError):
        parse_size(value)
