"""Basket mutations.

Every action is validated in full before anything changes, and the input basket is never
modified: callers get a new basket plus the selections that remain, and persist both in one
write. A delivery fee already chosen is recomputed whenever the basket contents change.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from packages.shared.schemas.basket_v1 import (
    BasketDetailsV1,
    BasketItemV1,
    CustomerDetailsV1,
    DeliveryDetailsV1,
    TemporarySelectionV1,
)
from packages.shared.schemas.events import EventTypeV1
from services.api.app.config import delivery_provider, shop_currency
from services.api.app.models.basket import (
    AddItemAction,
    BasketAction,
    RemoveItemAction,
    UpdateCustomerDetailsAction,
    UpdateDeliveryDetailsAction,
    UpdateQuantityAction,
)
from services.api.app.services.catalog_base import Catalog
from services.api.app.services.delivery import recalculate_delivery_fee
from services.api.app.services.errors import (
    CustomerDetailsValidationError,
    InvalidActionError,
    InvalidItemIndexError,
    InvalidQuantityError,
    SelectionNotFoundError,
)
from services.api.app.services.pricing import calculate_price


REQUIRED_CUSTOMER_FIELDS = ("fullName", "mobileNumber", "email", "address", "postalCode", "city")

_CUSTOMER_FIELD_RULES: dict[str, tuple[re.Pattern[str], str]] = {
    "mobileNumber": (re.compile(r"[0-9]{8}"), "Mobile number must be 8 digits"),
    "email": (re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+"), "Email format is invalid"),
    "postalCode": (re.compile(r"[0-9]{4}"), "Postal code must be 4 digits"),
}


@dataclass(frozen=True, slots=True)
class BasketMutation:
    basket: BasketDetailsV1
    temporary_selections: dict[str, dict]
    event_type: EventTypeV1
    event_payload: dict[str, Any] = field(default_factory=dict)


def apply_basket_action(
    basket: BasketDetailsV1,
    temporary_selections: Mapping[str, dict],
    action: BasketAction,
    catalog: Catalog,
    *,
    now: datetime | None = None,
) -> BasketMutation:
    selections = dict(temporary_selections)

    if isinstance(action, AddItemAction):
        return _add_item(basket, selections, action, catalog)
    if isinstance(action, RemoveItemAction):
        return _remove_item(basket, selections, action, catalog)
    if isinstance(action, UpdateQuantityAction):
        return _update_quantity(basket, selections, action, catalog)
    if isinstance(action, UpdateDeliveryDetailsAction):
        return _update_delivery_details(basket, selections, action, catalog, now)
    if isinstance(action, UpdateCustomerDetailsAction):
        return _update_customer_details(basket, selections, action)

    raise InvalidActionError("Invalid action")


def find_matching_item(
    items: list[BasketItemV1],
    slug: str,
    package_size: int,
    selected_drinks: Mapping[str, int],
) -> int | None:
    wanted = _nonzero(selected_drinks)
    for index, item in enumerate(items):
        if (
            item.slug == slug
            and item.package_size == package_size
            and _nonzero(item.selected_drinks) == wanted
        ):
            return index
    return None


def validate_customer_details(raw: Mapping[str, Any]) -> dict[str, str]:
    """Return trimmed customer fields keyed by wire name, or raise with every failing field."""

    errors: dict[str, str] = {}
    cleaned: dict[str, str] = {}
    for name in REQUIRED_CUSTOMER_FIELDS:
        value = raw.get(name)
        if value is not None and not isinstance(value, str):
            errors[name] = f"{name} must be a string"
            continue
        text = (value or "").strip()
        if not text:
            errors[name] = f"{name} is required"
            continue
        rule = _CUSTOMER_FIELD_RULES.get(name)
        if rule is not None and rule[0].fullmatch(text) is None:
            errors[name] = rule[1]
            continue
        cleaned[name] = text

    if errors:
        raise CustomerDetailsValidationError(errors)

    country = raw.get("country")
    if isinstance(country, str) and country.strip():
        cleaned["country"] = country.strip()
    return cleaned


def _add_item(
    basket: BasketDetailsV1,
    selections: dict[str, dict],
    action: AddItemAction,
    catalog: Catalog,
) -> BasketMutation:
    raw_selection = selections.get(action.selection_id)
    if raw_selection is None:
        raise SelectionNotFoundError(action.selection_id)
    selection = TemporarySelectionV1.model_validate(raw_selection)

    package = catalog.get_package(selection.package_slug)
    drinks = catalog.get_drinks(selection.selected_products)
    price = calculate_price(package, selection.selected_size, selection.selected_products, drinks)

    added_price = price.price_per_package * action.quantity
    added_fee = price.recycling_fee_per_package * action.quantity

    items = list(basket.items)
    index = find_matching_item(
        items, package.slug, selection.selected_size, selection.selected_products
    )
    if index is None:
        items.append(
            BasketItemV1(
                slug=package.slug,
                package_size=selection.selected_size,
                selected_drinks=_nonzero(selection.selected_products),
                price_per_package=price.price_per_package,
                recycling_fee_per_package=price.recycling_fee_per_package,
                quantity=action.quantity,
                total_price=added_price,
                total_recycling_fee=added_fee,
                sugar_preference=selection.sugar_preference,
            )
        )
    else:
        existing = items[index]
        items[index] = existing.model_copy(
            update={
                "quantity": existing.quantity + action.quantity,
                "total_price": existing.total_price + added_price,
                "total_recycling_fee": existing.total_recycling_fee + added_fee,
            }
        )

    # Selection ids are single-use.
    del selections[action.selection_id]

    updated = recalculate_delivery_fee(basket.model_copy(update={"items": items}), catalog)
    return BasketMutation(
        basket=updated,
        temporary_selections=selections,
        event_type=EventTypeV1.BASKET_ITEM_ADDED,
        event_payload={
            "selection_id": action.selection_id,
            "slug": package.slug,
            "package_size": selection.selected_size,
            "quantity": action.quantity,
            "merged": index is not None,
        },
    )


def _remove_item(
    basket: BasketDetailsV1,
    selections: dict[str, dict],
    action: RemoveItemAction,
    catalog: Catalog,
) -> BasketMutation:
    _check_index(basket, action.item_index)

    removed = basket.items[action.item_index]
    items = [item for i, item in enumerate(basket.items) if i != action.item_index]
    updated = recalculate_delivery_fee(basket.model_copy(update={"items": items}), catalog)
    return BasketMutation(
        basket=updated,
        temporary_selections=selections,
        event_type=EventTypeV1.BASKET_ITEM_REMOVED,
        event_payload={"item_index": action.item_index, "slug": removed.slug},
    )


def _update_quantity(
    basket: BasketDetailsV1,
    selections: dict[str, dict],
    action: UpdateQuantityAction,
    catalog: Catalog,
) -> BasketMutation:
    _check_index(basket, action.item_index)
    if action.quantity <= 0:
        raise InvalidQuantityError()

    items = list(basket.items)
    item = items[action.item_index]
    items[action.item_index] = item.model_copy(
        update={
            "quantity": action.quantity,
            "total_price": item.price_per_package * action.quantity,
            "total_recycling_fee": item.recycling_fee_per_package * action.quantity,
        }
    )
    updated = recalculate_delivery_fee(basket.model_copy(update={"items": items}), catalog)
    return BasketMutation(
        basket=updated,
        temporary_selections=selections,
        event_type=EventTypeV1.BASKET_QUANTITY_UPDATED,
        event_payload={"item_index": action.item_index, "quantity": action.quantity},
    )


def _update_delivery_details(
    basket: BasketDetailsV1,
    selections: dict[str, dict],
    action: UpdateDeliveryDetailsAction,
    catalog: Catalog,
    now: datetime | None,
) -> BasketMutation:
    created_at = (now or datetime.now(timezone.utc)).isoformat()
    details = DeliveryDetailsV1(
        provider=delivery_provider(),
        tracking_number=None,
        estimated_delivery_date=None,
        delivery_type=action.delivery_option,
        delivery_fee=0,
        currency=shop_currency(),
        delivery_address=dict(action.delivery_address),
        provider_details=dict(action.provider_details),
        created_at=created_at,
    )
    updated = recalculate_delivery_fee(
        basket.model_copy(update={"delivery_details": details}), catalog
    )
    fee = updated.delivery_details.delivery_fee if updated.delivery_details else 0
    return BasketMutation(
        basket=updated,
        temporary_selections=selections,
        event_type=EventTypeV1.DELIVERY_DETAILS_UPDATED,
        event_payload={
            "delivery_type": action.delivery_option.value,
            "delivery_fee": fee,
        },
    )


def _update_customer_details(
    basket: BasketDetailsV1,
    selections: dict[str, dict],
    action: UpdateCustomerDetailsAction,
) -> BasketMutation:
    cleaned = validate_customer_details(action.customer_details)

    merged = CustomerDetailsV1.model_validate({**basket.customer_details.to_json_dict(), **cleaned})
    return BasketMutation(
        basket=basket.model_copy(update={"customer_details": merged}),
        temporary_selections=selections,
        event_type=EventTypeV1.CUSTOMER_DETAILS_UPDATED,
        # Field names only; values are personal data.
        event_payload={"fields": sorted(cleaned)},
    )


def _check_index(basket: BasketDetailsV1, item_index: int) -> None:
    if not 0 <= item_index < len(basket.items):
        raise InvalidItemIndexError(item_index)


def _nonzero(selected_drinks: Mapping[str, int]) -> dict[str, int]:
    return {slug: qty for slug, qty in selected_drinks.items() if qty}
