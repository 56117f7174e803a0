"""Shared basket schema (v1).

The storefront keeps a per-visitor basket inside the session row. These models define the
JSON stored there and returned to clients. Field names are camelCase on the wire and
snake_case in Python.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModelV1(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_json_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class SugarPreferenceV1(str, Enum):
    ALLE = "alle"
    MED_SUKKER = "med_sukker"
    UDEN_SUKKER = "uden_sukker"


class DeliveryTypeV1(str, Enum):
    PICKUP_POINT = "pickupPoint"
    HOME_DELIVERY = "homeDelivery"


class BasketItemV1(CamelModelV1):
    slug: str
    package_size: int = Field(..., ge=1)
    selected_drinks: dict[str, int] = Field(default_factory=dict)

    # Frozen at add time; later catalog price changes do not reprice the line.
    price_per_package: int
    recycling_fee_per_package: int

    quantity: int = Field(..., ge=1)
    total_price: int
    total_recycling_fee: int
    sugar_preference: SugarPreferenceV1 | None = None


class CustomerDetailsV1(CamelModelV1):
    full_name: str | None = None
    mobile_number: str | None = None
    email: str | None = None
    address: str | None = None
    postal_code: str | None = None
    city: str | None = None
    country: str | None = None


class DeliveryDetailsV1(CamelModelV1):
    provider: str
    tracking_number: str | None = None
    estimated_delivery_date: str | None = None
    delivery_type: DeliveryTypeV1 | None = None
    delivery_fee: int = 0
    currency: str
    delivery_address: dict[str, Any] = Field(default_factory=dict)
    provider_details: dict[str, Any] = Field(default_factory=dict)
    created_at: str


class BasketDetailsV1(CamelModelV1):
    items: list[BasketItemV1] = Field(default_factory=list)
    customer_details: CustomerDetailsV1 = Field(default_factory=CustomerDetailsV1)
    delivery_details: DeliveryDetailsV1 | None = None


class TemporarySelectionV1(CamelModelV1):
    package_slug: str
    selected_size: int = Field(..., ge=1)
    selected_products: dict[str, int] = Field(default_factory=dict)
    sugar_preference: SugarPreferenceV1 | None = None
    is_custom_selection: bool = False
    is_mystery_box: bool = False
    created_at: str
