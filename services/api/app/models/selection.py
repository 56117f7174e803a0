from __future__ import annotations

from packages.shared.schemas.basket_v1 import CamelModelV1, SugarPreferenceV1
from pydantic import Field


class GenerateSelectionRequest(CamelModelV1):
    session_id: str | None = None
    slug: str
    selected_size: int = Field(..., ge=1)
    sugar_preference: SugarPreferenceV1 | None = None
    is_custom_selection: bool = False
    selected_products: dict[str, int] | None = None


class GenerateSelectionResponse(CamelModelV1):
    success: bool = True
    selected_products: dict[str, int]
    selection_id: str


class CreateSelectionRequest(CamelModelV1):
    selected_products: dict[str, int] = Field(..., min_length=1)
    selected_size: int = Field(..., ge=1)
    package_slug: str
    is_mystery_box: bool = False
    sugar_preference: SugarPreferenceV1 | None = None


class CreateSelectionResponse(CamelModelV1):
    success: bool = True
    selection_id: str
    price: int
    recycling_fee_per_package: int


class PackagePriceRequest(CamelModelV1):
    slug: str
    selected_size: int = Field(..., ge=1)
    selected_products: dict[str, int] = Field(default_factory=dict)
    is_mystery_box: bool = False
    sugar_preference: SugarPreferenceV1 = SugarPreferenceV1.ALLE


class PackagePriceResponse(CamelModelV1):
    price: int
    recycling_fee_per_package: int
    original_price: int
