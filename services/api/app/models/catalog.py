from __future__ import annotations

from packages.shared.schemas.basket_v1 import CamelModelV1
from pydantic import Field


class SizeOptionOut(CamelModelV1):
    size: int
    discount: float | None = None
    round_up_or_down: float | None = None


class PackageOut(CamelModelV1):
    slug: str
    title: str
    description: str | None = None
    image: str | None = None
    sizes: list[SizeOptionOut] = Field(default_factory=list)
    collection_drinks: list[str] = Field(default_factory=list)


class DrinkOut(CamelModelV1):
    slug: str
    title: str
    sale_price: int
    recycling_fee: int
    is_sugar_free: bool
    size: str | None = None
