from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Protocol

from services.api.app.services.errors import InvalidSizeError


@dataclass(frozen=True, slots=True)
class SizeOption:
    size: int
    discount: float | None = None
    round_up_or_down: float | None = None


@dataclass(frozen=True, slots=True)
class PackageDefinition:
    slug: str
    title: str
    sizes: tuple[SizeOption, ...] = ()
    collection_drinks: tuple[str, ...] = ()
    description: str | None = None
    image: str | None = None

    def size_option(self, size: int) -> SizeOption:
        for option in self.sizes:
            if option.size == size:
                return option
        raise InvalidSizeError(f"No package option found for size={size} in package {self.slug}")


@dataclass(frozen=True, slots=True)
class DrinkRecord:
    slug: str
    title: str
    sale_price: int
    recycling_fee: int = 0
    is_sugar_free: bool = False
    size: str | None = None


class Catalog(Protocol):
    """Read-only view of packages and drinks.

    Implementations raise PackageNotFoundError from get_package. get_drinks omits unknown
    slugs instead of raising; callers decide whether a missing drink is fatal.
    """

    source: str

    def get_package(self, slug: str) -> PackageDefinition: ...

    def list_packages(self) -> list[PackageDefinition]: ...

    def get_drinks(self, slugs: Iterable[str]) -> dict[str, DrinkRecord]: ...

    def list_drinks(self) -> list[DrinkRecord]: ...


def size_options_from_json(raw: list | None) -> tuple[SizeOption, ...]:
    options: list[SizeOption] = []
    for entry in raw or []:
        if not isinstance(entry, dict) or entry.get("size") is None:
            continue
        options.append(
            SizeOption(
                size=int(entry["size"]),
                discount=_optional_float(entry.get("discount")),
                round_up_or_down=_optional_float(entry.get("roundUpOrDown")),
            )
        )
    return tuple(options)


def size_options_to_json(options: Iterable[SizeOption]) -> list[dict]:
    return [
        {"size": o.size, "discount": o.discount, "roundUpOrDown": o.round_up_or_down}
        for o in options
    ]


def _optional_float(value: object) -> float | None:
    if value is None or value == "":
        return None
    return float(value)  # type: ignore[arg-type]
