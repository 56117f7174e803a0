from __future__ import annotations

from collections.abc import Iterable

from services.api.app.services.catalog_base import DrinkRecord, PackageDefinition, SizeOption
from services.api.app.services.errors import PackageNotFoundError

MOCK_DRINKS: tuple[DrinkRecord, ...] = (
    DrinkRecord("red-bull", "Red Bull", 2000, 0, False, "0.25 l"),
    DrinkRecord("monster-ultra", "Monster Ultra White", 2500, 100, True, "0.5 l"),
    DrinkRecord("celsius-tropical", "Celsius Tropical Vibe", 2200, 100, True, "0.355 l"),
    DrinkRecord("booster-original", "Booster Original", 1200, 100, False, "0.5 l"),
)

MOCK_PACKAGES: tuple[PackageDefinition, ...] = (
    PackageDefinition(
        slug="mix-8",
        title="Mix selv 8",
        sizes=(
            SizeOption(8, 0.9, 5),
            SizeOption(12, 0.85, 5),
            SizeOption(18, 0.8, 10),
        ),
        collection_drinks=tuple(d.slug for d in MOCK_DRINKS),
        description="Pick any combination of our energy drinks.",
    ),
    PackageDefinition(
        slug="sukkerfri-mix",
        title="Sukkerfri mix",
        sizes=(SizeOption(8, 0.95), SizeOption(12, 0.9)),
        collection_drinks=("monster-ultra", "celsius-tropical"),
        description="Sugar-free cans only.",
    ),
)


class MockCatalog:
    source = "mock"

    def __init__(self) -> None:
        self._packages = {p.slug: p for p in MOCK_PACKAGES}
        self._drinks = {d.slug: d for d in MOCK_DRINKS}

    def get_package(self, slug: str) -> PackageDefinition:
        package = self._packages.get(slug)
        if package is None:
            raise PackageNotFoundError(slug)
        return package

    def list_packages(self) -> list[PackageDefinition]:
        return sorted(self._packages.values(), key=lambda p: p.slug)

    def get_drinks(self, slugs: Iterable[str]) -> dict[str, DrinkRecord]:
        return {s: self._drinks[s] for s in slugs if s in self._drinks}

    def list_drinks(self) -> list[DrinkRecord]:
        return sorted(self._drinks.values(), key=lambda d: d.slug)
