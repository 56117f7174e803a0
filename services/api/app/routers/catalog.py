from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from services.api.app.db.deps import get_db
from services.api.app.models.catalog import DrinkOut, PackageOut, SizeOptionOut
from services.api.app.routers.errors import raise_http_error
from services.api.app.services.catalog_base import Catalog, DrinkRecord, PackageDefinition
from services.api.app.services.catalog_factory import get_catalog
from services.api.app.services.errors import DrinkNotFoundError
from services.api.app.services.selection import collection_candidates
from sqlalchemy.orm import Session

router = APIRouter()


def _catalog(db: Session) -> Catalog:
    try:
        return get_catalog(db)
    except ValueError as e:
        raise HTTPException(status_code=500, detail=str(e)) from e


def _package_out(p: PackageDefinition) -> PackageOut:
    return PackageOut(
        slug=p.slug,
        title=p.title,
        description=p.description,
        image=p.image,
        sizes=[
            SizeOptionOut(size=o.size, discount=o.discount, round_up_or_down=o.round_up_or_down)
            for o in p.sizes
        ],
        collection_drinks=list(p.collection_drinks),
    )


def _drink_out(d: DrinkRecord) -> DrinkOut:
    return DrinkOut(
        slug=d.slug,
        title=d.title,
        sale_price=d.sale_price,
        recycling_fee=d.recycling_fee,
        is_sugar_free=d.is_sugar_free,
        size=d.size,
    )


@router.get("/v1/packages", response_model=list[PackageOut])
def list_packages(db: Session = Depends(get_db)) -> list[PackageOut]:
    return [_package_out(p) for p in _catalog(db).list_packages()]


@router.get("/v1/packages/{slug}", response_model=PackageOut)
def get_package(slug: str, db: Session = Depends(get_db)) -> PackageOut:
    try:
        package = _catalog(db).get_package(slug)
    except Exception as e:
        raise_http_error(e)

    return _package_out(package)


@router.get("/v1/packages/{slug}/drinks", response_model=list[DrinkOut])
def list_package_drinks(slug: str, db: Session = Depends(get_db)) -> list[DrinkOut]:
    catalog = _catalog(db)
    try:
        package = catalog.get_package(slug)
    except Exception as e:
        raise_http_error(e)

    return [_drink_out(d) for d in collection_candidates(catalog, package)]


@router.get("/v1/drinks", response_model=list[DrinkOut])
def list_drinks(db: Session = Depends(get_db)) -> list[DrinkOut]:
    return [_drink_out(d) for d in _catalog(db).list_drinks()]


@router.get("/v1/drinks/{slug}", response_model=DrinkOut)
def get_drink(slug: str, db: Session = Depends(get_db)) -> DrinkOut:
    drink = _catalog(db).get_drinks([slug]).get(slug)
    if drink is None:
        raise_http_error(DrinkNotFoundError(slug))

    return _drink_out(drink)
