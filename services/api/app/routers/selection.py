from __future__ import annotations

import logging

from fastapi import APIRouter, Cookie, Depends, HTTPException
from packages.shared.schemas.basket_v1 import TemporarySelectionV1
from services.api.app.db.deps import get_db
from services.api.app.db.models import utcnow
from services.api.app.models.selection import (
    CreateSelectionRequest,
    CreateSelectionResponse,
    GenerateSelectionRequest,
    GenerateSelectionResponse,
    PackagePriceRequest,
    PackagePriceResponse,
)
from services.api.app.routers.errors import raise_http_error
from services.api.app.services.catalog_base import Catalog
from services.api.app.services.catalog_factory import get_catalog
from services.api.app.services.errors import MissingSugarPreferenceError
from services.api.app.services.pricing import calculate_price
from services.api.app.services.selection import (
    collection_candidates,
    custom_selection,
    generate_random_selection,
)
from services.api.app.services.session_store import (
    create_temporary_selection,
    require_session_id,
)
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)

router = APIRouter()


def _catalog(db: Session) -> Catalog:
    try:
        return get_catalog(db)
    except ValueError as e:
        raise HTTPException(status_code=500, detail=str(e)) from e


@router.post("/v1/selections/random", response_model=GenerateSelectionResponse)
def generate_selection(
    payload: GenerateSelectionRequest,
    session_id: str | None = Cookie(default=None),
    db: Session = Depends(get_db),
) -> GenerateSelectionResponse:
    catalog = _catalog(db)

    try:
        sid = require_session_id(payload.session_id or session_id)
        package = catalog.get_package(payload.slug)

        if payload.is_custom_selection and payload.selected_products:
            products = custom_selection(payload.selected_products)
        else:
            if payload.sugar_preference is None:
                raise MissingSugarPreferenceError()
            package.size_option(payload.selected_size)
            products = generate_random_selection(
                collection_candidates(catalog, package),
                payload.selected_size,
                payload.sugar_preference,
            )

        selection_id = create_temporary_selection(
            db,
            sid,
            TemporarySelectionV1(
                package_slug=package.slug,
                selected_size=payload.selected_size,
                selected_products=products,
                sugar_preference=payload.sugar_preference,
                is_custom_selection=payload.is_custom_selection,
                is_mystery_box=False,
                created_at=utcnow().isoformat(),
            ),
        )
    except Exception as e:
        raise_http_error(e)

    return GenerateSelectionResponse(selected_products=products, selection_id=selection_id)


@router.post("/v1/selections", response_model=CreateSelectionResponse)
def create_selection(
    payload: CreateSelectionRequest,
    session_id: str | None = Cookie(default=None),
    db: Session = Depends(get_db),
) -> CreateSelectionResponse:
    catalog = _catalog(db)

    try:
        sid = require_session_id(session_id)
        package = catalog.get_package(payload.package_slug)
        products = custom_selection(payload.selected_products)
        price = calculate_price(
            package, payload.selected_size, products, catalog.get_drinks(products)
        )

        selection_id = create_temporary_selection(
            db,
            sid,
            TemporarySelectionV1(
                package_slug=package.slug,
                selected_size=payload.selected_size,
                selected_products=products,
                sugar_preference=payload.sugar_preference,
                is_custom_selection=not payload.is_mystery_box,
                is_mystery_box=payload.is_mystery_box,
                created_at=utcnow().isoformat(),
            ),
        )
    except Exception as e:
        raise_http_error(e)

    return CreateSelectionResponse(
        selection_id=selection_id,
        price=price.price_per_package,
        recycling_fee_per_package=price.recycling_fee_per_package,
    )


@router.post("/v1/packages/price", response_model=PackagePriceResponse)
def get_package_price(
    payload: PackagePriceRequest,
    db: Session = Depends(get_db),
) -> PackagePriceResponse:
    catalog = _catalog(db)

    try:
        package = catalog.get_package(payload.slug)
        if payload.is_mystery_box:
            package.size_option(payload.selected_size)
            products = generate_random_selection(
                collection_candidates(catalog, package),
                payload.selected_size,
                payload.sugar_preference,
            )
        else:
            products = custom_selection(payload.selected_products)

        price = calculate_price(
            package, payload.selected_size, products, catalog.get_drinks(products)
        )
    except Exception as e:
        raise_http_error(e)

    logger.debug(
        "Priced %s size=%s at %s", package.slug, payload.selected_size, price.price_per_package
    )
    return PackagePriceResponse(
        price=price.price_per_package,
        recycling_fee_per_package=price.recycling_fee_per_package,
        original_price=price.original_total_price,
    )
