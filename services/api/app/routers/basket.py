from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Cookie, Depends, HTTPException
from services.api.app.db.deps import get_db
from services.api.app.models.basket import (
    BasketResponse,
    BasketUpdateResponse,
    UpdateCustomerDetailsAction,
    UpdateDeliveryDetailsAction,
    parse_basket_action,
)
from services.api.app.routers.errors import raise_http_error
from services.api.app.services.basket import apply_basket_action
from services.api.app.services.catalog_factory import get_catalog
from services.api.app.services.session_store import get_session, load_basket, save_basket
from sqlalchemy.orm import Session

router = APIRouter()


@router.post(
    "/v1/basket",
    response_model=BasketUpdateResponse,
    response_model_exclude_none=True,
)
def update_basket(
    payload: dict[str, Any] = Body(...),
    session_id: str | None = Cookie(default=None),
    db: Session = Depends(get_db),
) -> BasketUpdateResponse:
    try:
        catalog = get_catalog(db)
    except ValueError as e:
        raise HTTPException(status_code=500, detail=str(e)) from e

    try:
        row = get_session(db, session_id)
        action = parse_basket_action(payload)
        mutation = apply_basket_action(
            load_basket(row), row.temporary_selections or {}, action, catalog
        )
        save_basket(db, row, mutation)
    except Exception as e:
        raise_http_error(e)

    basket = mutation.basket
    if isinstance(action, UpdateDeliveryDetailsAction):
        return BasketUpdateResponse(delivery_details=basket.delivery_details)
    if isinstance(action, UpdateCustomerDetailsAction):
        return BasketUpdateResponse(errors={})
    return BasketUpdateResponse(items=basket.items, delivery_details=basket.delivery_details)


@router.get("/v1/basket", response_model=BasketResponse)
def get_basket(
    session_id: str | None = Cookie(default=None),
    db: Session = Depends(get_db),
) -> BasketResponse:
    try:
        row = get_session(db, session_id)
    except Exception as e:
        raise_http_error(e)

    return BasketResponse(basket_details=load_basket(row))
