from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from packages.shared.schemas.basket_v1 import (
    BasketDetailsV1,
    BasketItemV1,
    CamelModelV1,
    DeliveryDetailsV1,
    DeliveryTypeV1,
)
from pydantic import Field, TypeAdapter, ValidationError
from services.api.app.services.errors import InvalidActionError


class AddItemAction(CamelModelV1):
    action: Literal["addItem"]
    selection_id: str = Field(..., min_length=1)
    quantity: int = Field(..., gt=0)


class RemoveItemAction(CamelModelV1):
    action: Literal["removeItem"]
    item_index: int


class UpdateQuantityAction(CamelModelV1):
    action: Literal["updateQuantity"]
    item_index: int
    # Range is checked by the basket so the index error wins over a bad quantity.
    quantity: int


class UpdateDeliveryDetailsAction(CamelModelV1):
    action: Literal["updateDeliveryDetails"]
    delivery_option: DeliveryTypeV1
    delivery_address: dict[str, Any] = Field(..., min_length=1)
    provider_details: dict[str, Any] = Field(..., min_length=1)


class UpdateCustomerDetailsAction(CamelModelV1):
    action: Literal["updateCustomerDetails"]
    # Field-level rules are applied by the basket so every failing field is reported at once.
    customer_details: dict[str, Any]


BasketAction = Annotated[
    Union[
        AddItemAction,
        RemoveItemAction,
        UpdateQuantityAction,
        UpdateDeliveryDetailsAction,
        UpdateCustomerDetailsAction,
    ],
    Field(discriminator="action"),
]

_ACTION_ADAPTER: TypeAdapter[BasketAction] = TypeAdapter(BasketAction)

_TAG_ERRORS = {"union_tag_not_found", "union_tag_invalid", "model_attributes_type"}


def parse_basket_action(raw: object) -> BasketAction:
    try:
        return _ACTION_ADAPTER.validate_python(raw)
    except ValidationError as e:
        errors: dict[str, str] = {}
        for err in e.errors():
            if err["type"] in _TAG_ERRORS:
                raise InvalidActionError("Invalid action") from e
            # loc[0] is the action tag.
            field = ".".join(str(part) for part in err["loc"][1:]) or "body"
            errors.setdefault(field, err["msg"])
        raise InvalidActionError("Invalid basket update", errors) from e


class BasketUpdateResponse(CamelModelV1):
    success: bool = True
    items: list[BasketItemV1] | None = None
    delivery_details: DeliveryDetailsV1 | None = None
    errors: dict[str, str] | None = None


class BasketResponse(CamelModelV1):
    basket_details: BasketDetailsV1
