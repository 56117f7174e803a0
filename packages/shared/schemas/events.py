"""Shared event schema (v1).

The backend stores an append-only event log per visitor session. Clients can consume these
events to render a basket history.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class EntityTypeV1(str, Enum):
    SESSION = "Session"
    TEMPORARY_SELECTION = "TemporarySelection"
    BASKET = "Basket"


class EventTypeV1(str, Enum):
    SESSION_CREATED = "SESSION_CREATED"
    COOKIES_ACCEPTED = "COOKIES_ACCEPTED"
    SELECTION_CREATED = "SELECTION_CREATED"
    BASKET_ITEM_ADDED = "BASKET_ITEM_ADDED"
    BASKET_ITEM_REMOVED = "BASKET_ITEM_REMOVED"
    BASKET_QUANTITY_UPDATED = "BASKET_QUANTITY_UPDATED"
    DELIVERY_DETAILS_UPDATED = "DELIVERY_DETAILS_UPDATED"
    CUSTOMER_DETAILS_UPDATED = "CUSTOMER_DETAILS_UPDATED"


class EventV1(BaseModel):
    id: str
    session_id: str

    entity_type: EntityTypeV1
    entity_id: str

    event_type: EventTypeV1
    payload: dict[str, Any] = Field(default_factory=dict)
    created_at: str
