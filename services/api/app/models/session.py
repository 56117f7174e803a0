from __future__ import annotations

from packages.shared.schemas.basket_v1 import BasketDetailsV1, CamelModelV1


class SessionOut(CamelModelV1):
    session_id: str
    allow_cookies: bool
    basket_details: BasketDetailsV1 | None = None
    created_at: str
    updated_at: str


class SessionResponse(CamelModelV1):
    session: SessionOut
    newly_created: bool


class SuccessResponse(CamelModelV1):
    success: bool = True
    message: str | None = None


class SessionCleanupResponse(CamelModelV1):
    message: str
    deleted: int
