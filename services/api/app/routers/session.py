from __future__ import annotations

from fastapi import APIRouter, Cookie, Depends, Query, Response
from services.api.app.config import session_cookie_max_age, session_cookie_secure
from services.api.app.db.deps import get_db
from services.api.app.db.models import SessionRow
from services.api.app.models.session import SessionOut, SessionResponse, SuccessResponse
from services.api.app.routers.errors import raise_http_error
from services.api.app.services.session_store import (
    SESSION_COOKIE_NAME,
    accept_cookies,
    delete_session,
    get_or_create_session,
    load_basket,
)
from sqlalchemy.orm import Session

router = APIRouter()


def set_session_cookie(response: Response, session_id: str) -> None:
    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value=session_id,
        max_age=session_cookie_max_age(),
        path="/",
        samesite="strict",
        secure=session_cookie_secure(),
        httponly=True,
    )


def session_out(row: SessionRow, include_basket: bool = True) -> SessionOut:
    return SessionOut(
        session_id=row.id,
        allow_cookies=row.allow_cookies,
        basket_details=load_basket(row) if include_basket else None,
        created_at=row.created_at.isoformat(),
        updated_at=row.updated_at.isoformat(),
    )


@router.get("/v1/session", response_model=SessionResponse)
def get_or_create(
    response: Response,
    no_basket: bool = Query(False, alias="noBasket"),
    session_id: str | None = Cookie(default=None),
    db: Session = Depends(get_db),
) -> SessionResponse:
    try:
        row, created = get_or_create_session(db, session_id)
    except Exception as e:
        raise_http_error(e)

    if created:
        set_session_cookie(response, row.id)

    return SessionResponse(session=session_out(row, not no_basket), newly_created=created)


@router.post("/v1/session/accept-cookies", response_model=SuccessResponse)
def accept_session_cookies(
    session_id: str | None = Cookie(default=None),
    db: Session = Depends(get_db),
) -> SuccessResponse:
    try:
        accept_cookies(db, session_id)
    except Exception as e:
        raise_http_error(e)

    return SuccessResponse(message="Cookies accepted")


@router.delete("/v1/session", response_model=SuccessResponse)
def delete_current_session(
    response: Response,
    session_id: str | None = Cookie(default=None),
    db: Session = Depends(get_db),
) -> SuccessResponse:
    try:
        delete_session(db, session_id)
    except Exception as e:
        raise_http_error(e)

    response.delete_cookie(key=SESSION_COOKIE_NAME, path="/", samesite="strict")
    return SuccessResponse(message="Session deleted")
