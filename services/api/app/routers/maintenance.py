from __future__ import annotations

import hmac
import logging

from fastapi import APIRouter, Depends, Header, HTTPException
from services.api.app.config import cron_auth_token, session_retention
from services.api.app.db.deps import get_db
from services.api.app.models.session import SessionCleanupResponse
from services.api.app.routers.errors import raise_http_error
from services.api.app.services.session_store import delete_expired_sessions
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)

router = APIRouter()


@router.api_route(
    "/v1/cron/delete-old-sessions",
    methods=["GET", "POST"],
    response_model=SessionCleanupResponse,
)
def delete_old_sessions(
    x_cron_auth: str | None = Header(default=None),
    db: Session = Depends(get_db),
) -> SessionCleanupResponse:
    expected = cron_auth_token()
    if expected is None:
        raise HTTPException(status_code=503, detail="Session cleanup is not configured")

    if not x_cron_auth or not hmac.compare_digest(x_cron_auth, expected):
        logger.warning("Rejected session cleanup call with missing or wrong X-Cron-Auth")
        raise HTTPException(status_code=401, detail="Unauthorized")

    try:
        retention = session_retention()
    except ValueError as e:
        raise HTTPException(status_code=500, detail=str(e)) from e

    try:
        deleted = delete_expired_sessions(db, retention=retention)
    except Exception as e:
        raise_http_error(e)

    return SessionCleanupResponse(
        message=f"Deleted sessions older than {retention.total_seconds() / 86400:g} days",
        deleted=deleted,
    )
