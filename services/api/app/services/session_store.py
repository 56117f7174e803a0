"""Visitor sessions, their temporary selections and the session event log.

A session row holds the basket and the pending selections as JSON. Writes go through
`_commit`, which relies on the row's version column: a write based on a stale read fails
with ConcurrentModificationError instead of silently overwriting another request.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Any
from uuid import uuid4

from packages.shared.schemas.basket_v1 import BasketDetailsV1, TemporarySelectionV1
from packages.shared.schemas.events import EntityTypeV1, EventTypeV1
from services.api.app.db.models import EventLog, SessionRow, utcnow
from services.api.app.services.basket import BasketMutation
from services.api.app.services.errors import (
    ConcurrentModificationError,
    MissingSessionIdError,
    SessionNotFoundError,
)
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

logger = logging.getLogger(__name__)

SESSION_COOKIE_NAME = "session_id"
SESSION_ID_LENGTH = 20
_MAX_ID_ATTEMPTS = 10


def new_session_id() -> str:
    return uuid4().hex[:SESSION_ID_LENGTH]


def empty_basket() -> BasketDetailsV1:
    return BasketDetailsV1()


def get_or_create_session(db: Session, session_id: str | None) -> tuple[SessionRow, bool]:
    if session_id:
        row = db.get(SessionRow, session_id)
        if row is not None:
            return row, False

    for _ in range(_MAX_ID_ATTEMPTS):
        candidate = new_session_id()
        if db.get(SessionRow, candidate) is None:
            break
    else:
        raise RuntimeError("Could not allocate a unique session id")

    now = utcnow()
    row = SessionRow(
        id=candidate,
        allow_cookies=False,
        basket_details=empty_basket().to_json_dict(),
        temporary_selections={},
        created_at=now,
        updated_at=now,
    )
    db.add(row)
    log_event(
        db,
        session_id=candidate,
        entity_type=EntityTypeV1.SESSION,
        entity_id=candidate,
        event_type=EventTypeV1.SESSION_CREATED,
        event_payload={},
    )
    _commit(db, candidate)
    logger.info("Created session %s", candidate)
    return row, True


def require_session_id(session_id: str | None) -> str:
    if not session_id or not session_id.strip():
        raise MissingSessionIdError()
    return session_id.strip()


def get_session(db: Session, session_id: str | None) -> SessionRow:
    sid = require_session_id(session_id)
    row = db.get(SessionRow, sid)
    if row is None:
        raise SessionNotFoundError(sid)
    return row


def load_basket(row: SessionRow) -> BasketDetailsV1:
    return BasketDetailsV1.model_validate(row.basket_details or {})


def accept_cookies(db: Session, session_id: str | None) -> SessionRow:
    row = get_session(db, session_id)
    row.allow_cookies = True
    row.updated_at = utcnow()
    log_event(
        db,
        session_id=row.id,
        entity_type=EntityTypeV1.SESSION,
        entity_id=row.id,
        event_type=EventTypeV1.COOKIES_ACCEPTED,
        event_payload={},
    )
    _commit(db, row.id)
    return row


def delete_session(db: Session, session_id: str | None) -> None:
    row = get_session(db, session_id)
    db.query(EventLog).filter(EventLog.session_id == row.id).delete(synchronize_session=False)
    db.delete(row)
    _commit(db, row.id)
    logger.info("Deleted session %s", row.id)


def delete_expired_sessions(
    db: Session,
    *,
    retention: timedelta,
    now: datetime | None = None,
) -> int:
    cutoff = (now or utcnow()) - retention
    expired_ids = [
        sid for (sid,) in db.query(SessionRow.id).filter(SessionRow.created_at < cutoff).all()
    ]
    if not expired_ids:
        logger.info("Session sweep: nothing older than %s", cutoff.isoformat())
        return 0

    db.query(EventLog).filter(EventLog.session_id.in_(expired_ids)).delete(
        synchronize_session=False
    )
    db.query(SessionRow).filter(SessionRow.id.in_(expired_ids)).delete(synchronize_session=False)
    db.commit()
    logger.info(
        "Session sweep: deleted %s sessions older than %s", len(expired_ids), cutoff.isoformat()
    )
    return len(expired_ids)


def create_temporary_selection(
    db: Session,
    session_id: str | None,
    selection: TemporarySelectionV1,
) -> str:
    row = get_session(db, session_id)

    selection_id = uuid4().hex
    selections = dict(row.temporary_selections or {})
    selections[selection_id] = selection.to_json_dict()

    row.temporary_selections = selections
    row.updated_at = utcnow()
    log_event(
        db,
        session_id=row.id,
        entity_type=EntityTypeV1.TEMPORARY_SELECTION,
        entity_id=selection_id,
        event_type=EventTypeV1.SELECTION_CREATED,
        event_payload={
            "package_slug": selection.package_slug,
            "selected_size": selection.selected_size,
            "is_custom_selection": selection.is_custom_selection,
        },
    )
    _commit(db, row.id)
    logger.info("Stored selection %s for session %s", selection_id, row.id)
    return selection_id


def save_basket(db: Session, row: SessionRow, mutation: BasketMutation) -> None:
    row.basket_details = mutation.basket.to_json_dict()
    row.temporary_selections = dict(mutation.temporary_selections)
    row.updated_at = utcnow()
    log_event(
        db,
        session_id=row.id,
        entity_type=EntityTypeV1.BASKET,
        entity_id=row.id,
        event_type=mutation.event_type,
        event_payload=mutation.event_payload,
    )
    _commit(db, row.id)
    logger.info("Basket %s for session %s", mutation.event_type.value, row.id)


def log_event(
    db: Session,
    *,
    session_id: str,
    entity_type: EntityTypeV1,
    entity_id: str,
    event_type: EventTypeV1,
    event_payload: dict[str, Any],
) -> None:
    db.add(
        EventLog(
            id=uuid4().hex,
            session_id=session_id,
            entity_type=entity_type.value,
            entity_id=entity_id,
            event_type=event_type.value,
            event_payload_json=event_payload,
            created_at=utcnow(),
        )
    )


def _commit(db: Session, session_id: str) -> None:
    try:
        db.commit()
    except StaleDataError as e:
        db.rollback()
        logger.warning("Concurrent write rejected for session %s", session_id)
        raise ConcurrentModificationError(session_id) from e
