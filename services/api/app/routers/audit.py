from __future__ import annotations

from fastapi import APIRouter, Cookie, Depends
from packages.shared.schemas.events import EntityTypeV1, EventTypeV1, EventV1
from services.api.app.db.deps import get_db
from services.api.app.db.models import EventLog
from services.api.app.routers.errors import raise_http_error
from services.api.app.services.session_store import get_session
from sqlalchemy.orm import Session

router = APIRouter()


@router.get("/v1/session/events", response_model=list[EventV1])
def list_session_events(
    limit: int = 200,
    session_id: str | None = Cookie(default=None),
    db: Session = Depends(get_db),
) -> list[EventV1]:
    try:
        row = get_session(db, session_id)
    except Exception as e:
        raise_http_error(e)

    events = (
        db.query(EventLog)
        .filter(EventLog.session_id == row.id)
        .order_by(EventLog.created_at.asc())
        .limit(max(1, min(limit, 200)))
        .all()
    )

    return [
        EventV1(
            id=ev.id,
            session_id=ev.session_id,
            entity_type=EntityTypeV1(ev.entity_type),
            entity_id=ev.entity_id,
            event_type=EventTypeV1(ev.event_type),
            payload=ev.event_payload_json or {},
            created_at=ev.created_at.isoformat(),
        )
        for ev in events
    ]
