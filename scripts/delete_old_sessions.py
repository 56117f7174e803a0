from __future__ import annotations

import argparse
from datetime import timedelta

from services.api.app.config import configure_logging, session_retention
from services.api.app.db.database import db_session
from services.api.app.db.init_db import init_db
from services.api.app.services.session_store import delete_expired_sessions


def main() -> int:
    parser = argparse.ArgumentParser(description="Delete visitor sessions past retention")
    parser.add_argument(
        "--retention-days",
        type=float,
        default=None,
        help="Override MIXBOX_SESSION_RETENTION_DAYS",
    )
    args = parser.parse_args()

    configure_logging()
    init_db()

    if args.retention_days is not None:
        if args.retention_days <= 0:
            parser.error("--retention-days must be positive")
        retention = timedelta(days=args.retention_days)
    else:
        retention = session_retention()

    db = db_session()
    try:
        deleted = delete_expired_sessions(db, retention=retention)
        print(f"Deleted {deleted} sessions")
        return 0
    finally:
        db.close()


if __name__ == "__main__":
    raise SystemExit(main())
