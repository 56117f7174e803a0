from __future__ import annotations

import os
from pathlib import Path

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker

_ENGINE: Engine | None = None
_ENGINE_URL: str | None = None
_SESSIONMAKER: sessionmaker | None = None

_DEFAULT_DB_PATH = Path(".local/mixbox.db")


def _default_db_url() -> str:
    # Local-only default. Production must provide DATABASE_URL explicitly.
    return f"sqlite+pysqlite:///{_DEFAULT_DB_PATH}"


def _engine_kwargs(url: str) -> dict:
    echo = os.getenv("MIXBOX_DB_ECHO", "false").strip().lower() in {"1", "true", "yes", "y"}
    if url.startswith("sqlite"):
        return {"echo": echo, "connect_args": {"check_same_thread": False}}
    # Drop pooled connections the server has closed.
    return {"echo": echo, "pool_pre_ping": True}


def get_engine() -> Engine:
    """Return a cached SQLAlchemy engine.

    The cache is keyed on DATABASE_URL so tests can point each run at a fresh SQLite file.
    """

    global _ENGINE, _ENGINE_URL, _SESSIONMAKER

    url = os.getenv("DATABASE_URL", _default_db_url())

    if _ENGINE is not None and _ENGINE_URL == url:
        return _ENGINE

    if url == _default_db_url():
        _DEFAULT_DB_PATH.parent.mkdir(parents=True, exist_ok=True)

    _ENGINE = create_engine(url, **_engine_kwargs(url))
    _ENGINE_URL = url
    _SESSIONMAKER = sessionmaker(bind=_ENGINE, class_=Session, autoflush=False)
    return _ENGINE


def db_session() -> Session:
    get_engine()
    assert _SESSIONMAKER is not None
    return _SESSIONMAKER()
