"""Device-local storage for the anonymous cart.

One engine per ``DATABASE_URL``; tests point the variable at a temp file before the
first call and get a fresh engine.
"""

from __future__ import annotations

import logging
import os

from sqlalchemy import Engine, create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import Session, sessionmaker

logger = logging.getLogger(__name__)

DEFAULT_DATABASE_URL = "sqlite+pysqlite:///.local/storefront.db"

_ENGINE: Engine | None = None
_ENGINE_URL: str | None = None
_SESSIONMAKER: sessionmaker | None = None


def database_url() -> str:
    return os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL)


def _prepare_sqlite(url: str) -> dict:
    parsed = make_url(url)
    if parsed.get_backend_name() != "sqlite":
        return {}
    if parsed.database and parsed.database != ":memory:":
        os.makedirs(os.path.dirname(os.path.abspath(parsed.database)), exist_ok=True)
    # Router threads and the event loop share the one cart file.
    return {"check_same_thread": False}


def get_engine() -> Engine:
    global _ENGINE, _ENGINE_URL, _SESSIONMAKER

    url = database_url()
    if _ENGINE is not None and _ENGINE_URL == url:
        return _ENGINE

    if _ENGINE is not None:
        _ENGINE.dispose()
    logger.debug("Opening cart database %s", make_url(url).render_as_string(hide_password=True))
    _ENGINE = create_engine(url, connect_args=_prepare_sqlite(url))
    _ENGINE_URL = url
    _SESSIONMAKER = sessionmaker(bind=_ENGINE, class_=Session, expire_on_commit=False)
    return _ENGINE


def db_session() -> Session:
    get_engine()
    assert _SESSIONMAKER is not None
    return _SESSIONMAKER()
