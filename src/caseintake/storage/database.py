from __future__ import annotations

import logging
from pathlib import Path

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, sessionmaker

from caseintake.config import Settings
from caseintake.storage.models import Base

logger = logging.getLogger(__name__)


def create_session_factory(database_url: str | None = None) -> tuple[sessionmaker[Session], Engine]:
    """
    Build a session factory for the case store.

    ``database_url`` defaults to ``Settings().database_url``. File-backed SQLite
    databases get their parent directory created so a fresh checkout can save
    generated documents without any setup.
    """

    url = make_url(database_url or Settings().database_url)
    if url.get_backend_name() == "sqlite" and url.database not in (None, "", ":memory:"):
        Path(url.database).parent.mkdir(parents=True, exist_ok=True)
    engine = create_engine(url, future=True)
    logger.debug("Opened case store", extra={"database_url": url.render_as_string(hide_password=True)})
    return sessionmaker(bind=engine, expire_on_commit=False), engine


def init_db(engine: Engine) -> None:
    Base.metadata.create_all(engine)
