import logging
from typing import Iterator, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session

from storefront.core.config import settings  # centralized settings

logger = logging.getLogger(__name__)

# --- Engine cache ---
_engine: Optional[Engine] = None
_session_factory: Optional[sessionmaker] = None


def get_engine() -> Engine:
    """
    Return the process-wide SQLAlchemy engine for settings.DATABASE_URL,
    creating it on first use.
    """
    global _engine

    url = settings.DATABASE_URL
    if not url:
        logger.critical("DATABASE_URL is not configured. Cannot create engine.")
        raise RuntimeError("Missing DATABASE_URL")
    if _engine is None:
        connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
        logger.info("Creating engine (ending): ...%s", url[-20:])
        _engine = create_engine(url, pool_pre_ping=True, connect_args=connect_args)
    return _engine


def get_session() -> Session:
    """Return a new SQLAlchemy Session bound to the shared engine."""
    global _session_factory

    if _session_factory is None:
        _session_factory = sessionmaker(bind=get_engine(), autoflush=False, autocommit=False)
    session = _session_factory()
    logger.debug("Session created.")
    return session


def get_db() -> Iterator[Session]:
    """FastAPI dependency yielding a request-scoped session."""
    db = get_session()
    try:
        yield db
    finally:
        db.close()
