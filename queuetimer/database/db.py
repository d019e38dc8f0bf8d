"""SQLite storage for user preferences.

The engine is created on first use so importing the package never touches
the disk.  Tests call ``configure_engine("sqlite:///:memory:")`` first.
"""

import logging
from pathlib import Path
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session as OrmSession

from .models import Base

logger = logging.getLogger(__name__)

# ── paths ────────────────────────────────────────────────────────────────────

APP_SUPPORT_DIR = Path.home() / "Library" / "Application Support" / "QueueTimer"
DB_PATH = APP_SUPPORT_DIR / "queuetimer.db"

# ── engine & session factory (created lazily) ─────────────────────────────

_engine = None
_SessionFactory = None


def _create(url: str):
    logger.debug("Opening preference database %s", url)
    return create_engine(url, connect_args={"check_same_thread": False}, echo=False)


def _get_engine():
    global _engine
    if _engine is None:
        APP_SUPPORT_DIR.mkdir(parents=True, exist_ok=True)
        _engine = _create(f"sqlite:///{DB_PATH}")
    return _engine


def _get_session_factory():
    global _SessionFactory
    if _SessionFactory is None:
        _SessionFactory = sessionmaker(bind=_get_engine(), expire_on_commit=False)
    return _SessionFactory


# ── public API ────────────────────────────────────────────────────────────


def configure_engine(url: str) -> None:
    """Point storage at *url* instead of the file under APP_SUPPORT_DIR."""
    global _engine, _SessionFactory
    _SessionFactory = None
    _engine = _create(url)


def init_db() -> None:
    """Create the preferences table if it is missing."""
    Base.metadata.create_all(_get_engine())


@contextmanager
def get_session():
    """Yield a SQLAlchemy session; commit on success, rollback on error."""
    factory = _get_session_factory()
    session: OrmSession = factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
