"""Alert check storage for the RainAlert service."""

from __future__ import annotations

import logging
import os
from datetime import date, datetime, time, timedelta
from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from rainalert.config import settings

DATABASE_URL = os.getenv("RAINALERT_DB_URL", "sqlite:///./rainalert.db")

engine = create_engine(
    DATABASE_URL,
    connect_args={"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {},
)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()

logger = logging.getLogger("rainalert.db")

# Day of the last retention pass in this process.
_last_cleanup_date: date | None = None


def get_db() -> Generator:
    """Yield a SQLAlchemy session and ensure it is closed."""

    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db() -> None:
    import rainalert.db_models  # noqa: F401 - registers the alert_checks table

    Base.metadata.create_all(bind=engine)


def retention_cutoff(today: date | None = None) -> datetime:
    """Start of the oldest day still kept by the retention window."""

    today = today or datetime.utcnow().date()
    return datetime.combine(today - timedelta(days=max(settings.retention_days, 1)), time.min)


def maybe_cleanup_old_records(db: Session) -> int:
    """Delete alert checks recorded before the retention cutoff.

    Runs at most once per UTC day per process and never raises; returns the
    number of rows removed.
    """

    global _last_cleanup_date

    today = datetime.utcnow().date()
    if _last_cleanup_date == today:
        return 0

    import rainalert.db_models as models

    try:
        deleted = (
            db.query(models.AlertCheck)
            .filter(models.AlertCheck.created_at < retention_cutoff(today))
            .delete(synchronize_session=False)
        )
        db.commit()
    except Exception as exc:  # pragma: no cover - defensive logging
        db.rollback()
        logger.warning("Retention cleanup failed: %s", exc)
        return 0

    _last_cleanup_date = today
    if deleted:
        logger.info("Retention cleanup removed %s alert checks", deleted)
    return deleted
