"""SQLAlchemy ORM models for the RainAlert service."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Column, DateTime, Float, Integer, String, Text

from rainalert.db import Base


class AlertCheck(Base):
    """One recorded rain alert check."""

    __tablename__ = "alert_checks"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    location = Column(String, nullable=True, index=True)
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    status = Column(String, nullable=False)
    kind = Column(String, nullable=True)
    lead_minutes = Column(Float, nullable=True)
    message = Column(Text, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, index=True)
