from datetime import datetime, timezone

from sqlalchemy.orm import declarative_base

Base = declarative_base()
"""Declarative base shared by every entity of the application."""


def utcnow() -> datetime:
    return datetime.now(timezone.utc)
