"""
Declarative base shared by all Ticketing Service models.
"""

from datetime import datetime, timezone

from sqlalchemy.orm import declarative_base

Base = declarative_base()


def utcnow() -> datetime:
    """Current time as a naive UTC datetime, the storage format for all timestamps."""
    return datetime.now(timezone.utc).replace(tzinfo=None)
