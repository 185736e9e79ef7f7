"""
Network Design Planner - Database Base Configuration
Copyright (C) 2024
SPDX-License-Identifier: GPL-3.0-or-later

SQLAlchemy base and session management.
"""

from datetime import UTC, datetime
from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker, Session

from ..core.config import settings

DATABASE_URL = settings.database.URL

# For SQLite, use check_same_thread=False for async compatibility
connect_args = {}
if DATABASE_URL.startswith("sqlite"):
    connect_args["check_same_thread"] = False

engine = create_engine(
    DATABASE_URL,
    connect_args=connect_args,
    echo=settings.database.ECHO,
)

# Session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Declarative base
Base = declarative_base()


def get_db() -> Generator[Session, None, None]:
    """Dependency for database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def utcnow() -> datetime:
    """Get current UTC timestamp."""
    return datetime.now(UTC)


def isoformat(value: datetime | None) -> str | None:
    """Serialize a stored timestamp, treating naive values as UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.isoformat()
