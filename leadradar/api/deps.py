from __future__ import annotations

from typing import Generator

from fastapi import Depends
from sqlalchemy.orm import Session

from leadradar.config import DedupeSettings, settings_from_env
from leadradar.core.dedupe import Deduplicator
from leadradar.db.session import get_session


def db_session() -> Generator[Session, None, None]:
    """FastAPI dependency that yields a SQLAlchemy :class:`Session`.

    Usage in route handlers:
        def handler(session: Session = Depends(db_session)):
            ...
    """
    with get_session() as session:
        yield session


def dedupe_settings() -> DedupeSettings:
    return settings_from_env()


def deduplicator(settings: DedupeSettings = Depends(dedupe_settings)) -> Deduplicator:
    return Deduplicator.from_settings(settings)


__all__ = ["db_session", "dedupe_settings", "deduplicator"]
