"""Engine and session factory for Lead Radar.

The database URL comes from `LEADRADAR_DATABASE_URL`, then `DATABASE_URL`,
then a local SQLite file. A `.env` file (path in `LEADRADAR_DOTENV`, default
".env") is loaded on import so the CLI and the API share one database.
"""
from __future__ import annotations

import os
from contextlib import contextmanager
from typing import Iterator

from dotenv import load_dotenv
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session

DEFAULT_DATABASE_URL = "sqlite:///./leads.db"

_ = load_dotenv(dotenv_path=os.getenv("LEADRADAR_DOTENV", ".env"))


def _coalesce_url() -> str:
    url = os.getenv("LEADRADAR_DATABASE_URL") or os.getenv("DATABASE_URL") or DEFAULT_DATABASE_URL
    # Hosted Postgres still hands out postgres:// URLs
    if url.startswith("postgres://"):
        url = url.replace("postgres://", "postgresql+psycopg://", 1)
    if url.startswith("postgresql://"):
        url = url.replace("postgresql://", "postgresql+psycopg://", 1)
    return url


def make_engine(url: str | None = None) -> Engine:
    return create_engine(url or _coalesce_url(), pool_pre_ping=True)


ENGINE: Engine = make_engine()
SessionLocal = sessionmaker(bind=ENGINE, autoflush=False, autocommit=False, expire_on_commit=False)


@contextmanager
def get_session() -> Iterator[Session]:
    """Yield a session and close it afterwards; the CRUD helpers commit."""
    session: Session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


def current_engine_url() -> str:
    """Effective database URL with the password masked, for log lines."""
    return ENGINE.url.render_as_string(hide_password=True)
