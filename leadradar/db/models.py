from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Boolean, DateTime, Enum, Index, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

# --- SQLAlchemy base ---------------------------------------------------------

class Base(DeclarativeBase):
    """Declarative base for all models."""
    pass


# --- Enums -------------------------------------------------------------------

SCORES = ("PENDING", "HOT", "WARM", "COLD")


def utcnow() -> datetime:
    # Stored as naive UTC
    return datetime.now(timezone.utc).replace(tzinfo=None)


# --- Models ------------------------------------------------------------------

class Lead(Base):
    __tablename__ = "leads"
    __table_args__ = (
        Index("ix_leads_source_captured_at", "source", "captured_at"),
    )

    # Caller-supplied id, or the posting fingerprint
    id: Mapped[str] = mapped_column(String(120), primary_key=True)

    source: Mapped[str] = mapped_column(String(80), default="", nullable=False, index=True)
    url: Mapped[Optional[str]] = mapped_column(Text)
    title: Mapped[Optional[str]] = mapped_column(Text)
    text: Mapped[Optional[str]] = mapped_column(Text)
    author: Mapped[Optional[str]] = mapped_column(String(200))

    # Filled in by the scorer after ingestion
    score: Mapped[str] = mapped_column(
        Enum(*SCORES, name="score_enum", native_enum=False), default="PENDING", nullable=False, index=True
    )
    processed: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    captured_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        return f"<Lead id={self.id} source={self.source} title={self.title!r}>"


__all__ = [
    "Base",
    "Lead",
    "SCORES",
    "utcnow",
]
