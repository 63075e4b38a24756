from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime, timedelta
from typing import Any, Optional, Sequence, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session

from leadradar.db.models import Lead, utcnow

LEAD_COLUMNS = ("id", "source", "url", "title", "text", "author", "score", "processed", "captured_at")
DEFAULT_SAMPLE_SIZE = 10


def _clean_lead_data(lead_data: dict) -> dict:
    """Keep only the columns we store; text is kept as given except that "" becomes NULL."""
    data: dict[str, Any] = {}
    for key in LEAD_COLUMNS:
        if key not in lead_data:
            continue
        value = lead_data[key]
        if isinstance(value, str) and key not in ("id", "source"):
            value = value or None
        if key == "captured_at" and not isinstance(value, datetime):
            continue
        if key == "author" and value is not None and not isinstance(value, str):
            continue
        data[key] = value
    return data


def get_lead_by_id(session: Session, lead_id: str) -> Optional[Lead]:
    return session.query(Lead).filter(Lead.id == lead_id).first()


def get_all_leads(session: Session) -> Sequence[Lead]:
    return session.query(Lead).order_by(Lead.captured_at.asc(), Lead.id.asc()).all()


def get_leads_by_source(session: Session, source: str) -> Sequence[Lead]:
    return (
        session.query(Lead)
        .filter(Lead.source == source)
        .order_by(Lead.captured_at.asc(), Lead.id.asc())
        .all()
    )


def add_lead(session: Session, lead_data: dict) -> Tuple[Lead, bool]:
    """
    Insert a lead, or merge into the stored row when the id already exists.
    Returns (lead, added). On merge, None values never overwrite stored data
    and the original captured_at is kept.
    """
    data = _clean_lead_data(lead_data)
    lead_id = data.get("id")
    if not lead_id:
        raise ValueError("add_lead requires 'id' in lead_data")

    lead = get_lead_by_id(session, lead_id)
    if lead is not None:
        for key, value in data.items():
            if key in ("id", "captured_at"):
                continue
            if value is None:
                continue
            setattr(lead, key, value)
        lead.updated_at = utcnow()
        added = False
    else:
        lead = Lead(**data)
        session.add(lead)
        added = True

    session.commit()
    session.refresh(lead)
    return lead, added


def lead_stats(session: Session) -> dict:
    total = session.query(func.count(Lead.id)).scalar() or 0
    by_source = dict(session.query(Lead.source, func.count(Lead.id)).group_by(Lead.source).all())
    by_score = dict(session.query(Lead.score, func.count(Lead.id)).group_by(Lead.score).all())
    return {"total": int(total), "by_source": by_source, "by_score": by_score}


@dataclass
class PruneSummary:
    cutoff_utc: str
    matched: int
    deleted: int
    dry_run: bool
    sample: list[dict]

    def to_dict(self) -> dict:
        return asdict(self)


def prune_old_leads(
    session: Session,
    days: int,
    *,
    dry_run: bool = False,
    sample_size: int = DEFAULT_SAMPLE_SIZE,
) -> PruneSummary:
    if days <= 0:
        raise ValueError("Retention 'days' must be positive")

    cutoff = utcnow() - timedelta(days=days)
    query = session.query(Lead).filter(Lead.captured_at < cutoff)
    total = query.count()

    sample_rows = (
        query.order_by(Lead.captured_at.asc(), Lead.id.asc()).limit(sample_size).all()
    ) if total else []
    sample_payload: list[dict] = [
        {
            "id": row.id,
            "source": row.source,
            "title": row.title,
            "captured_at": row.captured_at.isoformat() if row.captured_at else None,
            "url": row.url,
        }
        for row in sample_rows
    ]

    deleted = 0
    if total and not dry_run:
        deleted = query.delete(synchronize_session=False)
        session.commit()

    return PruneSummary(
        cutoff_utc=cutoff.isoformat(),
        matched=total,
        deleted=deleted,
        dry_run=dry_run,
        sample=sample_payload,
    )
