from __future__ import annotations

from typing import Optional

from sqlalchemy.orm import Session

from leadradar.core.fingerprint import ensure_id
from leadradar.core.normalize import Posting
from leadradar.db.crud import add_lead, get_all_leads, get_lead_by_id
from leadradar.db.models import Lead


def lead_to_posting(lead: Lead) -> Posting:
    return Posting.model_validate(
        {
            "id": lead.id,
            "source": lead.source,
            "url": lead.url,
            "title": lead.title,
            "text": lead.text,
            "author": lead.author,
            "score": lead.score,
            "processed": lead.processed,
            "captured_at": lead.captured_at.isoformat() if lead.captured_at else None,
        }
    )


class LeadStore:
    """Posting store backed by the ``leads`` table.

    ``get_by_id`` / ``get_all`` are the lookups ``Deduplicator.check_existing``
    expects. Nothing is cached; every call hits the session.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def get_by_id(self, lead_id: str) -> Optional[Posting]:
        lead = get_lead_by_id(self.session, lead_id)
        return lead_to_posting(lead) if lead is not None else None

    def get_all(self) -> list[Posting]:
        return [lead_to_posting(lead) for lead in get_all_leads(self.session)]

    def add(self, posting: Posting, *, score: str = "PENDING", processed: bool = False) -> bool:
        """Persist a posting; returns False when an existing row was merged instead."""
        posting = ensure_id(posting)
        payload = posting.model_dump()
        payload["score"] = score
        payload["processed"] = processed
        _, added = add_lead(self.session, payload)
        return added
