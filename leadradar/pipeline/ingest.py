from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Any, Iterable, Optional, Protocol

from leadradar.core.dedupe import Deduplicator
from leadradar.core.fingerprint import ensure_id
from leadradar.core.normalize import Posting

LOGGER = logging.getLogger(__name__)

PENDING_SCORE = "PENDING"


class PostingStore(Protocol):
    def get_by_id(self, lead_id: str) -> Optional[Any]: ...

    def get_all(self) -> Iterable[Any]: ...

    def add(self, posting: Posting, *, score: str = PENDING_SCORE, processed: bool = False) -> bool: ...


@dataclass
class IngestSummary:
    received: int = 0
    unique: int = 0
    batch_duplicates: int = 0
    existing: int = 0
    added: int = 0
    merged: int = 0

    def to_dict(self) -> dict:
        return asdict(self)


def ingest_postings(
    postings: Iterable[Any],
    store: PostingStore,
    deduplicator: Deduplicator,
    *,
    dedupe_enabled: bool = True,
) -> IngestSummary:
    """Dedupe a collected batch and persist what the store does not already hold.

    New leads are stored unscored (``PENDING``) and unprocessed. With dedupe
    disabled every posting goes to the store, which merges id collisions.
    """
    batch = list(postings)
    summary = IngestSummary(received=len(batch))

    if dedupe_enabled:
        result = deduplicator.dedupe(batch)
        candidates = result.unique
        summary.batch_duplicates = len(result.duplicates)
    else:
        candidates = [ensure_id(Posting.coerce(p)) for p in batch]
    summary.unique = len(candidates)

    for posting in candidates:
        if dedupe_enabled:
            check = deduplicator.check_existing(posting, store.get_by_id, store.get_all)
            if check.exists:
                summary.existing += 1
                continue
        if store.add(posting, score=PENDING_SCORE, processed=False):
            summary.added += 1
        else:
            summary.merged += 1

    LOGGER.info(
        "ingest received=%s unique=%s batch_duplicates=%s existing=%s added=%s merged=%s dedupe=%s",
        summary.received,
        summary.unique,
        summary.batch_duplicates,
        summary.existing,
        summary.added,
        summary.merged,
        dedupe_enabled,
    )
    return summary
