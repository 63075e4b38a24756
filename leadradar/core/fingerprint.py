from __future__ import annotations

import hashlib
from typing import Any

from .normalize import Posting

FINGERPRINT_LENGTH = 16


def posting_fingerprint(posting: Any) -> str:
    # Deterministic key based on source+url+title (text when the title is empty)
    p = Posting.coerce(posting)
    content = f"{p.source}:{p.url}:{p.title or p.text}"
    return hashlib.sha256(content.encode("utf-8")).hexdigest()[:FINGERPRINT_LENGTH]


def ensure_id(posting: Posting) -> Posting:
    """Return ``posting`` unchanged if it has an id, else a copy carrying its fingerprint."""
    if posting.id:
        return posting
    return posting.model_copy(update={"id": posting_fingerprint(posting)})
