from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Literal, Optional

from leadradar.config import (
    DEFAULT_SIMILARITY_THRESHOLD,
    DEFAULT_TITLE_THRESHOLD,
    DedupeSettings,
    validate_threshold,
)

from .fingerprint import ensure_id
from .normalize import DuplicatePosting, Posting
from .similarity import jaccard_similarity, title_similarity

LOGGER = logging.getLogger(__name__)

MatchReason = Literal["url", "title", "content"]


@dataclass
class DedupeResult:
    unique: list[Posting] = field(default_factory=list)
    duplicates: list[DuplicatePosting] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "unique": [p.model_dump(mode="json") for p in self.unique],
            "duplicates": [p.model_dump(mode="json") for p in self.duplicates],
        }


@dataclass
class ExistingCheck:
    exists: bool
    matched_posting: Any = None
    via_similarity: bool = False


class Deduplicator:
    """Similarity-based duplicate detector for collected postings.

    Two postings are duplicates when, checked in this order:
      - both carry the same non-empty url
      - they share a source and their titles overlap >= ``title_threshold``
      - their combined title+text overlaps >= ``similarity_threshold``

    Instances only hold their thresholds; every call is independent.
    """

    def __init__(
        self,
        title_threshold: float = DEFAULT_TITLE_THRESHOLD,
        similarity_threshold: float = DEFAULT_SIMILARITY_THRESHOLD,
    ) -> None:
        self.title_threshold = validate_threshold("title_threshold", title_threshold)
        self.similarity_threshold = validate_threshold("similarity_threshold", similarity_threshold)

    @classmethod
    def from_settings(cls, settings: DedupeSettings) -> "Deduplicator":
        return cls(
            title_threshold=settings.title_threshold,
            similarity_threshold=settings.similarity_threshold,
        )

    def __repr__(self) -> str:
        return f"<Deduplicator title={self.title_threshold} similarity={self.similarity_threshold}>"

    def match_reason(self, first: Any, second: Any) -> Optional[MatchReason]:
        """Return which rule makes the two postings duplicates, or None."""
        a = Posting.coerce(first)
        b = Posting.coerce(second)

        if a.url and b.url and a.url == b.url:
            return "url"

        if a.source == b.source and title_similarity(a.title, b.title) >= self.title_threshold:
            return "title"

        if jaccard_similarity(a.content, b.content) >= self.similarity_threshold:
            return "content"

        return None

    def is_duplicate(self, first: Any, second: Any) -> bool:
        return self.match_reason(first, second) is not None

    def dedupe(self, postings: Iterable[Any]) -> DedupeResult:
        """Split a batch into unique postings and duplicates, keeping input order.

        Each posting is compared with the unique postings accepted so far, in
        the order they were accepted. The first one that shares its id or
        matches it claims it as a duplicate. Id-less postings get their
        fingerprint as id before comparison.
        """
        result = DedupeResult()
        for raw in postings:
            posting = ensure_id(Posting.coerce(raw))

            match: Optional[Posting] = None
            reason: Optional[str] = None
            for existing in result.unique:
                reason = "id" if existing.id == posting.id else self.match_reason(posting, existing)
                if reason:
                    match = existing
                    break

            if match is None:
                result.unique.append(posting)
                continue

            LOGGER.debug(
                "duplicate id=%s duplicate_of=%s reason=%s source=%s",
                posting.id,
                match.id,
                reason,
                posting.source,
            )
            result.duplicates.append(posting.as_duplicate_of(match.id))

        LOGGER.info(
            "dedupe batch=%s unique=%s duplicates=%s",
            len(result.unique) + len(result.duplicates),
            len(result.unique),
            len(result.duplicates),
        )
        return result

    def check_existing(
        self,
        posting: Any,
        get_by_id: Callable[[str], Any],
        get_all: Callable[[], Iterable[Any]],
    ) -> ExistingCheck:
        """Decide whether ``posting`` is already stored.

        Exact id lookup first; otherwise the first stored record (in the order
        ``get_all`` yields them) that is a duplicate. Store errors propagate.
        """
        candidate = ensure_id(Posting.coerce(posting))

        stored = get_by_id(candidate.id)
        if stored is not None:
            return ExistingCheck(exists=True, matched_posting=stored)

        for stored in get_all():
            reason = self.match_reason(candidate, stored)
            if reason:
                LOGGER.debug("existing id=%s reason=%s", candidate.id, reason)
                return ExistingCheck(exists=True, matched_posting=stored, via_similarity=True)

        return ExistingCheck(exists=False)
