from .normalize import Posting, DuplicatePosting
from .similarity import tokenize, jaccard_similarity, title_similarity
from .fingerprint import posting_fingerprint, ensure_id
from .dedupe import Deduplicator, DedupeResult, ExistingCheck

__all__ = [
    "Posting",
    "DuplicatePosting",
    "tokenize",
    "jaccard_similarity",
    "title_similarity",
    "posting_fingerprint",
    "ensure_id",
    "Deduplicator",
    "DedupeResult",
    "ExistingCheck",
]
