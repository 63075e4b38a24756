from .ingest import (
    IngestSummary,
    PostingStore,
    ingest_postings,
)

__all__ = [
    "IngestSummary",
    "PostingStore",
    "ingest_postings",
]
