from __future__ import annotations

import logging
import os
from typing import List, Optional

from fastapi import Depends, FastAPI, Header, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel
from sqlalchemy.orm import Session

from leadradar.api.deps import db_session, dedupe_settings, deduplicator
from leadradar.config import DedupeSettings
from leadradar.core.dedupe import Deduplicator
from leadradar.core.normalize import DuplicatePosting, Posting
from leadradar.db.crud import lead_stats
from leadradar.db.store import LeadStore
from leadradar.pipeline.ingest import ingest_postings

ADMIN_TOKEN = os.getenv("LEADRADAR_ADMIN_TOKEN", "")


def require_admin(x_token: str | None) -> None:
    if not ADMIN_TOKEN or x_token != ADMIN_TOKEN:
        raise HTTPException(status_code=401, detail="Unauthorized")


# -------------------------
# FastAPI setup
# -------------------------
app = FastAPI(title="Lead Radar API", version="0.1.0")
LOGGER = logging.getLogger(__name__)

# CORS (open for now; tighten before public deploy)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# -------------------------
# Pydantic response models
# -------------------------
class DedupeResponse(BaseModel):
    unique: List[Posting]
    duplicates: List[DuplicatePosting]


class CheckResponse(BaseModel):
    exists: bool
    via_similarity: bool
    matched: Optional[Posting] = None


class IngestResponse(BaseModel):
    received: int
    unique: int
    batch_duplicates: int
    existing: int
    added: int
    merged: int


class StatsResponse(BaseModel):
    total: int
    by_source: dict[str, int]
    by_score: dict[str, int]


# -------------------------
# Routes
# -------------------------
@app.get("/healthz", tags=["meta"])
async def healthz():
    return {"status": "ok"}


@app.post("/dedupe", response_model=DedupeResponse, tags=["dedupe"])
def dedupe_batch(postings: List[Posting], detector: Deduplicator = Depends(deduplicator)):
    result = detector.dedupe(postings)
    return DedupeResponse(unique=result.unique, duplicates=result.duplicates)


@app.post("/leads/check", response_model=CheckResponse, tags=["dedupe"])
def check_lead(
    posting: Posting,
    session: Session = Depends(db_session),
    detector: Deduplicator = Depends(deduplicator),
):
    store = LeadStore(session)
    check = detector.check_existing(posting, store.get_by_id, store.get_all)
    return CheckResponse(exists=check.exists, via_similarity=check.via_similarity, matched=check.matched_posting)


@app.post("/leads", response_model=IngestResponse, tags=["admin"])
def ingest_leads(
    postings: List[Posting],
    x_token: str | None = Header(default=None),
    session: Session = Depends(db_session),
    settings: DedupeSettings = Depends(dedupe_settings),
    detector: Deduplicator = Depends(deduplicator),
):
    require_admin(x_token)
    summary = ingest_postings(postings, LeadStore(session), detector, dedupe_enabled=settings.dedupe_enabled)
    LOGGER.info("api-ingest received=%s added=%s", summary.received, summary.added)
    return IngestResponse(**summary.to_dict())


@app.get("/leads/{lead_id}", response_model=Posting, tags=["data"])
def get_lead(lead_id: str, session: Session = Depends(db_session)):
    posting = LeadStore(session).get_by_id(lead_id)
    if posting is None:
        raise HTTPException(status_code=404, detail="Lead not found")
    return posting


@app.get("/stats", response_model=StatsResponse, tags=["data"])
def get_stats(session: Session = Depends(db_session)):
    return StatsResponse(**lead_stats(session))
