# leadradar/cli.py
from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from dataclasses import replace
from pathlib import Path
from typing import Optional, Sequence

import yaml

from leadradar.config import DedupeSettings, load_postings, load_settings_file, settings_from_env
from leadradar.core.dedupe import Deduplicator

LOGGER = logging.getLogger("leadradar")


def _configure_logging() -> None:
    level = os.getenv("LEADRADAR_LOG_LEVEL", "INFO").upper()
    logging.basicConfig(level=getattr(logging, level, logging.INFO), format="%(levelname)s %(name)s: %(message)s")


def _resolve_settings(args: argparse.Namespace) -> DedupeSettings:
    settings = load_settings_file(args.config) if args.config else settings_from_env()
    overrides = {}
    if getattr(args, "title_threshold", None) is not None:
        overrides["title_threshold"] = args.title_threshold
    if getattr(args, "similarity_threshold", None) is not None:
        overrides["similarity_threshold"] = args.similarity_threshold
    if overrides:
        settings = replace(settings, **overrides)
    return settings


def cmd_dedupe(args: argparse.Namespace, settings: DedupeSettings) -> int:
    postings = load_postings(args.file)
    result = Deduplicator.from_settings(settings).dedupe(postings)
    print(f"Summary: received={len(postings)} unique={len(result.unique)} duplicates={len(result.duplicates)}")
    for dup in result.duplicates[: args.preview]:
        print(f"  duplicate {dup.id} -> {dup.duplicate_of} [{dup.source}] {dup.title[:80]}")

    out = Path(args.out)
    out.parent.mkdir(parents=True, exist_ok=True)
    with out.open("w", encoding="utf-8") as f:
        json.dump(result.to_dict(), f, indent=2, ensure_ascii=False)
    print(f"Wrote {out}")
    return 0


def cmd_ingest(args: argparse.Namespace, settings: DedupeSettings) -> int:
    from leadradar.db.session import current_engine_url, get_session
    from leadradar.db.store import LeadStore
    from leadradar.pipeline.ingest import ingest_postings

    postings = load_postings(args.file)
    dedupe_enabled = settings.dedupe_enabled and not args.no_dedupe
    with get_session() as session:
        summary = ingest_postings(
            postings,
            LeadStore(session),
            Deduplicator.from_settings(settings),
            dedupe_enabled=dedupe_enabled,
        )
    print(
        f"Ingested into {current_engine_url()}: received={summary.received} added={summary.added} "
        f"batch_duplicates={summary.batch_duplicates} existing={summary.existing} merged={summary.merged}"
    )
    return 0


def cmd_init_db(args: argparse.Namespace, settings: DedupeSettings) -> int:
    from leadradar.db.models import Base
    from leadradar.db.session import ENGINE

    LOGGER.info("Initializing database schema...")
    Base.metadata.create_all(bind=ENGINE)
    LOGGER.info("Database schema initialized successfully.")
    return 0


def cmd_prune(args: argparse.Namespace, settings: DedupeSettings) -> int:
    from leadradar.db.crud import prune_old_leads
    from leadradar.db.session import get_session

    days = args.days if args.days is not None else settings.retention_days
    with get_session() as session:
        summary = prune_old_leads(session, days, dry_run=args.dry_run)
    print(summary.to_dict())
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="leadradar", description="Lead Radar posting deduplication")
    parser.add_argument("--config", type=str, default=None, help="YAML settings file (overrides LEADRADAR_* env vars)")
    sub = parser.add_subparsers(dest="command", required=True)

    p_dedupe = sub.add_parser("dedupe", help="Deduplicate a JSON file of postings")
    p_dedupe.add_argument("file", type=str, help="JSON array of postings, or {\"leads\": [...]}")
    p_dedupe.add_argument("--out", type=str, default="output/deduped.json", help="Where to write unique/duplicates JSON")
    p_dedupe.add_argument("--title-threshold", type=float, default=None, help="Same-source title similarity threshold")
    p_dedupe.add_argument("--similarity-threshold", type=float, default=None, help="Title+text similarity threshold")
    p_dedupe.add_argument("--preview", type=int, default=10, help="How many duplicates to list in the summary")
    p_dedupe.set_defaults(func=cmd_dedupe)

    p_ingest = sub.add_parser("ingest", help="Dedupe a JSON file of postings and store the new ones")
    p_ingest.add_argument("file", type=str)
    p_ingest.add_argument("--title-threshold", type=float, default=None)
    p_ingest.add_argument("--similarity-threshold", type=float, default=None)
    p_ingest.add_argument("--no-dedupe", action="store_true", help="Store every posting, merging only on id")
    p_ingest.set_defaults(func=cmd_ingest)

    p_init = sub.add_parser("init-db", help="Create the leads table")
    p_init.set_defaults(func=cmd_init_db)

    p_prune = sub.add_parser("prune", help="Delete leads older than the retention window")
    p_prune.add_argument("--days", type=int, default=None, help="Retention in days (default: LEADRADAR_RETENTION_DAYS or 90)")
    p_prune.add_argument("--dry-run", action="store_true", help="Report what would be deleted without deleting")
    p_prune.set_defaults(func=cmd_prune)

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    _configure_logging()
    args = build_parser().parse_args(argv)
    try:
        settings = _resolve_settings(args)
        return args.func(args, settings)
    except FileNotFoundError as e:
        print(f"❌ Error: {e.filename} not found.", file=sys.stderr)
        return 1
    except json.JSONDecodeError as e:
        print(f"❌ Error: invalid JSON in input ({e})", file=sys.stderr)
        return 1
    except yaml.YAMLError as e:
        print(f"❌ Error: invalid settings file ({e})", file=sys.stderr)
        return 1
    except ValueError as e:
        print(f"❌ Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    # When executed as `python -m leadradar.cli ...`
    sys.exit(main())
