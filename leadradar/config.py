"""Runtime settings for Lead Radar.

Environment variables (all optional)
------------------------------------
LEADRADAR_TITLE_THRESHOLD (float in [0, 1], default 0.9)
    Same-source title overlap at which two postings are the same posting.
LEADRADAR_SIMILARITY_THRESHOLD (float in [0, 1], default 0.85)
    Title+body overlap at which two postings from any source match.
LEADRADAR_DEDUPE_ENABLED (default true; only 0/false/no/n/off turn it off)
LEADRADAR_RETENTION_DAYS (int, default 90)

A YAML file with the same keys as :class:`DedupeSettings` can override these,
see :func:`load_settings_file`.
"""
from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Optional, Union

import yaml

LOGGER = logging.getLogger(__name__)

DEFAULT_TITLE_THRESHOLD = 0.9
DEFAULT_SIMILARITY_THRESHOLD = 0.85
DEFAULT_RETENTION_DAYS = 90


def validate_threshold(name: str, value: Any) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValueError(f"{name} must be a number, got {value!r}") from None
    if not 0.0 <= number <= 1.0:
        raise ValueError(f"{name} must be within [0, 1], got {number}")
    return number


def _parse_enabled(value: Optional[str]) -> bool:
    # Anything but an explicit off value keeps the flag on
    if value is None:
        return True
    return value.strip().lower() not in {"0", "false", "no", "n", "off"}


@dataclass(frozen=True)
class DedupeSettings:
    title_threshold: float = DEFAULT_TITLE_THRESHOLD
    similarity_threshold: float = DEFAULT_SIMILARITY_THRESHOLD
    dedupe_enabled: bool = True
    retention_days: int = DEFAULT_RETENTION_DAYS

    def __post_init__(self) -> None:
        object.__setattr__(self, "title_threshold", validate_threshold("title_threshold", self.title_threshold))
        object.__setattr__(
            self, "similarity_threshold", validate_threshold("similarity_threshold", self.similarity_threshold)
        )
        if int(self.retention_days) <= 0:
            raise ValueError("retention_days must be positive")


def settings_from_env() -> DedupeSettings:
    enabled_raw = os.getenv("LEADRADAR_DEDUPE_ENABLED")
    retention_raw = os.getenv("LEADRADAR_RETENTION_DAYS", str(DEFAULT_RETENTION_DAYS))
    try:
        retention_days = int(retention_raw)
    except ValueError:
        raise ValueError(f"LEADRADAR_RETENTION_DAYS must be an integer, got {retention_raw!r}") from None
    return DedupeSettings(
        title_threshold=validate_threshold(
            "LEADRADAR_TITLE_THRESHOLD", os.getenv("LEADRADAR_TITLE_THRESHOLD", DEFAULT_TITLE_THRESHOLD)
        ),
        similarity_threshold=validate_threshold(
            "LEADRADAR_SIMILARITY_THRESHOLD", os.getenv("LEADRADAR_SIMILARITY_THRESHOLD", DEFAULT_SIMILARITY_THRESHOLD)
        ),
        dedupe_enabled=_parse_enabled(enabled_raw),
        retention_days=retention_days,
    )


def load_settings_file(path: Union[str, Path], base: Optional[DedupeSettings] = None) -> DedupeSettings:
    """Overlay the keys found in a YAML file on ``base`` (default: the environment)."""
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a mapping of settings")

    known = {f.name for f in fields(DedupeSettings)}
    unknown = sorted(set(data) - known)
    if unknown:
        LOGGER.warning("settings-file path=%s ignored_keys=%s", path, ",".join(map(str, unknown)))

    overrides: dict[str, Any] = {k: v for k, v in data.items() if k in known}
    if "dedupe_enabled" in overrides and isinstance(overrides["dedupe_enabled"], str):
        overrides["dedupe_enabled"] = _parse_enabled(overrides["dedupe_enabled"])
    if "retention_days" in overrides:
        overrides["retention_days"] = int(overrides["retention_days"])
    return replace(base or settings_from_env(), **overrides)


def load_postings(path: Union[str, Path]) -> list[dict]:
    """Read a JSON document of postings: an array, one object, or ``{"leads": [...]}``."""
    path = Path(path)
    with path.open(encoding="utf-8") as f:
        data = json.load(f)
    if isinstance(data, dict):
        leads = data.get("leads")
        if isinstance(leads, list):
            return leads
        return [data]
    elif isinstance(data, list):
        return data
    else:
        return []
