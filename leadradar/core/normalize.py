from __future__ import annotations

from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, field_validator

TEXT_FIELDS = ("source", "url", "title", "text")


class Posting(BaseModel):
    """A collected posting as seen by the dedupe core.

    Collectors routinely omit fields or hand over odd types, so every text
    field is coerced to a string on construction: ``None`` or a non-string
    becomes ``""``. Anything beyond the core fields (author, score,
    captured_at, ...) is kept as an extra and passed through untouched.
    """

    model_config = ConfigDict(extra="allow")

    id: Optional[str] = None
    source: str = ""
    url: str = ""
    title: str = ""
    text: str = ""

    @field_validator("source", "url", "title", "text", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str:
        return value if isinstance(value, str) else ""

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> Optional[str]:
        if isinstance(value, bool):
            return None
        if isinstance(value, int):
            return str(value)
        if isinstance(value, str):
            return value or None
        return None

    @classmethod
    def coerce(cls, obj: Any) -> "Posting":
        """Build a Posting from a Posting, a mapping or any attribute object."""
        if isinstance(obj, Posting):
            return obj
        if isinstance(obj, Mapping):
            return cls.model_validate(dict(obj))
        return cls.model_validate({name: getattr(obj, name, None) for name in ("id", *TEXT_FIELDS)})

    @property
    def content(self) -> str:
        return f"{self.title} {self.text}"

    def as_duplicate_of(self, unique_id: str) -> "DuplicatePosting":
        data = self.model_dump()
        data["duplicate_of"] = unique_id
        return DuplicatePosting.model_validate(data)


class DuplicatePosting(Posting):
    duplicate_of: str
