"""
Affirmation record.

The text length bound is a use-case rule (see ``validate_text``), not a model
constraint: records written out of band (imports, older versions) must still
load from storage.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..domain.errors import EmptyTextError, TooLongError, ValidationError

MAX_TEXT_LENGTH = 280


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Affirmation(BaseModel):
    """A single user affirmation."""

    model_config = ConfigDict(frozen=True)

    id: str = ""
    text: str
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
    display_count: int = Field(default=0, ge=0)
    is_active: bool = True
    sort_order: int = 0

    @model_validator(mode="after")
    def updated_not_before_created(self) -> "Affirmation":
        if self.updated_at < self.created_at:
            raise ValueError("updated_at must not be earlier than created_at")
        return self

    @classmethod
    def new(cls, text: str, is_active: bool = True) -> "Affirmation":
        """Unsaved affirmation; the repository assigns id and sort order."""
        now = utcnow()
        return cls(text=text, created_at=now, updated_at=now, is_active=is_active)

    def to_record(self) -> Dict[str, Any]:
        """JSON-compatible dict for the embedded store."""
        return self.model_dump(mode="json")

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "Affirmation":
        return cls.model_validate(record)

    def __repr__(self) -> str:
        return (
            f"<Affirmation(id={self.id!r}, sort_order={self.sort_order}, "
            f"is_active={self.is_active}, length={len(self.text)})>"
        )


def validate_text(text: str) -> Optional[ValidationError]:
    """Check affirmation text against the create/edit rules.

    Length is counted in code points after trimming.

    Returns:
        ``None`` when valid, otherwise the error to report.
    """
    trimmed = text.strip()
    if not trimmed:
        return EmptyTextError()
    if len(trimmed) > MAX_TEXT_LENGTH:
        return TooLongError(length=len(trimmed), max_length=MAX_TEXT_LENGTH)
    return None
