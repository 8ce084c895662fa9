from datetime import date, datetime, time, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from docscan.structuring.models import DocumentType


def to_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def _is_date_only(value: Any) -> bool:
    if isinstance(value, str):
        return len(value.strip()) == 10
    return isinstance(value, date) and not isinstance(value, datetime)


def _as_datetime(value: Any, end_of_day: bool) -> Any:
    if value is None or value == "":
        return None
    if _is_date_only(value):
        day = date.fromisoformat(value.strip()) if isinstance(value, str) else value
        return datetime.combine(day, time.max if end_of_day else time.min)
    return value


class SearchFilter(BaseModel):
    """Structured search request. Every supplied field narrows the result.

    Accepts camelCase keys (``dateFrom``, ``hasEmails``...) as well as the
    snake_case attribute names. A date-only ``dateTo`` covers the whole day.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    query: str | None = None
    categories: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    date_from: datetime | None = None
    date_to: datetime | None = None
    document_type: DocumentType | None = None
    has_emails: bool = False
    has_phones: bool = False
    has_amounts: bool = False
    min_confidence: float | None = Field(default=None, ge=0.0, le=1.0)

    @field_validator("query", mode="before")
    @classmethod
    def _blank_query_is_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("categories", "tags", mode="before")
    @classmethod
    def _null_list_is_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("has_emails", "has_phones", "has_amounts", mode="before")
    @classmethod
    def _null_flag_is_false(cls, value: Any) -> Any:
        return False if value is None else value

    @field_validator("date_from", mode="before")
    @classmethod
    def _parse_date_from(cls, value: Any) -> Any:
        return _as_datetime(value, end_of_day=False)

    @field_validator("date_to", mode="before")
    @classmethod
    def _parse_date_to(cls, value: Any) -> Any:
        return _as_datetime(value, end_of_day=True)

    @field_validator("date_from", "date_to")
    @classmethod
    def _naive_utc(cls, value: datetime | None) -> datetime | None:
        return to_naive_utc(value) if value is not None else None

    @field_validator("document_type", mode="before")
    @classmethod
    def _blank_type_is_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    def requires_structured_text(self) -> bool:
        return (
            self.document_type is not None
            or self.has_emails
            or self.has_phones
            or self.has_amounts
            or self.min_confidence is not None
        )
