from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from docscan.structuring.models import StructuredText


def utc_now() -> datetime:
    """Current time as naive UTC, the clock every stored timestamp uses."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class ProcessingStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class Document:
    """Represents a row from the documents table."""

    id: int
    title: str
    original_name: str
    file_type: str
    file_size: int
    file_path: str
    upload_date: datetime
    processing_status: ProcessingStatus = ProcessingStatus.PENDING
    extracted_text: str | None = None
    structured_text: StructuredText | None = None
    categories: list[str] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)
    processed_date: datetime | None = None

    def needs_processing(self) -> bool:
        """Pending, or marked completed without any extracted text."""
        if self.processing_status == ProcessingStatus.PENDING:
            return True
        return self.processing_status == ProcessingStatus.COMPLETED and not (
            self.extracted_text or ""
        ).strip()

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready view with ISO dates and the structured payload inlined."""
        return {
            "id": self.id,
            "title": self.title,
            "original_name": self.original_name,
            "file_type": self.file_type,
            "file_size": self.file_size,
            "file_path": self.file_path,
            "upload_date": self.upload_date.isoformat(),
            "processing_status": self.processing_status.value,
            "extracted_text": self.extracted_text,
            "structured_text": (
                self.structured_text.to_dict() if self.structured_text is not None else None
            ),
            "categories": list(self.categories),
            "tags": list(self.tags),
            "processed_date": (
                self.processed_date.isoformat() if self.processed_date is not None else None
            ),
        }


@dataclass(frozen=True)
class NewDocument:
    """Fields supplied by the upload path when a document is created."""

    title: str
    original_name: str
    file_type: str
    file_size: int
    file_path: str
    categories: list[str] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class DocumentStats:
    total: int = 0
    pending: int = 0
    processing: int = 0
    completed: int = 0
    failed: int = 0
    storage_bytes: int = 0


# Partial-update field name -> column name
UPDATABLE_FIELDS: dict[str, str] = {
    "title": "title",
    "original_name": "original_name",
    "file_type": "file_type",
    "file_size": "file_size",
    "file_path": "file_path",
    "extracted_text": "extracted_text",
    "structured_text": "structured_text",
    "categories": "categories",
    "tags": "tags",
    "processing_status": "processing_status",
    "processed_date": "processed_date",
}
