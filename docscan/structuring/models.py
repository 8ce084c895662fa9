import math
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any


def _mapping(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


class DocumentType(str, Enum):
    INVOICE = "invoice"
    RECEIPT = "receipt"
    CONTRACT = "contract"
    RESUME = "resume"
    ID = "id"
    REPORT = "report"
    OTHER = "other"


@dataclass
class Entities:
    """Pattern-matched substrings, in first-match order, duplicates kept."""

    emails: list[str] = field(default_factory=list)
    phones: list[str] = field(default_factory=list)
    dates: list[str] = field(default_factory=list)
    amounts: list[str] = field(default_factory=list)
    names: list[str] = field(default_factory=list)
    addresses: list[str] = field(default_factory=list)
    reference_numbers: list[str] = field(default_factory=list)


@dataclass
class Sections:
    header: list[str] = field(default_factory=list)
    body: list[str] = field(default_factory=list)
    footer: list[str] = field(default_factory=list)
    title: str | None = None


@dataclass
class TextMetadata:
    line_count: int = 0
    word_count: int = 0
    has_table: bool = False
    has_signature: bool = False
    language: str = "unknown"


@dataclass
class StructuredText:
    """Output of the text structuring engine."""

    raw_text: str
    processed_text: str
    entities: Entities = field(default_factory=Entities)
    sections: Sections = field(default_factory=Sections)
    document_type: DocumentType = DocumentType.OTHER
    confidence: float = 0.0
    metadata: TextMetadata = field(default_factory=TextMetadata)

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready payload; enum members collapse to their values."""
        payload = asdict(self)
        payload["document_type"] = self.document_type.value
        return payload

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "StructuredText":
        """Rebuild from a stored payload, defaulting anything missing.

        Entity lists are never ``None`` and confidence is clamped to [0, 1].
        Raises ValueError or TypeError when the payload is not a mapping of
        the expected shape.
        """
        if not isinstance(payload, dict):
            raise TypeError(f"Expected a mapping, got {type(payload).__name__}")

        raw_entities = _mapping(payload.get("entities"))
        entities = Entities(
            **{
                name: [str(v) for v in (raw_entities.get(name) or [])]
                for name in Entities.__dataclass_fields__
            }
        )

        raw_sections = _mapping(payload.get("sections"))
        sections = Sections(
            header=list(raw_sections.get("header") or []),
            body=list(raw_sections.get("body") or []),
            footer=list(raw_sections.get("footer") or []),
            title=raw_sections.get("title"),
        )

        raw_metadata = _mapping(payload.get("metadata"))
        metadata = TextMetadata(
            line_count=int(raw_metadata.get("line_count", 0)),
            word_count=int(raw_metadata.get("word_count", 0)),
            has_table=bool(raw_metadata.get("has_table", False)),
            has_signature=bool(raw_metadata.get("has_signature", False)),
            language=str(raw_metadata.get("language", "unknown")),
        )

        confidence = float(payload.get("confidence", 0.0))
        if not math.isfinite(confidence):
            confidence = 0.0
        return cls(
            raw_text=str(payload.get("raw_text", "")),
            processed_text=str(payload.get("processed_text", "")),
            entities=entities,
            sections=sections,
            document_type=DocumentType(payload.get("document_type", "other")),
            confidence=min(max(confidence, 0.0), 1.0),
            metadata=metadata,
        )
