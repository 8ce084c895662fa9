from docscan.structuring.models import DocumentType, Entities, Sections, StructuredText, TextMetadata
from docscan.structuring.processor import TextProcessor, structure_text

__all__ = [
    "DocumentType",
    "Entities",
    "Sections",
    "StructuredText",
    "TextMetadata",
    "TextProcessor",
    "structure_text",
]
