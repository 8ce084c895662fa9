from enum import Enum

from docscan.extraction.base import BaseTextExtractor
from docscan.extraction.exceptions import UnsupportedFileTypeError


class FileCategory(str, Enum):
    IMAGE = "image"
    PDF = "pdf"
    UNSUPPORTED = "unsupported"

    @classmethod
    def from_mime(cls, file_type: str | None) -> "FileCategory":
        mime = (file_type or "").lower()
        if "image" in mime:
            return cls.IMAGE
        if "pdf" in mime:
            return cls.PDF
        return cls.UNSUPPORTED


class TextExtractor:
    """Dispatches raw file content to the engine for its media category."""

    def __init__(
        self,
        pdf_extractor: BaseTextExtractor,
        ocr_extractor: BaseTextExtractor,
    ) -> None:
        self._pdf_extractor = pdf_extractor
        self._ocr_extractor = ocr_extractor

    def extract(self, raw_bytes: bytes, file_type: str | None) -> str:
        """Return the engine's text for ``raw_bytes``.

        Raises:
            UnsupportedFileTypeError: for anything that is neither an image
                nor a PDF.
            ExtractionError: when the selected engine fails.
        """
        category = FileCategory.from_mime(file_type)
        if category is FileCategory.IMAGE:
            return self._ocr_extractor.extract(raw_bytes)
        if category is FileCategory.PDF:
            return self._pdf_extractor.extract(raw_bytes)
        raise UnsupportedFileTypeError(f"Unsupported file type: {file_type or 'unknown'}")
