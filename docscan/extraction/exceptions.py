class ExtractionError(Exception):
    """Base exception for text extraction failures."""


class UnsupportedFileTypeError(ExtractionError):
    """Raised when a file's media type has no extraction engine."""


class PdfExtractionError(ExtractionError):
    """Raised when a PDF engine fails to extract text."""


class OcrExtractionError(ExtractionError):
    """Raised when the OCR engine fails or times out."""
