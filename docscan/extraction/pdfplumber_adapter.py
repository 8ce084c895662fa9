import io

import pdfplumber

from docscan.extraction.base import BaseTextExtractor, join_pages
from docscan.extraction.exceptions import PdfExtractionError
from docscan.logging.logger import Log


class PdfPlumberAdapter(BaseTextExtractor):
    """pdfplumber engine. Tolerances are in PDF points and control how close
    characters must be to join into one word or one line."""

    def __init__(self, x_tolerance: float = 3, y_tolerance: float = 3) -> None:
        self._x_tolerance = x_tolerance
        self._y_tolerance = y_tolerance

    def extract(self, raw_bytes: bytes) -> str:
        try:
            with pdfplumber.open(io.BytesIO(raw_bytes)) as pdf:
                pages = [
                    page.extract_text(
                        x_tolerance=self._x_tolerance,
                        y_tolerance=self._y_tolerance,
                    )
                    or ""
                    for page in pdf.pages
                ]
        except Exception as exc:
            raise PdfExtractionError(f"pdfplumber extraction failed: {exc}") from exc

        Log.debug(f"pdfplumber read {len(pages)} pages")
        return join_pages(pages)
