import pymupdf

from docscan.extraction.base import BaseTextExtractor, join_pages
from docscan.extraction.exceptions import PdfExtractionError
from docscan.logging.logger import Log


class PyMuPdfAdapter(BaseTextExtractor):
    """PyMuPDF engine. With ``sort`` set, blocks on each page are read top to
    bottom, left to right instead of in content-stream order."""

    def __init__(self, sort: bool = True) -> None:
        self._sort = sort

    def extract(self, raw_bytes: bytes) -> str:
        try:
            with pymupdf.open(stream=raw_bytes, filetype="pdf") as doc:  # type: ignore[no-untyped-call]
                if doc.needs_pass:
                    raise PdfExtractionError("pymupdf extraction failed: document is encrypted")
                pages = [page.get_text(sort=self._sort) for page in doc]
        except PdfExtractionError:
            raise
        except Exception as exc:
            raise PdfExtractionError(f"pymupdf extraction failed: {exc}") from exc

        Log.debug(f"pymupdf read {len(pages)} pages")
        return join_pages(pages)
