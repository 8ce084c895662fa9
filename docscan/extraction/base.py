from abc import ABC, abstractmethod
from collections.abc import Iterable


def join_pages(pages: Iterable[str]) -> str:
    """Page texts in document order, one newline between pages."""
    return "\n".join(page.strip() for page in pages).strip()


class BaseTextExtractor(ABC):
    """Contract for all text extraction engine adapters."""

    @abstractmethod
    def extract(self, raw_bytes: bytes) -> str:
        """Extract plain text from raw file content.

        Args:
            raw_bytes: Raw file content.

        Returns:
            Extracted text as a single string, possibly empty.

        Raises:
            ExtractionError: if the engine fails for any reason.
        """
