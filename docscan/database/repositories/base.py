from abc import ABC, abstractmethod
from typing import Any

from docscan.database.models import Document, DocumentStats, NewDocument
from docscan.search.models import SearchFilter


class BaseDocumentStore(ABC):
    """Contract for document record stores.

    Every returned :class:`Document` has ``categories`` and ``tags`` as lists
    and ``structured_text`` as a parsed object or ``None``.
    """

    @abstractmethod
    def find_by_id(self, document_id: int) -> Document:
        """Raises:
            DocumentNotFoundError: if no document with this ID exists.
        """

    @abstractmethod
    def list_all(self) -> list[Document]:
        """All documents, newest upload first."""

    @abstractmethod
    def list_needing_processing(self) -> list[Document]:
        """Pending documents plus completed ones with no extracted text,
        ordered by ascending ID."""

    @abstractmethod
    def create(self, new_document: NewDocument) -> Document:
        """Insert a pending document stamped with the current upload date."""

    @abstractmethod
    def update(self, document_id: int, **changes: Any) -> Document:
        """Apply a partial update and return the updated document.

        Raises:
            ValueError: if a field is not updatable.
            DocumentNotFoundError: if no document with this ID exists.
        """

    @abstractmethod
    def delete(self, document_id: int) -> bool:
        """Return True when a document was deleted."""

    @abstractmethod
    def search(self, search: SearchFilter) -> list[Document]:
        """Documents matching every supplied filter field, newest first."""

    @abstractmethod
    def stats(self) -> DocumentStats:
        """Counts per processing status and total stored bytes."""

    @abstractmethod
    def reset_failed(self) -> int:
        """Move failed documents back to pending, clearing extracted text.
        Returns the number of documents reset."""

    @abstractmethod
    def recover_stale_processing(self) -> int:
        """Move documents stuck in processing back to pending.
        Returns the number of documents recovered."""
