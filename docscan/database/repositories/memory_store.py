import copy
import threading
from dataclasses import replace
from typing import Any

from docscan.database.codec import decode_string_list, decode_structured_text
from docscan.database.models import (
    UPDATABLE_FIELDS,
    Document,
    DocumentStats,
    NewDocument,
    ProcessingStatus,
    utc_now,
)
from docscan.database.repositories.base import BaseDocumentStore
from docscan.processor.exceptions import DocumentNotFoundError
from docscan.search.filter_compiler import apply_filter, sort_newest_first
from docscan.search.models import SearchFilter


class InMemoryDocumentStore(BaseDocumentStore):
    """Process-local document store with the same contract as the database.

    Each read-modify-write of one record happens under a lock; callers get
    copies, so mutating a returned document never changes the store.
    """

    def __init__(self) -> None:
        self._documents: dict[int, Document] = {}
        self._next_id = 1
        self._lock = threading.Lock()

    def add(self, document: Document) -> Document:
        """Insert a fully-formed document as-is (keeps its ID and dates)."""
        with self._lock:
            stored = self._decoded(document)
            self._documents[stored.id] = stored
            self._next_id = max(self._next_id, stored.id + 1)
            return copy.deepcopy(stored)

    def find_by_id(self, document_id: int) -> Document:
        with self._lock:
            document = self._documents.get(document_id)
            if document is None:
                raise DocumentNotFoundError(f"Document {document_id} not found")
            return copy.deepcopy(document)

    def list_all(self) -> list[Document]:
        return sort_newest_first(self._snapshot())

    def list_needing_processing(self) -> list[Document]:
        return sorted(
            (doc for doc in self._snapshot() if doc.needs_processing()),
            key=lambda doc: doc.id,
        )

    def create(self, new_document: NewDocument) -> Document:
        with self._lock:
            document = Document(
                id=self._next_id,
                title=new_document.title,
                original_name=new_document.original_name,
                file_type=new_document.file_type,
                file_size=new_document.file_size,
                file_path=new_document.file_path,
                upload_date=utc_now(),
                categories=list(new_document.categories),
                tags=list(new_document.tags),
            )
            self._documents[document.id] = document
            self._next_id += 1
            return copy.deepcopy(document)

    def update(self, document_id: int, **changes: Any) -> Document:
        unknown = set(changes) - set(UPDATABLE_FIELDS)
        if unknown:
            raise ValueError(f"Fields cannot be updated: {sorted(unknown)}")
        with self._lock:
            document = self._documents.get(document_id)
            if document is None:
                raise DocumentNotFoundError(f"Document {document_id} not found")
            updated = self._decoded(replace(document, **changes))
            self._documents[document_id] = updated
            return copy.deepcopy(updated)

    def delete(self, document_id: int) -> bool:
        with self._lock:
            return self._documents.pop(document_id, None) is not None

    def search(self, search: SearchFilter) -> list[Document]:
        return apply_filter(search, self._snapshot())

    def stats(self) -> DocumentStats:
        documents = self._snapshot()
        counts = {status: 0 for status in ProcessingStatus}
        for doc in documents:
            counts[doc.processing_status] += 1
        return DocumentStats(
            total=len(documents),
            pending=counts[ProcessingStatus.PENDING],
            processing=counts[ProcessingStatus.PROCESSING],
            completed=counts[ProcessingStatus.COMPLETED],
            failed=counts[ProcessingStatus.FAILED],
            storage_bytes=sum(doc.file_size for doc in documents),
        )

    def reset_failed(self) -> int:
        return self._move(
            ProcessingStatus.FAILED,
            processing_status=ProcessingStatus.PENDING,
            extracted_text=None,
        )

    def recover_stale_processing(self) -> int:
        return self._move(ProcessingStatus.PROCESSING, processing_status=ProcessingStatus.PENDING)

    def _move(self, from_status: ProcessingStatus, **changes: Any) -> int:
        with self._lock:
            moved = [
                doc_id
                for doc_id, doc in self._documents.items()
                if doc.processing_status == from_status
            ]
            for doc_id in moved:
                self._documents[doc_id] = replace(self._documents[doc_id], **changes)
            return len(moved)

    def _snapshot(self) -> list[Document]:
        with self._lock:
            return [copy.deepcopy(doc) for doc in self._documents.values()]

    @staticmethod
    def _decoded(document: Document) -> Document:
        return replace(
            document,
            processing_status=ProcessingStatus(document.processing_status),
            categories=decode_string_list(document.categories),
            tags=decode_string_list(document.tags),
            structured_text=decode_structured_text(document.structured_text),
        )
