import time
from collections.abc import Iterator
from datetime import datetime, timedelta, timezone

import pytest

from docscan.database.models import Document, NewDocument, ProcessingStatus
from docscan.database.repositories.memory_store import InMemoryDocumentStore
from docscan.processor.exceptions import DocumentNotFoundError
from docscan.search.models import SearchFilter
from docscan.structuring import structure_text


@pytest.fixture
def non_utc_local_time(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    if not hasattr(time, "tzset"):
        pytest.skip("time.tzset is not available on this platform")
    monkeypatch.setenv("TZ", "EST+05")
    time.tzset()
    yield
    monkeypatch.undo()
    time.tzset()


def _new_document(title: str = "Scan", file_size: int = 100) -> NewDocument:
    return NewDocument(
        title=title,
        original_name=f"{title}.pdf",
        file_type="application/pdf",
        file_size=file_size,
        file_path=f"{title}.pdf",
        categories=["Invoices"],
        tags=["q1"],
    )


def _stored_document(doc_id: int, **overrides: object) -> Document:
    fields: dict[str, object] = {
        "id": doc_id,
        "title": f"doc {doc_id}",
        "original_name": f"doc-{doc_id}.png",
        "file_type": "image/png",
        "file_size": 50,
        "file_path": f"doc-{doc_id}.png",
        "upload_date": datetime(2024, 1, doc_id),
    }
    fields.update(overrides)
    return Document(**fields)  # type: ignore[arg-type]


class TestCreateAndFind:
    def test_create_assigns_ids_and_pending_status(self) -> None:
        store = InMemoryDocumentStore()

        first = store.create(_new_document("a"))
        second = store.create(_new_document("b"))

        assert (first.id, second.id) == (1, 2)
        assert first.processing_status == ProcessingStatus.PENDING
        assert first.extracted_text is None
        assert first.structured_text is None
        assert first.categories == ["Invoices"]

    def test_find_by_id_returns_copy(self) -> None:
        store = InMemoryDocumentStore()
        created = store.create(_new_document())

        found = store.find_by_id(created.id)
        found.title = "changed"

        assert store.find_by_id(created.id).title == "Scan"

    def test_find_missing_raises(self) -> None:
        with pytest.raises(DocumentNotFoundError, match="Document 9 not found"):
            InMemoryDocumentStore().find_by_id(9)

    def test_add_keeps_id_and_decodes_columns(self) -> None:
        store = InMemoryDocumentStore()
        store.add(
            _stored_document(
                7,
                categories='["Receipts"]',
                structured_text='{"document_type": "receipt"}',
                processing_status="completed",
            )
        )

        stored = store.find_by_id(7)
        assert stored.categories == ["Receipts"]
        assert stored.structured_text is not None
        assert stored.processing_status == ProcessingStatus.COMPLETED
        assert store.create(_new_document()).id == 8

    def test_add_discards_malformed_payload(self) -> None:
        store = InMemoryDocumentStore()
        store.add(_stored_document(1, structured_text="{broken"))

        assert store.find_by_id(1).structured_text is None


class TestUpdate:
    def test_partial_update(self) -> None:
        store = InMemoryDocumentStore()
        created = store.create(_new_document())

        updated = store.update(
            created.id,
            processing_status=ProcessingStatus.COMPLETED,
            extracted_text="text",
            structured_text=structure_text("text"),
        )

        assert updated.processing_status == ProcessingStatus.COMPLETED
        assert updated.extracted_text == "text"
        assert updated.title == "Scan"
        assert store.find_by_id(created.id).structured_text is not None

    def test_unknown_field_raises(self) -> None:
        store = InMemoryDocumentStore()
        created = store.create(_new_document())

        with pytest.raises(ValueError, match="upload_date"):
            store.update(created.id, upload_date=datetime.now())

    def test_missing_document_raises(self) -> None:
        with pytest.raises(DocumentNotFoundError):
            InMemoryDocumentStore().update(3, title="x")

    def test_delete(self) -> None:
        store = InMemoryDocumentStore()
        created = store.create(_new_document())

        assert store.delete(created.id)
        assert not store.delete(created.id)
        assert store.list_all() == []


class TestWorklist:
    def test_selects_pending_and_empty_completed(self) -> None:
        store = InMemoryDocumentStore()
        store.add(_stored_document(1))
        store.add(
            _stored_document(2, processing_status=ProcessingStatus.COMPLETED, extracted_text="")
        )
        store.add(
            _stored_document(3, processing_status=ProcessingStatus.COMPLETED, extracted_text="ok")
        )
        store.add(_stored_document(4, processing_status=ProcessingStatus.FAILED))
        store.add(_stored_document(5, processing_status=ProcessingStatus.PROCESSING))
        store.add(
            _stored_document(6, processing_status=ProcessingStatus.COMPLETED, extracted_text="  ")
        )

        assert [doc.id for doc in store.list_needing_processing()] == [1, 2, 6]

    def test_reset_failed(self) -> None:
        store = InMemoryDocumentStore()
        failed = ProcessingStatus.FAILED
        completed = ProcessingStatus.COMPLETED
        store.add(_stored_document(1, processing_status=failed, extracted_text="File not found"))
        store.add(_stored_document(2, processing_status=completed, extracted_text="x"))

        assert store.reset_failed() == 1
        reset = store.find_by_id(1)
        assert reset.processing_status == ProcessingStatus.PENDING
        assert reset.extracted_text is None
        assert store.find_by_id(2).processing_status == ProcessingStatus.COMPLETED

    def test_recover_stale_processing(self) -> None:
        store = InMemoryDocumentStore()
        store.add(_stored_document(1, processing_status=ProcessingStatus.PROCESSING))

        assert store.recover_stale_processing() == 1
        assert store.find_by_id(1).processing_status == ProcessingStatus.PENDING
        assert store.recover_stale_processing() == 0


class TestQueries:
    def test_list_all_newest_first(self) -> None:
        store = InMemoryDocumentStore()
        for doc_id in (1, 3, 2):
            store.add(_stored_document(doc_id))

        assert [doc.id for doc in store.list_all()] == [3, 2, 1]

    def test_search(self) -> None:
        store = InMemoryDocumentStore()
        store.add(_stored_document(1, structured_text=structure_text("Invoice for a@b.com")))
        store.add(_stored_document(2))

        results = store.search(SearchFilter(has_emails=True))

        assert [doc.id for doc in results] == [1]

    def test_stats(self) -> None:
        store = InMemoryDocumentStore()
        store.add(_stored_document(1))
        store.add(_stored_document(2, processing_status=ProcessingStatus.FAILED))
        store.add(_stored_document(3, processing_status=ProcessingStatus.COMPLETED))

        stats = store.stats()

        assert stats.total == 3
        assert stats.pending == 1
        assert stats.processing == 0
        assert stats.completed == 1
        assert stats.failed == 1
        assert stats.storage_bytes == 150

    @pytest.mark.usefixtures("non_utc_local_time")
    def test_upload_date_is_naive_utc(self) -> None:
        before = datetime.now(timezone.utc).replace(tzinfo=None)
        created = InMemoryDocumentStore().create(_new_document())
        after = datetime.now(timezone.utc).replace(tzinfo=None)

        assert created.upload_date.tzinfo is None
        assert before <= created.upload_date <= after

    @pytest.mark.usefixtures("non_utc_local_time")
    def test_aware_date_bounds_match_new_uploads(self) -> None:
        store = InMemoryDocumentStore()
        created = store.create(_new_document())
        now = datetime.now(timezone.utc)

        since = (now - timedelta(minutes=1)).isoformat()
        until = (now + timedelta(minutes=1)).isoformat()
        found = store.search(SearchFilter.model_validate({"dateFrom": since, "dateTo": until}))

        assert [doc.id for doc in found] == [created.id]
