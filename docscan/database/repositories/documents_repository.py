from enum import Enum
from typing import Any

from psycopg.rows import dict_row
from psycopg.types.json import Jsonb

from docscan.database.codec import (
    decode_string_list,
    decode_structured_text,
    encode_structured_text,
)
from docscan.database.connection import get_connection
from docscan.database.models import (
    UPDATABLE_FIELDS,
    Document,
    DocumentStats,
    NewDocument,
    ProcessingStatus,
)
from docscan.database.repositories.base import BaseDocumentStore
from docscan.processor.exceptions import DocumentNotFoundError
from docscan.search.filter_compiler import ORDER_BY_SQL, compile_sql
from docscan.search.models import SearchFilter
from docscan.structuring.models import StructuredText

_COLUMNS = """
    id, title, original_name, file_type, file_size, file_path,
    extracted_text, structured_text, categories, tags,
    processing_status, upload_date, processed_date
"""


class DocumentsRepository(BaseDocumentStore):
    """Database operations for the documents table."""

    def find_by_id(self, document_id: int) -> Document:
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    f"SELECT {_COLUMNS} FROM documents WHERE id = %s",
                    (document_id,),
                )
                row = cur.fetchone()

        if row is None:
            raise DocumentNotFoundError(f"Document {document_id} not found")
        return self._to_document(row)

    def list_all(self) -> list[Document]:
        return self._select(f"SELECT {_COLUMNS} FROM documents {ORDER_BY_SQL}")

    def list_needing_processing(self) -> list[Document]:
        return self._select(
            f"""
            SELECT {_COLUMNS}
            FROM documents
            WHERE processing_status = %s
               OR (processing_status = %s AND COALESCE(TRIM(extracted_text), '') = '')
            ORDER BY id
            """,
            (ProcessingStatus.PENDING.value, ProcessingStatus.COMPLETED.value),
        )

    def create(self, new_document: NewDocument) -> Document:
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    f"""
                    INSERT INTO documents
                    (title, original_name, file_type, file_size, file_path,
                     categories, tags, processing_status, upload_date)
                    VALUES (%s, %s, %s, %s, %s, %s, %s, %s, NOW() AT TIME ZONE 'UTC')
                    RETURNING {_COLUMNS}
                    """,
                    (
                        new_document.title,
                        new_document.original_name,
                        new_document.file_type,
                        new_document.file_size,
                        new_document.file_path,
                        list(new_document.categories),
                        list(new_document.tags),
                        ProcessingStatus.PENDING.value,
                    ),
                )
                row = cur.fetchone()
            conn.commit()

        if row is None:
            raise RuntimeError("INSERT INTO documents returned no row")
        return self._to_document(row)

    def update(self, document_id: int, **changes: Any) -> Document:
        unknown = set(changes) - set(UPDATABLE_FIELDS)
        if unknown:
            raise ValueError(f"Fields cannot be updated: {sorted(unknown)}")
        if not changes:
            return self.find_by_id(document_id)

        assignments = ", ".join(f"{UPDATABLE_FIELDS[name]} = %s" for name in changes)
        values = [self._encode(name, value) for name, value in changes.items()]

        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    f"UPDATE documents SET {assignments} WHERE id = %s RETURNING {_COLUMNS}",
                    (*values, document_id),
                )
                row = cur.fetchone()
            conn.commit()

        if row is None:
            raise DocumentNotFoundError(f"Document {document_id} not found")
        return self._to_document(row)

    def delete(self, document_id: int) -> bool:
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute("DELETE FROM documents WHERE id = %s", (document_id,))
                deleted = cur.rowcount > 0
            conn.commit()
        return deleted

    def search(self, search: SearchFilter) -> list[Document]:
        compiled = compile_sql(search)
        return self._select(
            f"SELECT {_COLUMNS} FROM documents WHERE {compiled.where} {ORDER_BY_SQL}",
            tuple(compiled.params),
        )

    def stats(self) -> DocumentStats:
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    """
                    SELECT COUNT(*) AS total,
                           COUNT(*) FILTER (WHERE processing_status = 'pending') AS pending,
                           COUNT(*) FILTER (WHERE processing_status = 'processing') AS processing,
                           COUNT(*) FILTER (WHERE processing_status = 'completed') AS completed,
                           COUNT(*) FILTER (WHERE processing_status = 'failed') AS failed,
                           COALESCE(SUM(file_size), 0) AS storage_bytes
                    FROM documents
                    """
                )
                row = cur.fetchone()

        if row is None:
            return DocumentStats()
        return DocumentStats(
            total=int(row["total"]),
            pending=int(row["pending"]),
            processing=int(row["processing"]),
            completed=int(row["completed"]),
            failed=int(row["failed"]),
            storage_bytes=int(row["storage_bytes"]),
        )

    def reset_failed(self) -> int:
        """Move failed documents back to pending so the worker retries them."""
        return self._execute_count(
            """
            UPDATE documents
            SET processing_status = %s, extracted_text = NULL
            WHERE processing_status = %s
            """,
            (ProcessingStatus.PENDING.value, ProcessingStatus.FAILED.value),
        )

    def recover_stale_processing(self) -> int:
        return self._execute_count(
            "UPDATE documents SET processing_status = %s WHERE processing_status = %s",
            (ProcessingStatus.PENDING.value, ProcessingStatus.PROCESSING.value),
        )

    def _select(self, query: str, params: tuple[Any, ...] = ()) -> list[Document]:
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(query, params)
                rows = cur.fetchall()
        return [self._to_document(row) for row in rows]

    def _execute_count(self, query: str, params: tuple[Any, ...]) -> int:
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(query, params)
                count = cur.rowcount
            conn.commit()
        return count

    @staticmethod
    def _encode(name: str, value: Any) -> Any:
        if name == "structured_text":
            payload = (
                encode_structured_text(value) if isinstance(value, StructuredText) else value
            )
            return Jsonb(payload) if payload is not None else None
        if name in ("categories", "tags"):
            return decode_string_list(value)
        if isinstance(value, Enum):
            return value.value
        return value

    @staticmethod
    def _to_document(row: dict[str, Any]) -> Document:
        return Document(
            id=row["id"],
            title=row["title"],
            original_name=row["original_name"],
            file_type=row["file_type"],
            file_size=row["file_size"],
            file_path=row["file_path"],
            upload_date=row["upload_date"],
            processing_status=ProcessingStatus(row["processing_status"]),
            extracted_text=row["extracted_text"],
            structured_text=decode_structured_text(row["structured_text"]),
            categories=decode_string_list(row["categories"]),
            tags=decode_string_list(row["tags"]),
            processed_date=row["processed_date"],
        )
