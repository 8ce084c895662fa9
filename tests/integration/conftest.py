import os
from collections.abc import Generator
from pathlib import Path
from typing import Any

import psycopg
import pytest

from docscan.config.settings import Settings
from docscan.database.connection import build_conninfo, close_pool, get_connection, init_pool
from docscan.database.models import NewDocument
from docscan.database.repositories.documents_repository import DocumentsRepository

SCHEMA_PATH = Path(__file__).resolve().parents[2] / "schema.sql"


def _test_settings() -> Settings:
    os.environ.setdefault("DB_DATABASE", "docscan_test")
    return Settings()


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    return _test_settings()


@pytest.fixture(scope="session")
def integration_pool(test_settings: Settings) -> Generator[None, None, None]:
    try:
        with psycopg.connect(build_conninfo(test_settings), connect_timeout=3) as conn:
            conn.execute(SCHEMA_PATH.read_text(encoding="utf-8"))
    except psycopg.Error as e:
        pytest.skip(f"PostgreSQL test DB not available: {e}. Set DB_* env to run.")
    init_pool(test_settings)
    try:
        yield
    finally:
        close_pool()


@pytest.fixture
def db_conn(integration_pool: None) -> Generator[psycopg.Connection[Any], None, None]:
    with get_connection() as conn:
        conn.execute("TRUNCATE documents RESTART IDENTITY")
        conn.commit()
        yield conn


@pytest.fixture
def repo(db_conn: psycopg.Connection[Any]) -> DocumentsRepository:
    return DocumentsRepository()


@pytest.fixture
def files_root(tmp_path: Path) -> Path:
    return tmp_path


@pytest.fixture
def sample_pdf_on_disk(
    repo: DocumentsRepository,
    files_root: Path,
    sample_pdf_bytes: bytes,
) -> int:
    (files_root / "invoice.pdf").write_bytes(sample_pdf_bytes)
    document = repo.create(
        NewDocument(
            title="March invoice",
            original_name="invoice.pdf",
            file_type="application/pdf",
            file_size=len(sample_pdf_bytes),
            file_path="invoice.pdf",
            categories=["Invoices"],
        )
    )
    return document.id
