from docscan.config.settings import Settings
from docscan.database.connection import close_pool, init_pool
from docscan.database.repositories.base import BaseDocumentStore
from docscan.database.repositories.documents_repository import DocumentsRepository
from docscan.logging.logger import Log
from docscan.processor.processor import build_processor
from docscan.worker.document_runner import DocumentRunner
from docscan.worker.worker import Worker


def build_worker(settings: Settings, store: BaseDocumentStore) -> Worker:
    processor = build_processor(settings, store)
    return Worker(store, DocumentRunner(processor), settings)


def main() -> None:
    """Entry point: initialize pool -> build dependencies -> start worker loop."""
    settings = Settings()
    Log.configure(settings.log_level)
    init_pool(settings)

    try:
        build_worker(settings, DocumentsRepository()).run()
    finally:
        close_pool()


if __name__ == "__main__":
    main()
