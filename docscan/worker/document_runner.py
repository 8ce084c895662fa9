from docscan.database.models import Document
from docscan.logging.logger import Log
from docscan.processor.processor import Processor


class DocumentRunner:
    """Run one document and keep its failure from reaching the tick loop."""

    def __init__(self, processor: Processor) -> None:
        self._processor = processor

    def run(self, document: Document) -> bool:
        """Process a single document. Returns True on success."""
        try:
            self._processor.process(document)
        except Exception as exc:
            Log.error(f"Document {document.id} failed: {exc}")
            return False
        Log.info(f"Document {document.id} completed successfully")
        return True
