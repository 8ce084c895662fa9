from docscan.database.models import ProcessingStatus, utc_now
from docscan.database.repositories.base import BaseDocumentStore
from docscan.extraction.extractor import TextExtractor
from docscan.logging.logger import Log
from docscan.processor.exceptions import DocumentFileMissingError
from docscan.processor.file_loader import FileLoader
from docscan.processor.pipeline import PipelineContext, PipelineStep
from docscan.structuring.processor import TextProcessor


class MarkProcessingStep(PipelineStep):
    def __init__(self, store: BaseDocumentStore) -> None:
        self._store = store

    def run(self, context: PipelineContext) -> PipelineContext:
        self._store.update(context.document.id, processing_status=ProcessingStatus.PROCESSING)
        Log.info(f"Document {context.document.id} marked as processing")
        return context


class MarkFailedStep(PipelineStep):
    """Records the failure reason where the extracted text would go."""

    def __init__(self, store: BaseDocumentStore) -> None:
        self._store = store

    def run(self, context: PipelineContext) -> PipelineContext:
        self._store.update(
            context.document.id,
            processing_status=ProcessingStatus.FAILED,
            extracted_text=context.error_message,
            structured_text=None,
        )
        Log.error(f"Document {context.document.id} marked as failed: {context.error_message}")
        return context


class LoadFileStep(PipelineStep):
    def __init__(self, file_loader: FileLoader) -> None:
        self._file_loader = file_loader

    def run(self, context: PipelineContext) -> PipelineContext:
        file_path = context.document.file_path
        if not self._file_loader.exists(file_path):
            Log.warning(f"File not found for document {context.document.id}: {file_path}")
            raise DocumentFileMissingError()
        context.raw_bytes = self._file_loader.load(file_path)
        Log.info(f"Loaded {len(context.raw_bytes)} bytes for document {context.document.id}")
        return context


class ExtractTextStep(PipelineStep):
    def __init__(self, text_extractor: TextExtractor) -> None:
        self._text_extractor = text_extractor

    def run(self, context: PipelineContext) -> PipelineContext:
        context.extracted_text = self._text_extractor.extract(
            context.raw_bytes,
            context.document.file_type,
        )
        Log.info(
            f"Extracted {len(context.extracted_text)} chars from document "
            f"{context.document.id}"
        )
        return context


class StructureTextStep(PipelineStep):
    def __init__(self, text_processor: TextProcessor) -> None:
        self._text_processor = text_processor

    def run(self, context: PipelineContext) -> PipelineContext:
        context.structured_text = self._text_processor.process(context.extracted_text)
        Log.info(
            f"Structured document {context.document.id}: "
            f"type={context.structured_text.document_type.value} "
            f"confidence={context.structured_text.confidence}"
        )
        return context


class PersistResultStep(PipelineStep):
    """Writes text, payload and the completed status in one update."""

    def __init__(self, store: BaseDocumentStore) -> None:
        self._store = store

    def run(self, context: PipelineContext) -> PipelineContext:
        if context.structured_text is None:
            raise ValueError("PipelineContext.structured_text must be set before persist")
        self._store.update(
            context.document.id,
            extracted_text=context.extracted_text,
            structured_text=context.structured_text,
            processing_status=ProcessingStatus.COMPLETED,
            processed_date=utc_now(),
        )
        return context
