from pathlib import Path

from docscan.config.settings import Settings
from docscan.database.models import Document
from docscan.database.repositories.base import BaseDocumentStore
from docscan.extraction.exceptions import ExtractionError
from docscan.extraction.factory import build_text_extractor
from docscan.logging.logger import Log
from docscan.processor.exceptions import ProcessorError
from docscan.processor.file_loader import FileLoader
from docscan.processor.pipeline import PipelineContext, PipelineStep
from docscan.processor.steps import (
    ExtractTextStep,
    LoadFileStep,
    MarkFailedStep,
    MarkProcessingStep,
    PersistResultStep,
    StructureTextStep,
)
from docscan.structuring.processor import TextProcessor


def failure_message(exc: Exception) -> str:
    """Known failures keep their own message; anything else is prefixed."""
    if isinstance(exc, (ProcessorError, ExtractionError)):
        return str(exc) or type(exc).__name__
    return f"Processing failed: {str(exc) or type(exc).__name__}"


class Processor:
    """Runs one document through the processing pipeline.

    Pipeline: mark processing -> load file -> extract -> structure -> persist.
    On any step error the document is marked failed and the error re-raised.
    """

    def __init__(self, steps: list[PipelineStep], failed_step: PipelineStep) -> None:
        self._steps = steps
        self._failed_step = failed_step

    def process(self, document: Document) -> None:
        Log.info(f"Processing document {document.id}: {document.title}")
        context = PipelineContext(document=document)
        try:
            for step in self._steps:
                context = step.run(context)
        except Exception as exc:
            context.error_message = failure_message(exc)
            self._failed_step.run(context)
            raise


def build_processor(
    settings: Settings,
    store: BaseDocumentStore,
    files_root: Path | None = None,
) -> Processor:
    """Build a Processor with all required adapters."""
    file_loader = FileLoader(files_root if files_root is not None else settings.files_root)
    steps: list[PipelineStep] = [
        MarkProcessingStep(store),
        LoadFileStep(file_loader),
        ExtractTextStep(build_text_extractor(settings)),
        StructureTextStep(TextProcessor()),
        PersistResultStep(store),
    ]
    return Processor(steps=steps, failed_step=MarkFailedStep(store))
