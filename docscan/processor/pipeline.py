from abc import ABC, abstractmethod
from dataclasses import dataclass

from docscan.database.models import Document
from docscan.structuring.models import StructuredText


@dataclass(slots=True)
class PipelineContext:
    document: Document
    raw_bytes: bytes = b""
    extracted_text: str = ""
    structured_text: StructuredText | None = None
    error_message: str = ""


class PipelineStep(ABC):
    @abstractmethod
    def run(self, context: PipelineContext) -> PipelineContext:
        raise NotImplementedError
