from docscan.config.settings import Settings
from docscan.extraction.base import BaseTextExtractor
from docscan.extraction.extractor import TextExtractor
from docscan.extraction.pdfplumber_adapter import PdfPlumberAdapter
from docscan.extraction.pymupdf_adapter import PyMuPdfAdapter
from docscan.extraction.tesseract_adapter import TesseractOcrAdapter


class PdfExtractorFactory:
    """Creates the correct PDF extractor based on settings."""

    ADAPTERS: dict[str, type[BaseTextExtractor]] = {
        "pdfplumber": PdfPlumberAdapter,
        "pymupdf": PyMuPdfAdapter,
    }

    @classmethod
    def create(cls, settings: Settings) -> BaseTextExtractor:
        engine = settings.pdf_engine.lower()
        adapter_cls = cls.ADAPTERS.get(engine)
        if adapter_cls is None:
            raise ValueError(
                f"Unknown PDF engine '{engine}'. Choose from: {list(cls.ADAPTERS)}"
            )
        return adapter_cls()


def build_text_extractor(settings: Settings) -> TextExtractor:
    """Wire the configured PDF engine and Tesseract into one extractor."""
    ocr_extractor = TesseractOcrAdapter(
        lang=settings.ocr_lang,
        tesseract_cmd=settings.tesseract_cmd,
        timeout_seconds=settings.ocr_timeout_seconds,
    )
    return TextExtractor(
        pdf_extractor=PdfExtractorFactory.create(settings),
        ocr_extractor=ocr_extractor,
    )
