"""Image OCR through the Tesseract engine."""

import io

import pytesseract
from PIL import Image

from docscan.extraction.base import BaseTextExtractor
from docscan.extraction.exceptions import OcrExtractionError
from docscan.logging.logger import Log


class TesseractOcrAdapter(BaseTextExtractor):
    """Runs Tesseract end-to-end on an image and returns its plain text.

    Args:
        lang: Tesseract language code.
        tesseract_cmd: Path to the Tesseract executable. If ``None``, uses the
            one on ``PATH``.
        timeout_seconds: Kill the engine after this many seconds and raise.
            ``0`` waits indefinitely.
    """

    def __init__(
        self,
        lang: str = "eng",
        tesseract_cmd: str | None = None,
        timeout_seconds: int = 0,
    ) -> None:
        if tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = tesseract_cmd
        self._lang = lang
        self._timeout_seconds = timeout_seconds

    def extract(self, raw_bytes: bytes) -> str:
        try:
            with Image.open(io.BytesIO(raw_bytes)) as image:
                text = pytesseract.image_to_string(
                    image,
                    lang=self._lang,
                    timeout=self._timeout_seconds,
                )
        except Exception as exc:
            raise OcrExtractionError(f"tesseract OCR failed: {exc}") from exc

        Log.debug(f"OCR produced {len(text)} chars")
        return text.strip()
