"""Text structuring engine.

Turns raw OCR/PDF text into a :class:`StructuredText` payload:

1. Clean whitespace and line endings.
2. Promote short all-caps lines to headings.
3. Keep bullet lines verbatim.
4. Reflow keyword-headed column blocks into markdown tables.
5. Extract entities (emails, phones, dates, amounts, reference numbers,
   names, addresses) from the cleaned text.
6. Split the non-empty lines into title/header/body/footer.
7. Classify the document with ordered keyword rules.
8. Score a heuristic confidence.
9. Collect line/word counts, table/signature flags and a language guess.

The engine is pure and total: any string, including the empty string,
produces a payload and nothing raises.
"""

import math

from docscan.structuring import formatting, patterns
from docscan.structuring.models import (
    DocumentType,
    Entities,
    Sections,
    StructuredText,
    TextMetadata,
)


class TextProcessor:
    """Deterministic, regex-driven text structuring."""

    def process(self, raw_text: str) -> StructuredText:
        cleaned = formatting.clean_text(raw_text)
        cleaned = formatting.format_headings(cleaned)
        cleaned = formatting.format_bullets(cleaned)
        cleaned = formatting.format_tables(cleaned)
        lines = [line for line in cleaned.split("\n") if line.strip()]

        return StructuredText(
            raw_text=raw_text,
            processed_text=cleaned,
            entities=self.extract_entities(cleaned),
            sections=self.identify_sections(lines),
            document_type=self.classify_document(cleaned),
            confidence=self.calculate_confidence(cleaned),
            metadata=self.extract_metadata(cleaned, lines),
        )

    # ------------------------------------------------------------------
    # Entities
    # ------------------------------------------------------------------

    def extract_entities(self, text: str) -> Entities:
        return Entities(
            emails=[m.group(0) for m in patterns.EMAIL_RE.finditer(text)],
            phones=[m.group(0) for m in patterns.PHONE_RE.finditer(text)],
            dates=[m.group(0) for m in patterns.DATE_RE.finditer(text)],
            amounts=[m.group(0) for m in patterns.AMOUNT_RE.finditer(text)],
            names=[m.group(0) for m in patterns.NAME_RE.finditer(text)],
            addresses=[m.group(0) for m in patterns.ADDRESS_RE.finditer(text)],
            reference_numbers=[m.group(1) for m in patterns.REFERENCE_NUMBER_RE.finditer(text)],
        )

    # ------------------------------------------------------------------
    # Sections
    # ------------------------------------------------------------------

    def identify_sections(self, lines: list[str]) -> Sections:
        """Split non-empty lines into title, header, body and footer.

        Header and footer sizes are proportional to the line count, so short
        documents can end up with an empty header or an empty body.
        """
        sections = Sections()
        if not lines:
            return sections

        first = lines[0].removeprefix(patterns.HEADING_MARKER)
        if len(first) < patterns.TITLE_MAX_LENGTH and patterns.TITLE_RE.fullmatch(first):
            sections.title = first
            lines = lines[1:]

        count = len(lines)
        header_end = min(patterns.HEADER_MAX_LINES, math.floor(count * patterns.HEADER_FRACTION))
        footer_start = max(header_end, math.floor(count * patterns.FOOTER_FRACTION))

        sections.header = lines[:header_end]
        sections.body = lines[header_end:footer_start]
        sections.footer = lines[footer_start:]
        return sections

    # ------------------------------------------------------------------
    # Classification
    # ------------------------------------------------------------------

    def classify_document(self, text: str) -> DocumentType:
        lower = text.lower()
        for document_type, keywords in patterns.CLASSIFICATION_RULES:
            if any(keyword in lower for keyword in keywords):
                return document_type
        return DocumentType.OTHER

    # ------------------------------------------------------------------
    # Confidence
    # ------------------------------------------------------------------

    def calculate_confidence(self, text: str) -> float:
        confidence = patterns.BASE_CONFIDENCE

        for threshold in patterns.LENGTH_BONUS_THRESHOLDS:
            if len(text) > threshold:
                confidence += patterns.LENGTH_BONUS

        for pattern in patterns.CONFIDENCE_PATTERNS:
            if pattern.search(text):
                confidence += patterns.PATTERN_BONUS

        if len(text) < patterns.SHORT_TEXT_LENGTH:
            confidence -= patterns.SHORT_TEXT_PENALTY

        return round(min(max(confidence, 0.0), 1.0), 2)

    # ------------------------------------------------------------------
    # Metadata
    # ------------------------------------------------------------------

    def extract_metadata(self, text: str, lines: list[str]) -> TextMetadata:
        return TextMetadata(
            line_count=len(lines),
            word_count=len(text.split()),
            has_table=self.detect_table(text),
            has_signature=self.detect_signature(text),
            language=self.detect_language(text),
        )

    def detect_table(self, text: str) -> bool:
        table_lines = sum(
            1
            for line in text.split("\n")
            if len(patterns.TABLE_DETECT_SPLIT_RE.split(line)) >= patterns.TABLE_MIN_COLUMNS
        )
        return table_lines >= patterns.TABLE_DETECT_MIN_LINES

    def detect_signature(self, text: str) -> bool:
        lower = text.lower()
        return any(keyword in lower for keyword in patterns.SIGNATURE_KEYWORDS)

    def detect_language(self, text: str) -> str:
        words = text.lower().split()
        if not words:
            return "unknown"
        matches = sum(1 for word in words if word in patterns.ENGLISH_STOPWORDS)
        if matches / len(words) > patterns.ENGLISH_STOPWORD_RATIO:
            return "en"
        return "unknown"


def structure_text(raw_text: str) -> StructuredText:
    """Module-level shortcut for ``TextProcessor().process``."""
    return TextProcessor().process(raw_text)
