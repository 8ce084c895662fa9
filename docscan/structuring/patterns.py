"""Regexes, keyword lists and thresholds used by the text structuring engine.

These values are heuristics tuned on scanned office documents. Changing any
of them changes classification and entity output for stored documents, so
they live here as named constants rather than inline literals.
"""

import re

from docscan.structuring.models import DocumentType

# Normalization
LINE_ENDING_RE = re.compile(r"\r\n|\r")
TRAILING_WHITESPACE_RE = re.compile(r"[ \t]+$", re.MULTILINE)
BLANK_LINE_RUN_RE = re.compile(r"\n{3,}")
HORIZONTAL_WHITESPACE_RUN_RE = re.compile(r"[ \t]{2,}")

# Headings and bullets
HEADING_MIN_LENGTH = 3
HEADING_MAX_LENGTH = 50
HEADING_RE = re.compile(r"[A-Z][A-Z \t]+")
HEADING_MARKER = "### "
BULLET_RE = re.compile(r"^\s*[-*•]\s+")

# Table reflow
TABLE_HEADER_KEYWORDS: tuple[str, ...] = ("s.no", "content", "page no", "teacher")
TABLE_MIN_COLUMNS = 3
TABLE_MIN_ROWS = 2
TABLE_COLUMN_TOLERANCE = 1
TIGHT_COLUMN_SPLIT_RE = re.compile(r" {2,}|\t|\|")
LOOSE_COLUMN_SPLIT_RE = re.compile(r" +")
TABLE_SEPARATOR_RE = re.compile(r"^\|(?:\s*:?-{3,}:?\s*\|)+$")
TABLE_DETECT_SPLIT_RE = re.compile(r"\s{2,}|\t|\|")
TABLE_DETECT_MIN_LINES = 2

# Entities
EMAIL_RE = re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b")
PHONE_RE = re.compile(
    r"(?:\+?1[-.\s]?)?\(?[0-9]{3}\)?[-.\s]?[0-9]{3}[-.\s]?[0-9]{4}"
    r"|\+\d{1,3}[-.\s]?\d{3,4}[-.\s]?\d{3,4}[-.\s]?\d{3,4}"
)
DATE_RE = re.compile(
    r"\b(?:\d{1,2}[/\-]\d{1,2}[/\-]\d{2,4}"
    r"|\d{4}[/\-]\d{1,2}[/\-]\d{1,2}"
    r"|\b(?:Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Oct|Nov|Dec)[a-z]*\s+\d{1,2},?\s+\d{4})\b",
    re.IGNORECASE,
)
_AMOUNT_NUMBER = r"(?:\d{1,3}(?:,\d{3})+(?:\.\d{2})?|\d+(?:[.,]\d{2})?)"
AMOUNT_RE = re.compile(
    rf"(?:[$€£¥₹]\s*{_AMOUNT_NUMBER}"
    rf"|{_AMOUNT_NUMBER}\s*(?:USD|EUR|GBP|INR|dollars?|euros?|pounds?))",
    re.IGNORECASE,
)
REFERENCE_NUMBER_RE = re.compile(r"\b(?:ID|REF|NO|#)[\s:]*([A-Z0-9\-]+)\b", re.IGNORECASE)
NAME_RE = re.compile(
    r"\b(?:Mr\.?|Mrs\.?|Ms\.?|Dr\.?|Prof\.?)\s+[A-Z][a-z]+\s+[A-Z][a-z]+"
    r"|[A-Z][a-z]+\s+[A-Z][a-z]+(?:\s+[A-Z][a-z]+)?\b"
)
# Street number, street name, street type, optional locality words, state, zip.
# Confined to a single line; each locality word needs a separator in front of
# it so the repetition cannot split one word many ways.
ADDRESS_RE = re.compile(
    r"\d+[ \t]+[A-Za-z \t]+?"
    r"\b(?:Street|St|Avenue|Ave|Road|Rd|Boulevard|Blvd|Lane|Ln|Drive|Dr|Court|Ct|Place|Pl)\b\.?"
    r"(?:(?:[ \t]*,[ \t]*|[ \t]+)[A-Za-z]+)*"
    r",?[ \t]*[A-Z]{2}[ \t]*\d{5}(?:-\d{4})?",
    re.IGNORECASE,
)

# Sections
TITLE_MAX_LENGTH = 50
TITLE_RE = re.compile(r"[A-Z\s]+")
HEADER_MAX_LINES = 3
HEADER_FRACTION = 0.2
FOOTER_FRACTION = 0.8

# Classification, evaluated in order; the first rule with a hit wins.
CLASSIFICATION_RULES: tuple[tuple[DocumentType, tuple[str, ...]], ...] = (
    (DocumentType.INVOICE, ("invoice", "bill", "amount due", "total:")),
    (DocumentType.RECEIPT, ("receipt", "thank you", "purchase", "paid")),
    (DocumentType.CONTRACT, ("contract", "agreement", "terms and conditions", "signature")),
    (DocumentType.RESUME, ("resume", "cv", "experience", "education", "skills")),
    (DocumentType.ID, ("license", "passport", "id card", "identification")),
    (DocumentType.REPORT, ("report", "analysis", "summary", "findings")),
)

# Confidence
BASE_CONFIDENCE = 0.5
LENGTH_BONUS_THRESHOLDS: tuple[int, ...] = (100, 500)
LENGTH_BONUS = 0.1
PATTERN_BONUS = 0.1
CONFIDENCE_PATTERNS: tuple[re.Pattern[str], ...] = (EMAIL_RE, PHONE_RE, DATE_RE, AMOUNT_RE)
SHORT_TEXT_LENGTH = 50
SHORT_TEXT_PENALTY = 0.2

# Metadata
SIGNATURE_KEYWORDS: tuple[str, ...] = (
    "signature",
    "signed",
    "sign here",
    "authorized",
    "signatory",
)
ENGLISH_STOPWORDS: frozenset[str] = frozenset(
    {"the", "and", "is", "in", "to", "of", "a", "that", "it", "with"}
)
ENGLISH_STOPWORD_RATIO = 0.1
