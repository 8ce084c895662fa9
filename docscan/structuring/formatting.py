"""Text cleanup and layout reflow.

Each function takes and returns plain text and is idempotent: applying it to
its own output changes nothing.
"""

from docscan.structuring import patterns


def clean_text(text: str) -> str:
    """Unify line endings and collapse redundant whitespace.

    Trailing whitespace is stripped per line, runs of 2+ empty lines become a
    single empty line, and runs of 2+ spaces/tabs become one space.
    """
    text = patterns.LINE_ENDING_RE.sub("\n", text)
    text = patterns.TRAILING_WHITESPACE_RE.sub("", text)
    text = patterns.BLANK_LINE_RUN_RE.sub("\n\n", text)
    text = patterns.HORIZONTAL_WHITESPACE_RUN_RE.sub(" ", text)
    return text.strip()


def is_heading(line: str) -> bool:
    return (
        patterns.HEADING_MIN_LENGTH <= len(line) <= patterns.HEADING_MAX_LENGTH
        and patterns.HEADING_RE.fullmatch(line) is not None
    )


def format_headings(text: str) -> str:
    """Prefix short all-caps lines with a markdown heading marker."""
    return "\n".join(
        f"{patterns.HEADING_MARKER}{line}" if is_heading(line) else line
        for line in text.split("\n")
    )


def format_bullets(text: str) -> str:
    """Bullet lines (``-``, ``*`` or ``•`` plus whitespace) already render as
    markdown list items and are kept verbatim."""
    return text


def is_table_header(line: str) -> bool:
    lower = line.lower()
    return all(keyword in lower for keyword in patterns.TABLE_HEADER_KEYWORDS)


def split_columns(line: str, expected: int = 0) -> list[str]:
    """Split a row on the tight separator, falling back to single spaces when
    that yields fewer columns than ``expected``."""
    stripped = line.strip()
    cols = _cells(patterns.TIGHT_COLUMN_SPLIT_RE.split(stripped))
    if expected > 0 and len(cols) < expected:
        cols = _cells(patterns.LOOSE_COLUMN_SPLIT_RE.split(stripped))
    return cols


def _cells(parts: list[str]) -> list[str]:
    return [part.strip() for part in parts if part.strip()]


class _TableBuffer:
    def __init__(self) -> None:
        self.rows: list[list[str]] = []
        self.expected_cols = 0

    @property
    def active(self) -> bool:
        return bool(self.rows)

    def open(self, header: list[str]) -> None:
        self.rows = [header]
        self.expected_cols = len(header)

    def accepts(self, cols: list[str]) -> bool:
        return (
            len(cols) >= patterns.TABLE_MIN_COLUMNS
            and abs(len(cols) - self.expected_cols) <= patterns.TABLE_COLUMN_TOLERANCE
        )

    def flush(self) -> list[str]:
        rows, expected = self.rows, self.expected_cols
        self.rows = []
        self.expected_cols = 0
        if len(rows) >= patterns.TABLE_MIN_ROWS and expected >= patterns.TABLE_MIN_COLUMNS:
            header, *body = rows
            lines = [_markdown_row(header), "|" + "|".join("---" for _ in header) + "|"]
            lines.extend(_markdown_row(row) for row in body)
            return lines
        return [" ".join(row) for row in rows]


def _markdown_row(cols: list[str]) -> str:
    return "| " + " | ".join(cols) + " |"


def format_tables(text: str) -> str:
    """Reflow keyword-headed column blocks into markdown tables.

    A line containing every table header keyword opens a region; following
    lines join it while they split into a compatible number of columns. A
    region becomes a table only with at least two rows and three columns,
    otherwise its rows are written back as plain lines.
    """
    result: list[str] = []
    table = _TableBuffer()

    for line in text.split("\n"):
        if is_table_header(line):
            if table.active:
                result.extend(table.flush())
            table.open(split_columns(line))
            continue
        if table.active:
            if patterns.TABLE_SEPARATOR_RE.match(line.strip()):
                continue
            cols = split_columns(line, table.expected_cols)
            if table.accepts(cols):
                table.rows.append(cols)
                continue
            result.extend(table.flush())
        result.append(line)

    if table.active:
        result.extend(table.flush())
    return "\n".join(result)
