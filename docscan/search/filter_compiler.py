"""Translate a :class:`SearchFilter` into a SQL condition or a Python predicate.

Both forms share one set of semantics:

- every supplied field is ANDed;
- ``query`` is a case-insensitive substring match against the title, the
  extracted text and the serialized structured payload;
- ``categories`` / ``tags`` match when the document has any of the values;
- ``date_from`` / ``date_to`` bound the upload date inclusively;
- ``document_type``, ``has_*`` and ``min_confidence`` only match documents
  that have structured text;
- results are ordered by upload date, newest first.
"""

import json
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from docscan.database.models import Document
from docscan.search.models import SearchFilter, to_naive_utc

DocumentPredicate = Callable[[Document], bool]

ENTITY_FLAGS: dict[str, str] = {
    "has_emails": "emails",
    "has_phones": "phones",
    "has_amounts": "amounts",
}

ORDER_BY_SQL = "ORDER BY upload_date DESC, id DESC"


@dataclass(frozen=True)
class CompiledQuery:
    """WHERE condition with ``%s`` placeholders and its parameters."""

    where: str
    params: list[Any] = field(default_factory=list)


def compile_sql(search: SearchFilter) -> CompiledQuery:
    clauses: list[str] = []
    params: list[Any] = []

    if search.query:
        needle = search.query.lower()
        clauses.append(
            "(POSITION(%s IN LOWER(title)) > 0"
            " OR POSITION(%s IN LOWER(COALESCE(extracted_text, ''))) > 0"
            " OR POSITION(%s IN LOWER(COALESCE(structured_text::text, ''))) > 0)"
        )
        params.extend([needle, needle, needle])

    if search.categories:
        clauses.append("categories && %s::text[]")
        params.append(list(search.categories))

    if search.tags:
        clauses.append("tags && %s::text[]")
        params.append(list(search.tags))

    if search.date_from is not None:
        clauses.append("upload_date >= %s")
        params.append(search.date_from)

    if search.date_to is not None:
        clauses.append("upload_date <= %s")
        params.append(search.date_to)

    if search.document_type is not None:
        clauses.append("structured_text->>'document_type' = %s")
        params.append(search.document_type.value)

    for flag, entity in ENTITY_FLAGS.items():
        if getattr(search, flag):
            path = f"structured_text->'entities'->'{entity}'"
            clauses.append(
                f"CASE WHEN jsonb_typeof({path}) = 'array'"
                f" THEN jsonb_array_length({path}) > 0 ELSE FALSE END"
            )

    if search.min_confidence is not None:
        clauses.append(
            "CASE WHEN jsonb_typeof(structured_text->'confidence') = 'number'"
            " THEN (structured_text->>'confidence')::float8 >= %s ELSE FALSE END"
        )
        params.append(search.min_confidence)

    where = " AND ".join(clauses) if clauses else "TRUE"
    return CompiledQuery(where=where, params=params)


def _serialized_payload(document: Document) -> str:
    if document.structured_text is None:
        return ""
    return json.dumps(document.structured_text.to_dict(), ensure_ascii=False)


def compile_predicate(search: SearchFilter) -> DocumentPredicate:
    checks: list[DocumentPredicate] = []

    if search.query:
        needle = search.query.lower()
        checks.append(
            lambda doc: needle in doc.title.lower()
            or needle in (doc.extracted_text or "").lower()
            or needle in _serialized_payload(doc).lower()
        )

    if search.categories:
        wanted_categories = set(search.categories)
        checks.append(lambda doc: not wanted_categories.isdisjoint(doc.categories))

    if search.tags:
        wanted_tags = set(search.tags)
        checks.append(lambda doc: not wanted_tags.isdisjoint(doc.tags))

    if search.date_from is not None:
        date_from = search.date_from
        checks.append(lambda doc: to_naive_utc(doc.upload_date) >= date_from)

    if search.date_to is not None:
        date_to = search.date_to
        checks.append(lambda doc: to_naive_utc(doc.upload_date) <= date_to)

    if search.requires_structured_text():
        checks.append(lambda doc: doc.structured_text is not None)

    if search.document_type is not None:
        document_type = search.document_type
        checks.append(lambda doc: doc.structured_text.document_type == document_type)

    for flag, entity in ENTITY_FLAGS.items():
        if getattr(search, flag):
            checks.append(
                lambda doc, entity=entity: bool(getattr(doc.structured_text.entities, entity))
            )

    if search.min_confidence is not None:
        min_confidence = search.min_confidence
        checks.append(lambda doc: doc.structured_text.confidence >= min_confidence)

    return lambda doc: all(check(doc) for check in checks)


def sort_newest_first(documents: list[Document]) -> list[Document]:
    return sorted(
        documents,
        key=lambda doc: (to_naive_utc(doc.upload_date), doc.id),
        reverse=True,
    )


def apply_filter(search: SearchFilter, documents: list[Document]) -> list[Document]:
    """Filter and order an in-memory collection of documents."""
    predicate = compile_predicate(search)
    return sort_newest_first([doc for doc in documents if predicate(doc)])
