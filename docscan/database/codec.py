"""Decode-or-default for columns that storage may hand back encoded.

Array columns can arrive as native lists or as JSON strings, and the
structured payload as a dict, a JSON string, or garbage. Stores run every
row through these helpers once, so the rest of the code only ever sees
``list[str]`` and ``StructuredText | None``.
"""

import json
from typing import Any

from docscan.logging.logger import Log
from docscan.structuring.models import StructuredText


def decode_string_list(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except json.JSONDecodeError:
            return []
    if isinstance(value, (list, tuple)):
        return [str(item) for item in value if item is not None]
    return []


def decode_structured_text(value: Any) -> StructuredText | None:
    if value is None:
        return None
    if isinstance(value, StructuredText):
        return value
    if isinstance(value, (str, bytes)):
        try:
            value = json.loads(value)
        except ValueError:
            Log.warning("Discarding structured text that is not valid JSON")
            return None
    try:
        return StructuredText.from_dict(value)
    except (TypeError, ValueError) as exc:
        Log.warning(f"Discarding malformed structured text: {exc}")
        return None


def encode_structured_text(value: StructuredText | None) -> dict[str, Any] | None:
    return value.to_dict() if value is not None else None
