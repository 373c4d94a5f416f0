"""Normalization helpers for identifiers and list-valued form fields."""

import json
import re
from datetime import date, datetime

_NON_ALNUM = re.compile(r"[^a-z0-9]+")
_YEAR_MONTH = re.compile(r"\d{4}-\d{2}")
_DATE = re.compile(r"\d{4}-\d{2}-\d{2}")
_TIMESTAMP = re.compile(
    r"\d{4}-\d{2}-\d{2}[T ]\d{2}:\d{2}(:\d{2}(\.\d{1,6})?)?([Zz]|[+-]\d{2}:\d{2})?"
)


def slugify(value: str) -> str:
    """Lowercase, collapse non-alphanumeric runs to '-', strip edge dashes.

    >>> slugify("  Cloud & DevOps ")
    'cloud-devops'
    """
    return _NON_ALNUM.sub("-", value.lower()).strip("-")


def _plain_split(text: str, separator: str | None) -> list[str]:
    parts = text.splitlines() if separator is None else text.split(separator)
    return [part.strip() for part in parts if part.strip()]


def _pieces(text: str, separator: str | None) -> list[str]:
    stripped = text.strip()
    if stripped.startswith("["):
        try:
            parsed = json.loads(stripped)
        except ValueError:
            parsed = None
        if isinstance(parsed, list):
            return [
                piece
                for element in parsed
                if element is not None
                for piece in _plain_split(str(element), separator)
            ]
    return _plain_split(text, separator)


def normalize_list(value, separator: str | None = None) -> list[str]:
    """
    Turn a list-ish field into an ordered list of trimmed, non-empty strings.

    Accepts None, a list or tuple (e.g. repeated multipart fields), a
    JSON-encoded array, or delimited text. separator=None splits on line
    breaks. Every element is split too, so a single form field holding "A\\nB"
    yields ["A", "B"]. Anything else raises ValueError.
    """
    if value is None:
        return []
    if isinstance(value, str):
        items = [value]
    elif isinstance(value, (list, tuple)):
        items = value
    else:
        raise ValueError(f"Expected text or a list of text, got {type(value).__name__}")
    result: list[str] = []
    for item in items:
        if item is None:
            continue
        if isinstance(item, (dict, list, tuple)):
            raise ValueError(f"List elements must be text, got {type(item).__name__}")
        result.extend(_pieces(str(item), separator))
    return result


def parse_partial_date(value) -> date | None:
    """Parse YYYY-MM-DD (or YYYY-MM, pinned to day 1) or a full ISO timestamp.

    Blank means no date. Anything else raises ValueError.
    """
    if isinstance(value, datetime):
        return value.date()
    if value is None or isinstance(value, date):
        return value
    text = str(value).strip()
    if not text:
        return None
    if _YEAR_MONTH.fullmatch(text):
        return date.fromisoformat(f"{text}-01")
    if _DATE.fullmatch(text):
        return date.fromisoformat(text)
    if _TIMESTAMP.fullmatch(text):
        # fromisoformat only learned the "Z" suffix in 3.11
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        return datetime.fromisoformat(text).date()
    raise ValueError(f"Invalid date: {text!r}")
