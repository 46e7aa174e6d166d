"""
Value normalization applied to every extracted scalar.

Amounts are rounded half-up to cents; free text is trimmed, collapsed,
restricted to printable ASCII and capped in length.
"""

import math
import re

MAX_TEXT_LENGTH = 1000

_WHITESPACE_RE = re.compile(r"\s+")
_NON_PRINTABLE_RE = re.compile(r"[^\x20-\x7E]")


def normalize_currency(value) -> float:
    """Round to two decimal places; None, NaN and non-numeric input become 0.0."""
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        value = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(value):
        return 0.0
    return math.floor(value * 100 + 0.5) / 100


def parse_amount(raw: str | None) -> float | None:
    """
    Parse a captured money string such as "$ 1,751.58".

    Returns None when the capture is not a number so callers can treat it
    as "field not found" rather than as an error.
    """
    if not raw:
        return None
    cleaned = raw.replace("$", "").replace(",", "").strip()
    try:
        amount = float(cleaned)
    except ValueError:
        return None
    if not math.isfinite(amount):
        return None
    return normalize_currency(amount)


def sanitize_text(text) -> str:
    """
    Clean extracted text for storage.

    None and non-string input yield an empty string.
    """
    if not text or not isinstance(text, str):
        return ""

    text = _WHITESPACE_RE.sub(" ", text)
    text = _NON_PRINTABLE_RE.sub("", text)
    text = _WHITESPACE_RE.sub(" ", text).strip()
    return text[:MAX_TEXT_LENGTH].rstrip()


def optional_text(text) -> str | None:
    """sanitize_text for optional fields: empty results become None."""
    return sanitize_text(text) or None
