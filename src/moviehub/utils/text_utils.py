"""Text processing utilities."""

import re
import unicodedata
from typing import List, Optional

_HTML_TAG_RE = re.compile(r"<[^>]*>")
_YEAR_TOKEN_RE = re.compile(r"\b(?:19|20)\d{2}\b")
_MISSING_VALUES = {"", "n/a", "none", "null"}


def strip_html_tags(text: Optional[str]) -> Optional[str]:
    """Remove HTML tags from a text fragment.

    Args:
        text: Text that may contain markup.

    Returns:
        Plain text, or None if nothing is left.
    """
    if not text:
        return None
    cleaned = _HTML_TAG_RE.sub("", text).strip()
    return cleaned or None


def extract_year(date_text: Optional[str]) -> Optional[int]:
    """Extract the year from a date string such as ``2021-10-22`` or ``2010–2014``.

    Args:
        date_text: Date or year string.

    Returns:
        Four digit year or None.
    """
    if not date_text:
        return None
    match = re.match(r"\s*(\d{4})", str(date_text))
    if not match:
        return None
    return int(match.group(1))


def find_year_token(text: str) -> Optional[int]:
    """Find the first 19xx/20xx year token in free text.

    Args:
        text: Free text query.

    Returns:
        Year mentioned in the text or None.
    """
    match = _YEAR_TOKEN_RE.search(text)
    return int(match.group(0)) if match else None


def is_missing(value: Optional[str]) -> bool:
    """Check whether an upstream string field carries no value (e.g. OMDb ``N/A``)."""
    return value is None or str(value).strip().lower() in _MISSING_VALUES


def parse_int(value: Optional[str]) -> Optional[int]:
    """Parse integers like ``1,234,567`` or ``148 min``.

    Args:
        value: Raw string value.

    Returns:
        Parsed integer or None.
    """
    if is_missing(value):
        return None
    digits = re.search(r"\d[\d,]*", str(value))
    if not digits:
        return None
    return int(digits.group(0).replace(",", ""))


def parse_float(value: Optional[str]) -> Optional[float]:
    """Parse a float, treating ``N/A`` and garbage as missing."""
    if is_missing(value):
        return None
    try:
        return float(str(value).strip())
    except ValueError:
        return None


def split_list(value: Optional[str]) -> List[str]:
    """Split a comma separated upstream field into clean items."""
    if is_missing(value):
        return []
    return [item.strip() for item in str(value).split(",") if item.strip()]


def collation_key(text: str) -> str:
    """Build a locale-insensitive sort key (accents folded, case folded).

    Args:
        text: Text to sort.

    Returns:
        Key suitable for alphabetical ordering.
    """
    decomposed = unicodedata.normalize("NFKD", text)
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return stripped.casefold()


def contains_word(haystack: str, needle: str) -> bool:
    """Check whether ``needle`` occurs in ``haystack`` on word boundaries."""
    if not needle:
        return False
    return re.search(rf"(?<!\w){re.escape(needle)}(?!\w)", haystack) is not None
