"""
Whitespace, markup and entity cleanup shared by every extractor.
"""

from __future__ import annotations

import html
import re
from typing import Dict, List, Optional

_WHITESPACE_RE = re.compile(r"\s+")
_TAG_RE = re.compile(r"<[^>]*>")
# Stray list numbering ("1", "2.", "3)") that bullet markup leaks into text
_NUMERAL_ARTIFACT_RE = re.compile(r"^\d+([.)-])?$")
# Spec values that are only list markers ("3", "12.", "4)"), not plain numbers like "220"
_LIST_MARKER_VALUE_RE = re.compile(r"^(\d{1,2}|\d+[.)-])$")
_BULLET_SPLIT_RE = re.compile(r"<br\s*/?>|•|\n", re.IGNORECASE)
_ABSOLUTE_URL_RE = re.compile(r"^https?://", re.IGNORECASE)


def normalize_whitespace(value: Optional[str]) -> str:
    """Collapse whitespace runs to one space and trim. ``None`` becomes ``""``."""
    if not value:
        return ""
    return _WHITESPACE_RE.sub(" ", str(value)).strip()


def strip_tags(markup: Optional[str]) -> str:
    """Remove all tags, keeping text content."""
    return normalize_whitespace(_TAG_RE.sub("", markup or ""))


def decode_entities(text: Optional[str]) -> str:
    """Decode named and numeric HTML character references."""
    return html.unescape(text or "")


def clean_html_to_text(markup: Optional[str]) -> str:
    """Turn a rich-text fragment into plain text: strip, decode, normalize."""
    return normalize_whitespace(decode_entities(strip_tags(markup)))


def is_numeral_artifact(value: str) -> bool:
    return bool(_NUMERAL_ARTIFACT_RE.match(value))


def is_absolute_url(value: Optional[str]) -> bool:
    return bool(value) and bool(_ABSOLUTE_URL_RE.match(value or ""))


def push_unique(target: List[str], value: Optional[str]) -> bool:
    """Append the normalized value unless it is empty, already present or a numeral artifact.

    Returns:
        True if the value was appended.
    """
    cleaned = normalize_whitespace(value)
    if not cleaned or is_numeral_artifact(cleaned) or cleaned in target:
        return False
    target.append(cleaned)
    return True


def set_spec(
    specs: Dict[str, str], key: Optional[str], value: Optional[str], *, identifier: bool = False
) -> bool:
    """Record a spec pair if the key is new (first writer wins).

    Keys lose a trailing colon ("Brand:" -> "Brand"). Empty parts, numeral
    artifact keys and list-marker values are rejected. ``identifier`` values
    (SKU, MPN, GTIN) are kept even when they are all digits.
    """
    clean_key = normalize_whitespace(key)
    if clean_key.endswith(":"):
        clean_key = clean_key[:-1].rstrip()
    clean_value = normalize_whitespace(value)
    if not clean_key or not clean_value:
        return False
    if is_numeral_artifact(clean_key):
        return False
    if not identifier and _LIST_MARKER_VALUE_RE.match(clean_value):
        return False
    if clean_key in specs:
        return False
    specs[clean_key] = clean_value
    return True


def split_bullet_markup(markup: Optional[str]) -> List[str]:
    """Split rich text on line breaks and bullet glyphs into cleaned fragments."""
    if not markup:
        return []
    return [clean_html_to_text(chunk) for chunk in _BULLET_SPLIT_RE.split(markup)]


def unique_urls(urls: List[str], limit: Optional[int] = None) -> List[str]:
    """Absolute URLs only, first occurrence kept, optionally capped."""
    seen: List[str] = []
    for url in urls:
        candidate = normalize_whitespace(url)
        if is_absolute_url(candidate) and candidate not in seen:
            seen.append(candidate)
    return seen[:limit] if limit is not None else seen
