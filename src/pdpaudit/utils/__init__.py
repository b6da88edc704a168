"""Utility modules for pdpaudit."""

from .normalize import (
    clean_html_to_text,
    decode_entities,
    normalize_whitespace,
    push_unique,
    set_spec,
    strip_tags,
)

__all__ = [
    "clean_html_to_text",
    "decode_entities",
    "normalize_whitespace",
    "push_unique",
    "set_spec",
    "strip_tags",
]
