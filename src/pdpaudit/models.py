"""
Product records produced by extraction.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Dict, List, Optional


@dataclass
class ExtractedProduct:
    """Product facts pulled from one PDP.

    Extractors return partial records with ``url=None``; the
    ``ExtractorManager`` stamps the URL on the canonical record.
    """

    url: Optional[str] = None
    title: Optional[str] = None
    about: Optional[str] = None
    bullets: List[str] = field(default_factory=list)
    specs: Dict[str, str] = field(default_factory=dict)
    images: List[str] = field(default_factory=list)
    price: Optional[str] = None

    def copy(self) -> ExtractedProduct:
        return copy.deepcopy(self)


@dataclass
class StructuredProduct:
    """Product facts from embedded schema.org JSON-LD. Never carries a URL."""

    title: Optional[str] = None
    description: Optional[str] = None
    bullets: List[str] = field(default_factory=list)
    specs: Dict[str, str] = field(default_factory=dict)
    images: List[str] = field(default_factory=list)
    price: Optional[str] = None
