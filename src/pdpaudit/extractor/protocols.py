"""
Protocols for pluggable PDP extraction strategies.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from bs4 import BeautifulSoup

from pdpaudit.models import ExtractedProduct


@runtime_checkable
class Extractor(Protocol):
    """Pluggable parsed-document-to-ExtractedProduct strategy."""

    name: str

    def extract(self, soup: BeautifulSoup) -> ExtractedProduct:
        """Extract product facts from a parsed page.

        Implementations must not touch the network or mutate ``soup``.
        The returned record is partial: ``url`` is left as ``None``.
        """
        ...
