"""
ExtractorManager - chooses and blends extractor output into one canonical record.
"""

from __future__ import annotations

import time
from typing import Optional
from urllib.parse import urlparse

import structlog
from bs4 import BeautifulSoup

from pdpaudit.config.config import ExtractionSettings
from pdpaudit.metadata.structured_data_parser import ProductSchemaParser, merge_structured_data
from pdpaudit.models import ExtractedProduct
from pdpaudit.observability import histogram

from .generic_extractor import GenericExtractor
from .protocols import Extractor
from .storefront_extractor import StorefrontExtractor

logger = structlog.get_logger(__name__)

HTML_PARSER = "html.parser"


def backfill(primary: ExtractedProduct, fallback: ExtractedProduct) -> ExtractedProduct:
    """Fill fields the primary extractor left empty from the fallback, in place.

    Collections are taken whole, and only when the primary produced none.
    """
    if not primary.title:
        primary.title = fallback.title
    if not primary.about:
        primary.about = fallback.about
    if not primary.bullets:
        primary.bullets = list(fallback.bullets)
    if not primary.specs:
        primary.specs = dict(fallback.specs)
    if not primary.images:
        primary.images = list(fallback.images)
    if primary.price is None:
        primary.price = fallback.price
    return primary


class ExtractorManager:
    """
    Extraction coordinator.

    - Storefront hosts (exact or subdomain match) use the storefront
      extractor, backfilled by the generic extractor
    - Every other host uses the generic extractor merged with the page's
      structured data
    - The canonical record always carries the requested URL
    """

    def __init__(
        self,
        settings: ExtractionSettings,
        storefront: Optional[Extractor] = None,
        generic: Optional[GenericExtractor] = None,
    ) -> None:
        self.settings = settings
        self.logger = logger.bind(component="ExtractorManager")

        self.storefront = storefront or StorefrontExtractor()
        self.generic = generic or GenericExtractor(
            image_cap=settings.generic_image_cap,
            about_min_length=settings.about_min_length,
        )
        self.schema_parser = ProductSchemaParser()

    def is_storefront(self, url: str) -> bool:
        """True if the URL's host is, or is a subdomain of, a storefront domain."""
        host = (urlparse(url).hostname or "").lower()
        if not host:
            return False
        return any(host == domain or host.endswith(f".{domain}") for domain in self.settings.storefront_domains)

    def extract(self, url: str, soup: BeautifulSoup) -> ExtractedProduct:
        """Build the canonical record for a parsed page."""
        storefront = self.is_storefront(url)
        if storefront:
            record = self._run(self.storefront, soup)
            backfill(record, self._run(self.generic, soup))
        else:
            record = self._generic_with_structured_data(soup)

        record.url = url
        self.logger.info(
            "Extraction completed",
            url=url,
            extractor=self.storefront.name if storefront else self.generic.name,
            has_title=bool(record.title),
            bullets=len(record.bullets),
            specs=len(record.specs),
            images=len(record.images),
            has_price=record.price is not None,
        )
        return record

    def extract_generic(self, url: str, soup: BeautifulSoup) -> ExtractedProduct:
        """Generic path regardless of host; used for reference listings."""
        record = self._generic_with_structured_data(soup)
        record.url = url
        return record

    def extract_html(self, url: str, html: str, *, generic_only: bool = False) -> ExtractedProduct:
        soup = BeautifulSoup(html, HTML_PARSER)
        if generic_only:
            return self.extract_generic(url, soup)
        return self.extract(url, soup)

    def _generic_with_structured_data(self, soup: BeautifulSoup) -> ExtractedProduct:
        page = self._run(self.generic, soup)
        return merge_structured_data(page, self.schema_parser.parse(soup), image_cap=self.settings.generic_image_cap)

    def _run(self, extractor: Extractor, soup: BeautifulSoup) -> ExtractedProduct:
        start_time = time.perf_counter()
        try:
            return extractor.extract(soup)
        finally:
            histogram("extraction_seconds", time.perf_counter() - start_time, {"extractor": extractor.name})

