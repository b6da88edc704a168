"""
Heuristic fallback extractor for arbitrary storefronts.
"""

from __future__ import annotations

import re
from typing import Dict, List, Optional

import structlog
from bs4 import BeautifulSoup

from pdpaudit.metadata.structured_data_parser import OpenGraphParser
from pdpaudit.models import ExtractedProduct
from pdpaudit.utils.normalize import (
    clean_html_to_text,
    is_absolute_url,
    normalize_whitespace,
    push_unique,
    set_spec,
    split_bullet_markup,
)

from .dom import collect_images, first_inner_html, inner_html, meta_content, table_specs, text_of
from .protocols import Extractor

logger = structlog.get_logger(__name__)

CURRENCY_TOKENS = ("AED", "USD", "SAR", "QAR", "OMR", "KWD", "BHD", "EGP")
_CODES = "|".join(CURRENCY_TOKENS)
_AMOUNT = r"\d(?:[\d.,]*\d)?"
# Currency before amount is tried first
PRICE_PATTERNS = (
    re.compile(rf"(?<![A-Za-z])(?:{_CODES}|\$)\s?{_AMOUNT}", re.IGNORECASE),
    re.compile(rf"(?<![\d.,]){_AMOUNT}\s?(?:{_CODES})\b", re.IGNORECASE),
)


def find_price(text: str) -> Optional[str]:
    """First currency+amount token in the text, or None."""
    for pattern in PRICE_PATTERNS:
        match = pattern.search(text)
        if match:
            return match.group(0)
    return None


class GenericExtractor(Extractor):
    """Selector and heuristic extractor used for every non-storefront host."""

    name = "generic"

    about_selectors = (
        "#description",
        ".product-description",
        ".about, .about-this-item",
    )
    bullet_groups = (
        ".features li, .key-features li, .highlights li, .about-this-item li",
        "#features li",
        "ul:has(li) li",
    )
    bullet_fallback_selector = (".about, .about-this-item, #description",)

    def __init__(self, image_cap: int = 12, about_min_length: int = 60) -> None:
        self.image_cap = image_cap
        self.about_min_length = about_min_length
        self.og_parser = OpenGraphParser()

    def extract(self, soup: BeautifulSoup) -> ExtractedProduct:
        og = self.og_parser.parse(soup)
        return ExtractedProduct(
            title=self._title(soup, og) or None,
            about=self._about(soup, og) or None,
            bullets=self._bullets(soup),
            specs=self._specs(soup),
            images=self._images(soup, og),
            price=self._price(soup),
        )

    def _title(self, soup: BeautifulSoup, og: Dict[str, str]) -> str:
        return text_of(soup.find("h1")) or og.get("title", "") or text_of(soup.find("title"))

    def _about(self, soup: BeautifulSoup, og: Dict[str, str]) -> str:
        candidates = [clean_html_to_text(inner_html(soup.select_one(selector))) for selector in self.about_selectors]
        candidates.append(clean_html_to_text(meta_content(soup, name="description")))
        candidates.append(clean_html_to_text(og.get("description")))

        for candidate in candidates:
            if len(candidate) > self.about_min_length:
                return candidate
        return next((candidate for candidate in candidates if candidate), "")

    def _bullets(self, soup: BeautifulSoup) -> List[str]:
        bullets: List[str] = []
        for selector in self.bullet_groups:
            for li in soup.select(selector):
                push_unique(bullets, text_of(li))
            if len(bullets) >= 3:
                return bullets

        for fragment in split_bullet_markup(first_inner_html(soup, self.bullet_fallback_selector)):
            push_unique(bullets, fragment)
        return bullets

    def _specs(self, soup: BeautifulSoup) -> Dict[str, str]:
        specs: Dict[str, str] = {}
        table_specs(soup, specs)
        for dl in soup.find_all("dl"):
            for dt in dl.find_all("dt"):
                dd = dt.find_next_sibling()
                if dd is None or dd.name != "dd":
                    continue
                set_spec(specs, text_of(dt), text_of(dd))
        return specs

    def _images(self, soup: BeautifulSoup, og: Dict[str, str]) -> List[str]:
        images: List[str] = []
        og_image = og.get("image", "")
        if is_absolute_url(og_image):
            images.append(og_image)
        for src in collect_images(soup.find_all("img")):
            if src not in images:
                images.append(src)
        return images[: self.image_cap]

    def _price(self, soup: BeautifulSoup) -> Optional[str]:
        body = soup.body or soup
        return find_price(normalize_whitespace(body.get_text(" ")))
