"""
Structured Data Parser - OpenGraph and Schema.org Product

Reads the machine-readable metadata a storefront embeds in its pages: the
OpenGraph ``og:*`` meta tags and schema.org ``Product`` JSON-LD blocks.
"""

from __future__ import annotations

import json
import re
from typing import Any, Dict, Iterable, List, Optional

import structlog
from bs4 import BeautifulSoup

from pdpaudit.models import ExtractedProduct, StructuredProduct
from pdpaudit.utils.normalize import (
    clean_html_to_text,
    is_absolute_url,
    normalize_whitespace,
    push_unique,
    set_spec,
    unique_urls,
)

logger = structlog.get_logger(__name__)

_PRODUCT_TYPE_RE = re.compile(r"product", re.IGNORECASE)
_DESCRIPTION_BULLET_RE = re.compile(r"[\n•]")
_DESCRIPTION_SPLIT_RE = re.compile(r"\n|•")

# schema.org identifier property -> spec label
IDENTIFIER_SPECS = (
    ("sku", "SKU"),
    ("mpn", "Model"),
    ("gtin13", "GTIN-13"),
    ("gtin14", "GTIN-14"),
    ("gtin8", "GTIN-8"),
)


class OpenGraphParser:
    """Parser for OpenGraph metadata."""

    @staticmethod
    def parse(soup: BeautifulSoup) -> Dict[str, str]:
        """Map ``og:<name>`` properties to their content, first tag wins."""
        og_data: Dict[str, str] = {}
        for tag in soup.find_all("meta", attrs={"property": re.compile(r"^og:")}):
            property_name = str(tag.get("property", ""))
            content = normalize_whitespace(tag.get("content"))
            if not content:
                continue
            clean_name = property_name[3:].replace(":", "_")
            og_data.setdefault(clean_name, content)
        return og_data


class SchemaOrgParser:
    """Parser for Schema.org JSON-LD."""

    @staticmethod
    def parse_json_ld(soup: BeautifulSoup) -> List[Dict[str, Any]]:
        """Return every JSON-LD item in the page.

        Top-level arrays and ``@graph`` containers are flattened. Blocks that
        are not valid JSON are skipped.
        """
        json_ld_data: List[Dict[str, Any]] = []

        for script in soup.find_all("script", attrs={"type": "application/ld+json"}):
            raw = script.string or script.get_text()
            if not raw or not raw.strip():
                continue
            try:
                data = json.loads(raw.strip())
            except json.JSONDecodeError as e:
                logger.debug("Skipping malformed JSON-LD block", error=str(e))
                continue
            json_ld_data.extend(_flatten_items(data))

        return json_ld_data


def _flatten_items(data: Any) -> Iterable[Dict[str, Any]]:
    items = data if isinstance(data, list) else [data]
    for item in items:
        if not isinstance(item, dict):
            continue
        graph = item.get("@graph")
        if isinstance(graph, list):
            yield from _flatten_items(graph)
        yield item


def _type_label(item: Dict[str, Any]) -> str:
    value = item.get("@type")
    if isinstance(value, list):
        return ",".join(str(part) for part in value)
    return str(value) if value else ""


def _as_text(value: Any) -> str:
    if value is None or isinstance(value, (dict, list)):
        return ""
    return normalize_whitespace(str(value))


class ProductSchemaParser:
    """Builds a ``StructuredProduct`` from schema.org ``Product`` items."""

    def __init__(self) -> None:
        self.schema_parser = SchemaOrgParser()

    def parse(self, soup: BeautifulSoup) -> StructuredProduct:
        out = StructuredProduct()
        images: List[str] = []

        for item in self.schema_parser.parse_json_ld(soup):
            if not _PRODUCT_TYPE_RE.search(_type_label(item)):
                continue
            self._merge_item(item, out, images)

        out.images = unique_urls(images)
        return out

    def _merge_item(self, item: Dict[str, Any], out: StructuredProduct, images: List[str]) -> None:
        name = _as_text(item.get("name"))
        if name and not out.title:
            out.title = name

        raw_description = item.get("description")
        if isinstance(raw_description, str) and raw_description.strip():
            if not out.description:
                out.description = clean_html_to_text(raw_description) or None
            # Descriptions sometimes carry the bullet list, separated by newlines or glyphs
            if _DESCRIPTION_BULLET_RE.search(raw_description):
                for part in _DESCRIPTION_SPLIT_RE.split(raw_description):
                    push_unique(out.bullets, clean_html_to_text(part))

        brand = item.get("brand")
        if isinstance(brand, list) and brand:
            brand = brand[0]
        brand_name = _as_text(brand.get("name")) if isinstance(brand, dict) else _as_text(brand)
        set_spec(out.specs, "Brand", brand_name)

        for prop, label in IDENTIFIER_SPECS:
            set_spec(out.specs, label, _as_text(item.get(prop)), identifier=True)
        set_spec(out.specs, "Model", _as_text(item.get("model")), identifier=True)

        if not out.price:
            out.price = _offer_price(item.get("offers"))

        images.extend(_image_urls(item.get("image")))


def _offer_price(offers: Any) -> Optional[str]:
    offer = offers[0] if isinstance(offers, list) and offers else offers
    if not isinstance(offer, dict):
        return None
    amount = _as_text(offer.get("price")) or _as_text(offer.get("lowPrice"))
    currency = _as_text(offer.get("priceCurrency"))
    if currency and amount:
        return f"{currency} {amount}"
    return amount or None


def _image_urls(value: Any) -> List[str]:
    values = value if isinstance(value, list) else [value]
    urls: List[str] = []
    for entry in values:
        if isinstance(entry, dict):
            entry = entry.get("url") or entry.get("contentUrl")
        if isinstance(entry, str) and is_absolute_url(entry.strip()):
            urls.append(entry.strip())
    return urls


def merge_structured_data(
    page: ExtractedProduct,
    structured: StructuredProduct,
    image_cap: Optional[int] = None,
) -> ExtractedProduct:
    """Combine page-extracted facts with structured data.

    Page values win; structured data fills gaps. Specs are overlaid (page
    wins per key), images are unioned page-first, bullets are topped up
    only while fewer than three were found on the page.
    """
    specs = dict(structured.specs)
    specs.update(page.specs)

    bullets = list(page.bullets)
    if len(bullets) < 3:
        for bullet in structured.bullets:
            push_unique(bullets, bullet)

    return ExtractedProduct(
        url=page.url,
        title=page.title or structured.title,
        about=page.about or structured.description,
        bullets=bullets,
        specs=specs,
        images=unique_urls(page.images + structured.images, image_cap),
        price=page.price or structured.price,
    )
