"""
Selector-driven extractor for the known Magento-style storefront template.
"""

from __future__ import annotations

from typing import Dict, List

import structlog
from bs4 import BeautifulSoup

from pdpaudit.metadata.structured_data_parser import ProductSchemaParser, merge_structured_data
from pdpaudit.models import ExtractedProduct
from pdpaudit.utils.normalize import clean_html_to_text, push_unique, set_spec, split_bullet_markup

from .dom import collect_images, first_inner_html, first_text, inner_html_without_lists, table_specs, text_of
from .protocols import Extractor

logger = structlog.get_logger(__name__)


class StorefrontExtractor(Extractor):
    """Extractor tuned to the storefront's product page markup.

    Page values are merged with the page's schema.org Product data; the page
    wins wherever it yielded something.
    """

    name = "storefront"

    title_selectors = (
        ".product-name h1",
        ".page-title-wrapper .page-title span",
        "h1",
    )
    about_selectors = (
        ".product.attribute.description .value",
        "#description .value, #description",
    )
    overview_item_selector = ".product.attribute.overview .value li, .product.attribute.overview li"
    overview_value_selector = ".product.attribute.overview .value"
    feature_item_selector = ".key-features li, .highlights li"
    attribute_block_selector = ".product-info-main .product.attribute"
    additional_row_selector = ".additional-attributes-wrapper table tr, table.data.table.additional-attributes tr"
    gallery_image_selector = ".fotorama__stage__frame img, .gallery-placeholder img, .product.media img"
    price_selectors = (
        ".price-wrapper .price",
        ".product-info-main .price",
    )

    def __init__(self) -> None:
        self.schema_parser = ProductSchemaParser()

    def extract(self, soup: BeautifulSoup) -> ExtractedProduct:
        page = ExtractedProduct(
            title=first_text(soup, self.title_selectors) or None,
            about=clean_html_to_text(first_inner_html(soup, self.about_selectors)) or None,
            bullets=self._bullets(soup),
            specs=self._specs(soup),
            images=collect_images(soup.select(self.gallery_image_selector)),
            price=first_text(soup, self.price_selectors) or None,
        )
        structured = self.schema_parser.parse(soup)

        logger.debug(
            "Storefront page extracted",
            bullets=len(page.bullets),
            specs=len(page.specs),
            images=len(page.images),
            structured_specs=len(structured.specs),
        )
        return merge_structured_data(page, structured)

    def _bullets(self, soup: BeautifulSoup) -> List[str]:
        bullets: List[str] = []

        for li in soup.select(self.overview_item_selector):
            push_unique(bullets, text_of(li))

        # <br>-separated lines around the list; list text was taken item by item above
        overview = soup.select_one(self.overview_value_selector)
        for fragment in split_bullet_markup(inner_html_without_lists(overview)):
            push_unique(bullets, fragment)

        for li in soup.select(self.feature_item_selector):
            push_unique(bullets, text_of(li))

        return bullets

    def _specs(self, soup: BeautifulSoup) -> Dict[str, str]:
        specs: Dict[str, str] = {}

        for block in soup.select(self.attribute_block_selector):
            set_spec(specs, text_of(block.select_one(".type")), text_of(block.select_one(".value")))

        for row in soup.select(self.additional_row_selector):
            set_spec(specs, text_of(row.select_one("th, .col.label")), text_of(row.select_one("td, .col.data")))

        table_specs(soup, specs)
        return specs
