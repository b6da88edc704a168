"""
Small BeautifulSoup helpers shared by the storefront and generic extractors.
"""

from __future__ import annotations

import copy
from typing import Dict, Iterable, List, Optional

from bs4 import BeautifulSoup, Tag

from pdpaudit.utils.normalize import is_absolute_url, normalize_whitespace, set_spec

# Lazy-loading galleries park the real URL in one of these
IMAGE_SOURCE_ATTRS = ("src", "data-src", "data-lazy", "data-original")


def text_of(element: Optional[Tag]) -> str:
    if element is None:
        return ""
    return normalize_whitespace(element.get_text())


def inner_html(element: Optional[Tag]) -> str:
    if element is None:
        return ""
    return element.decode_contents()


def inner_html_without_lists(element: Optional[Tag]) -> str:
    """Inner markup with every ``ul``/``ol`` removed. The page itself is left untouched."""
    if element is None:
        return ""
    clone = copy.copy(element)
    for nested in clone.find_all(["ul", "ol"]):
        nested.decompose()
    return clone.decode_contents()


def first_text(soup: BeautifulSoup, selectors: Iterable[str]) -> str:
    """Text of the first selector (in priority order) whose first match is non-empty."""
    for selector in selectors:
        text = text_of(soup.select_one(selector))
        if text:
            return text
    return ""


def first_inner_html(soup: BeautifulSoup, selectors: Iterable[str]) -> str:
    for selector in selectors:
        markup = inner_html(soup.select_one(selector))
        if markup:
            return markup
    return ""


def meta_content(soup: BeautifulSoup, *, name: Optional[str] = None, prop: Optional[str] = None) -> str:
    attrs = {"name": name} if name else {"property": prop}
    tag = soup.find("meta", attrs=attrs)
    if tag is None:
        return ""
    return normalize_whitespace(tag.get("content"))


def image_source(img: Tag) -> Optional[str]:
    """First absolute URL among the image's source attributes."""
    for attr in IMAGE_SOURCE_ATTRS:
        value = normalize_whitespace(img.get(attr))
        if is_absolute_url(value):
            return value
    return None


def collect_images(elements: Iterable[Tag]) -> List[str]:
    images: List[str] = []
    for img in elements:
        src = image_source(img)
        if src and src not in images:
            images.append(src)
    return images


def table_specs(soup: BeautifulSoup, specs: Dict[str, str], selector: str = "table") -> None:
    """Read every row of the matching tables as label -> value (first two cells)."""
    for table in soup.select(selector):
        for row in table.find_all("tr"):
            cells = row.find_all(["th", "td"])
            if len(cells) < 2:
                continue
            set_spec(specs, text_of(cells[0]), text_of(cells[1]))
