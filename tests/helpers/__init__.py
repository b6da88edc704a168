"""Test helpers."""

from .metric_delta import get_histogram_count, histogram_observes, metric_delta
from .pages import GENERIC_HTML, GOOD_ABOUT, GOOD_TITLE, STOREFRONT_HTML, make_soup

__all__ = [
    "GENERIC_HTML",
    "GOOD_ABOUT",
    "GOOD_TITLE",
    "STOREFRONT_HTML",
    "get_histogram_count",
    "histogram_observes",
    "make_soup",
    "metric_delta",
]
