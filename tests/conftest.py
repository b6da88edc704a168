"""
Shared fixtures: sample product pages, configuration and audit components.
"""

from __future__ import annotations

import pytest

from pdpaudit.config import AuditRulesConfig, Config, ExtractionSettings
from pdpaudit.extractor.manager import ExtractorManager
from pdpaudit.models import ExtractedProduct
from pdpaudit.quality.auditor import Auditor
from tests.helpers.pages import GENERIC_HTML, GOOD_ABOUT, GOOD_TITLE, STOREFRONT_HTML


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests for individual components")
    config.addinivalue_line("markers", "integration: Integration tests across modules")


@pytest.fixture
def storefront_html() -> str:
    return STOREFRONT_HTML


@pytest.fixture
def generic_html() -> str:
    return GENERIC_HTML


@pytest.fixture
def config() -> Config:
    return Config()


@pytest.fixture
def extractor_manager() -> ExtractorManager:
    return ExtractorManager(ExtractionSettings())


@pytest.fixture
def auditor() -> Auditor:
    return Auditor(config=AuditRulesConfig())


@pytest.fixture
def good_record() -> ExtractedProduct:
    """A record that passes every audit check."""
    return ExtractedProduct(
        url="https://www.fepy.com/bosch-gsb-180",
        title=GOOD_TITLE,
        about=GOOD_ABOUT,
        bullets=["Brushless motor", "Two-speed gearbox", "LED work light"],
        specs={"Brand": "Bosch", "Model": "GSB-180", "Voltage": "18V"},
        images=[
            "https://cdn.fepy.com/1.jpg",
            "https://cdn.fepy.com/2.jpg",
            "https://cdn.fepy.com/3.jpg",
        ],
        price="AED 349.00",
    )
