"""
Tests for the heuristic generic extractor and price detection.
"""

import pytest

from pdpaudit.extractor.generic_extractor import GenericExtractor, find_price
from tests.helpers import GENERIC_HTML, make_soup


@pytest.fixture
def extractor():
    return GenericExtractor()


@pytest.mark.unit
class TestGenericExtractor:
    def test_full_page(self, extractor):
        product = extractor.extract(make_soup(GENERIC_HTML))

        assert product.url is None
        assert product.title == "Makita HR2470 Rotary Hammer"
        assert product.about == (
            "The HR2470 rotary hammer delivers 2.4 J of impact energy for drilling in concrete, steel & wood."
        )
        assert product.bullets == ["Three operating modes", "Torque limiting clutch", "Anti-vibration handle"]
        assert product.specs == {"Voltage": "220V", "Weight": "2.9 kg", "Color": "Teal", "Brand": "Makita"}
        assert product.images == [
            "https://shop.example.com/og.jpg",
            "https://shop.example.com/hr2470-1.jpg",
            "https://shop.example.com/hr2470-2.jpg",
        ]
        assert product.price == "AED 1,299.00"

    def test_title_falls_back_to_og_then_document_title(self, extractor):
        og_page = '<head><meta property="og:title" content="OG name"><title>Doc</title></head><body></body>'
        assert extractor.extract(make_soup(og_page)).title == "OG name"
        assert extractor.extract(make_soup("<head><title> Doc  title </title></head>")).title == "Doc title"

    def test_about_prefers_first_long_candidate(self, extractor):
        long_meta = "A detailed meta description that is comfortably longer than sixty characters."
        html = f'<head><meta name="description" content="{long_meta}"></head><body><div id="description">Short.</div></body>'
        assert extractor.extract(make_soup(html)).about == long_meta

    def test_about_falls_back_to_first_non_empty(self, extractor):
        html = '<head><meta name="description" content="Meta."></head><body><div class="about">Brief.</div></body>'
        assert extractor.extract(make_soup(html)).about == "Brief."

    def test_bullet_groups_accumulate_until_three(self, extractor):
        html = """
        <ul class="features"><li>Alpha feature</li></ul>
        <div id="features"><ul><li>Beta feature</li><li>Gamma feature</li></ul></div>
        <ul class="nav"><li>Home</li></ul>
        """
        assert extractor.extract(make_soup(html)).bullets == ["Alpha feature", "Beta feature", "Gamma feature"]

    def test_bullets_from_description_markup(self, extractor):
        html = '<div class="about-this-item">Solid steel body<br>Rubber grip<br>• Lifetime warranty</div>'
        assert extractor.extract(make_soup(html)).bullets == ["Solid steel body", "Rubber grip", "Lifetime warranty"]

    def test_definition_list_requires_dd_sibling(self, extractor):
        html = "<dl><dt>Orphan</dt><dt>Color:</dt><dd>Teal</dd></dl>"
        assert extractor.extract(make_soup(html)).specs == {"Color": "Teal"}

    def test_table_keeps_plain_numeric_values(self, extractor):
        html = (
            "<table><tr><td>Voltage</td><td>220</td></tr>"
            "<tr><td>2.</td><td>x</td></tr>"
            "<tr><td>Color</td><td>Red</td></tr></table>"
        )
        assert extractor.extract(make_soup(html)).specs == {"Voltage": "220", "Color": "Red"}

    def test_image_cap(self):
        imgs = "".join(f'<img src="https://img.example.com/{i}.jpg">' for i in range(20))
        product = GenericExtractor(image_cap=12).extract(make_soup(f"<body>{imgs}</body>"))
        assert len(product.images) == 12
        assert product.images[0] == "https://img.example.com/0.jpg"

    def test_no_price(self, extractor):
        assert extractor.extract(make_soup("<body><p>Call for quote</p></body>")).price is None


@pytest.mark.unit
class TestFindPrice:
    @pytest.mark.parametrize(
        "text,expected",
        [
            ("Now AED 1,299.00 only", "AED 1,299.00"),
            ("Price: $19.99.", "$19.99"),
            ("Only 25 AED today", "25 AED"),
            ("sar 40", "sar 40"),
            ("Costs 12.50 USD, was 15 USD", "12.50 USD"),
        ],
    )
    def test_detects_currency_amounts(self, text, expected):
        assert find_price(text) == expected

    def test_currency_before_amount_wins(self):
        assert find_price("Was 20 USD, now AED 10") == "AED 10"

    def test_no_currency(self):
        assert find_price("Model 2470, 800 W") is None
