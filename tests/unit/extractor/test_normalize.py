"""
Tests for the text normalization helpers.
"""

import pytest

from pdpaudit.utils.normalize import (
    clean_html_to_text,
    decode_entities,
    is_absolute_url,
    normalize_whitespace,
    push_unique,
    set_spec,
    split_bullet_markup,
    strip_tags,
    unique_urls,
)


@pytest.mark.unit
class TestNormalizeWhitespace:
    def test_collapses_runs_and_trims(self):
        assert normalize_whitespace("  Bosch \n\t GSB-180   drill ") == "Bosch GSB-180 drill"

    @pytest.mark.parametrize("value", [None, "", "   \n "])
    def test_empty_input_yields_empty_string(self, value):
        assert normalize_whitespace(value) == ""

    @pytest.mark.parametrize("value", ["a  b", " x\n\ny ", "already clean", " nbsp  "])
    def test_idempotent(self, value):
        once = normalize_whitespace(value)
        assert normalize_whitespace(once) == once


@pytest.mark.unit
class TestMarkupCleanup:
    def test_strip_tags_keeps_text(self):
        assert strip_tags("<p>Heavy <b>duty</b></p>\n<span>drill</span>") == "Heavy duty drill"

    def test_decode_entities_named_and_numeric(self):
        assert decode_entities("Black &amp; Decker &quot;Pro&quot; &#8211; &#x2022;") == 'Black & Decker "Pro" – •'

    def test_clean_html_to_text(self):
        assert clean_html_to_text("<div>  Size:&nbsp;<em>10 mm</em> </div>") == "Size: 10 mm"

    @pytest.mark.parametrize(
        "markup",
        ["<p>One &amp; two</p>", "  plain   text ", "<ul><li>a</li> <li>b</li></ul>"],
    )
    def test_clean_html_to_text_idempotent(self, markup):
        once = clean_html_to_text(markup)
        assert clean_html_to_text(once) == once

    def test_split_bullet_markup(self):
        markup = "Fast charging<br>Long runtime<br/>• LED light\nBelt clip"
        assert split_bullet_markup(markup) == ["Fast charging", "Long runtime", "", "LED light", "Belt clip"]

    def test_split_bullet_markup_empty(self):
        assert split_bullet_markup(None) == []


@pytest.mark.unit
class TestPushUnique:
    def test_appends_normalized_value(self):
        bullets = []
        assert push_unique(bullets, "  Quick   release chuck ") is True
        assert bullets == ["Quick release chuck"]

    def test_rejects_duplicates_after_normalization(self):
        bullets = ["Quick release chuck"]
        assert push_unique(bullets, "Quick  release\nchuck") is False
        assert bullets == ["Quick release chuck"]

    @pytest.mark.parametrize("artifact", ["1", "2.", "3)", "12-", " 4. "])
    def test_rejects_numeral_artifacts(self, artifact):
        bullets = []
        assert push_unique(bullets, artifact) is False
        assert bullets == []

    def test_keeps_values_that_only_start_with_digits(self):
        bullets = []
        assert push_unique(bullets, "2 batteries included") is True

    def test_rejects_empty(self):
        bullets = []
        assert push_unique(bullets, "   ") is False
        assert push_unique(bullets, None) is False


@pytest.mark.unit
class TestSetSpec:
    def test_first_writer_wins(self):
        specs = {}
        assert set_spec(specs, "Voltage", "18V") is True
        assert set_spec(specs, "Voltage", "20V") is False
        assert specs == {"Voltage": "18V"}

    def test_strips_trailing_colon(self):
        specs = {}
        set_spec(specs, " Color: ", " Blue ")
        assert specs == {"Color": "Blue"}

    def test_keys_are_case_sensitive(self):
        specs = {}
        set_spec(specs, "color", "Blue")
        set_spec(specs, "Color", "Red")
        assert specs == {"color": "Blue", "Color": "Red"}

    @pytest.mark.parametrize("key,value", [("Voltage", "220"), ("Length", "100"), ("Size", "4 in")])
    def test_plain_numbers_are_real_values(self, key, value):
        specs = {}
        assert set_spec(specs, key, value) is True
        assert specs == {key: value}

    def test_identifier_values_may_be_list_marker_shaped(self):
        specs = {}
        assert set_spec(specs, "Model", "12", identifier=True) is True
        assert set_spec(specs, "Qty", "12") is False
        assert specs == {"Model": "12"}

    @pytest.mark.parametrize(
        "key,value",
        [("", "x"), ("Weight", ""), ("1.", "Spare"), ("Qty", "3"), ("Item", "12."), ("Step", "4)")],
    )
    def test_rejects_empty_and_numeral_parts(self, key, value):
        specs = {}
        assert set_spec(specs, key, value) is False
        assert specs == {}


@pytest.mark.unit
class TestUrls:
    @pytest.mark.parametrize(
        "value,expected",
        [
            ("https://cdn.example.com/a.jpg", True),
            ("HTTP://cdn.example.com/a.jpg", True),
            ("//cdn.example.com/a.jpg", False),
            ("/media/a.jpg", False),
            ("data:image/png;base64,AAAA", False),
            (None, False),
        ],
    )
    def test_is_absolute_url(self, value, expected):
        assert is_absolute_url(value) is expected

    def test_unique_urls_filters_dedupes_and_caps(self):
        urls = ["https://a/1.jpg", "/rel.jpg", "https://a/1.jpg", "https://a/2.jpg", "https://a/3.jpg"]
        assert unique_urls(urls) == ["https://a/1.jpg", "https://a/2.jpg", "https://a/3.jpg"]
        assert unique_urls(urls, 2) == ["https://a/1.jpg", "https://a/2.jpg"]
