"""
End-to-end tests for the audit HTTP API.

The real pipeline runs against canned pages; only the network fetch is
replaced.
"""

from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from pdpaudit.config import Config
from pdpaudit.exceptions import FetchError
from pdpaudit.pipeline import AuditPipeline
from pdpaudit.web import create_app, get_pipeline
from tests.helpers import GENERIC_HTML, STOREFRONT_HTML

PAGES = {
    "https://www.fepy.com/bosch-gsb-180": STOREFRONT_HTML,
    "https://shop.example.com/hr2470": GENERIC_HTML,
}


async def fake_fetch(url):
    if url not in PAGES:
        raise FetchError(url, "HTTP 404", status=404)
    return PAGES[url]


@pytest.fixture
def client(extractor_manager, auditor):
    http_client = AsyncMock()
    http_client.fetch_html.side_effect = fake_fetch
    pipeline = AuditPipeline(http_client, extractor_manager, auditor)

    app = create_app(Config())
    app.dependency_overrides[get_pipeline] = lambda: pipeline
    with TestClient(app) as test_client:
        yield test_client


@pytest.mark.integration
class TestAuditEndpoint:
    def test_rows_follow_request_order(self, client):
        urls = [
            "https://shop.example.com/hr2470",
            "https://missing.example.com/p",
            "https://www.fepy.com/bosch-gsb-180",
        ]
        response = client.post("/api/audit", json={"urls": urls})

        assert response.status_code == 200
        rows = response.json()["rows"]
        assert [row["url"] for row in rows] == urls

        storefront = rows[2]["audit"]
        assert storefront["score"] == 50
        assert storefront["passed"] is False
        assert storefront["title"]["current"] == "Bosch GSB-180 Cordless Impact Drill"
        assert storefront["images"]["currentCount"] == 3
        assert "error" not in storefront

        failed = rows[1]["audit"]
        assert failed["score"] == 0
        assert failed["error"] == "fetch/parse failed: HTTP 404"
        assert failed["price"]["current"] is None
        assert failed["images"]["currentCount"] == 0

    def test_row_shape(self, client):
        response = client.post("/api/audit", json={"urls": ["https://shop.example.com/hr2470"]})
        audit = response.json()["rows"][0]["audit"]

        assert set(audit) == {"passed", "score", "title", "about", "bullets", "specs", "images", "price"}
        for name in ("title", "about", "bullets", "specs", "price"):
            assert set(audit[name]) == {"ok", "current", "suggested", "reason"}
        assert set(audit["images"]) == {"ok", "currentCount", "suggested", "reason"}
        assert audit["specs"]["current"]["Voltage"] == "220V"

    @pytest.mark.parametrize("body", [{}, {"urls": "https://shop.example.com/hr2470"}, {"urls": None}])
    def test_missing_or_invalid_urls_yield_no_rows(self, client, body):
        response = client.post("/api/audit", json=body)
        assert response.status_code == 200
        assert response.json() == {"rows": []}


@pytest.mark.integration
class TestServiceEndpoints:
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert data["is_running"] is True

    def test_metrics(self, client):
        client.post("/api/audit", json={"urls": ["https://missing.example.com/p"]})
        response = client.get("/metrics")
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/plain")
        assert "pdpaudit_audits_total" in response.text
