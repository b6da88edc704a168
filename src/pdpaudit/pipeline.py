"""
Per-URL audit pipeline and batch fan-out.
"""

from __future__ import annotations

import asyncio
import time
from typing import List, Optional, Sequence

import structlog
from structlog.contextvars import bound_contextvars

from pdpaudit.crawler.http_client import HttpClient
from pdpaudit.extractor.manager import ExtractorManager
from pdpaudit.observability import histogram, increment
from pdpaudit.quality.auditor import AuditResult, AuditRow, Auditor, degraded_result
from pdpaudit.reference.resolver import ReferenceResolver

logger = structlog.get_logger(__name__)


class AuditPipeline:
    """
    Runs fetch -> extract -> optional reference merge -> audit for each URL.

    URLs in a batch run concurrently and never affect each other: any
    failure inside one URL's pipeline becomes a degraded row for that URL.
    """

    def __init__(
        self,
        http_client: HttpClient,
        extractor_manager: ExtractorManager,
        auditor: Auditor,
        resolver: Optional[ReferenceResolver] = None,
    ) -> None:
        self.http_client = http_client
        self.extractor_manager = extractor_manager
        self.auditor = auditor
        self.resolver = resolver

    async def _run(self, url: str) -> AuditResult:
        html = await self.http_client.fetch_html(url)
        record = await asyncio.to_thread(self.extractor_manager.extract_html, url, html)
        result = self.auditor.audit(record)

        if self.resolver is not None and not all(result.checks.values()):
            corrected = await self.resolver.resolve(record)
            if corrected is not None:
                result = self.auditor.apply_reference(result, self.auditor.audit(corrected))
        return result

    async def audit_url(self, url: str) -> AuditRow:
        """Audit one URL. Never raises."""
        start_time = time.time()
        with bound_contextvars(audit_url=url):
            try:
                result = await self._run(url)
            except Exception as e:
                logger.warning("Audit failed", error=str(e), error_type=type(e).__name__)
                increment("audits_total", labels={"outcome": "failed"})
                return AuditRow(url=url, audit=degraded_result(f"fetch/parse failed: {e}"))

            increment("audits_total", labels={"outcome": "passed" if result.passed else "flagged"})
            histogram("audit_score", result.score)
            logger.info(
                "Audit completed",
                score=result.score,
                passed=result.passed,
                duration=round(time.time() - start_time, 3),
            )
            return AuditRow(url=url, audit=result)

    async def audit_urls(self, urls: Sequence[str]) -> List[AuditRow]:
        """Audit URLs concurrently; rows come back in input order."""
        if not urls:
            return []
        rows = await asyncio.gather(*(self.audit_url(url) for url in urls))
        logger.info(
            "Batch audited",
            urls=len(urls),
            failed=sum(1 for row in rows if row.audit.error is not None),
        )
        return list(rows)
