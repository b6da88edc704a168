"""
External reference resolution.

Searches the web for another listing of the same product, extracts the
closest match and merges its stronger fields into a corrected copy of the
canonical record. Everything here is best-effort: any failure leaves the
audit running on the canonical record alone.
"""

from __future__ import annotations

import asyncio
import re
from typing import List, Optional, Sequence, Set
from urllib.parse import urlparse

import structlog

from pdpaudit.config.config import ReferenceConfig
from pdpaudit.crawler.http_client import HttpClient
from pdpaudit.exceptions import FetchError, SearchError
from pdpaudit.extractor.manager import ExtractorManager
from pdpaudit.models import ExtractedProduct
from pdpaudit.observability import increment
from pdpaudit.utils.normalize import normalize_whitespace

from .search_client import SearchResult, SerpApiClient

logger = structlog.get_logger(__name__)

MODEL_TOKEN_RE = re.compile(r"[A-Z0-9-]{3,}")
_WORD_RE = re.compile(r"[a-z0-9]+")

# Merge thresholds
TITLE_SIMILARITY_CEILING = 0.6
TITLE_MIN_LENGTH = 40
ABOUT_MIN_GAIN = 30
BULLET_MIN_LENGTH = 5
MIN_BULLETS = 3
MAX_BULLETS = 7
MIN_IMAGES = 3
MAX_IMAGES = 6
SPEC_VALUE_MIN_LENGTH = 2


def model_token(record: ExtractedProduct) -> str:
    """First model-like run in the title, else the Model spec."""
    match = MODEL_TOKEN_RE.search(record.title or "")
    if match:
        return match.group(0)
    return normalize_whitespace(record.specs.get("Model"))


def _tokens(text: Optional[str]) -> Set[str]:
    return set(_WORD_RE.findall((text or "").lower()))


def title_similarity(a: Optional[str], b: Optional[str]) -> float:
    """Jaccard similarity of the lower-cased word sets. Two empty titles are identical."""
    left, right = _tokens(a), _tokens(b)
    if not left and not right:
        return 1.0
    union = left | right
    return len(left & right) / len(union)


def build_query(record: ExtractedProduct) -> str:
    title = normalize_whitespace(record.title)
    brand = normalize_whitespace(record.specs.get("Brand")) or (title.split(" ")[0] if title else "")
    model = model_token(record)
    if brand and model:
        return f"{brand} {model}"
    return title or (record.url or "")


def merge_reference(canonical: ExtractedProduct, reference: ExtractedProduct) -> ExtractedProduct:
    """Overlay the reference listing's stronger fields onto a copy of the canonical record."""
    merged = canonical.copy()

    ref_title = normalize_whitespace(reference.title)
    if title_similarity(canonical.title, ref_title) < TITLE_SIMILARITY_CEILING and len(ref_title) >= TITLE_MIN_LENGTH:
        merged.title = ref_title

    ref_about = normalize_whitespace(reference.about)
    if len(ref_about) - len(normalize_whitespace(canonical.about)) >= ABOUT_MIN_GAIN:
        merged.about = ref_about

    ref_bullets = [bullet for bullet in reference.bullets if len(bullet) > BULLET_MIN_LENGTH]
    if len(canonical.bullets) < MIN_BULLETS and len(ref_bullets) >= MIN_BULLETS:
        merged.bullets = ref_bullets[:MAX_BULLETS]

    for key, value in reference.specs.items():
        clean_key = key.strip()
        clean_value = normalize_whitespace(value)
        if clean_key and len(clean_value) >= SPEC_VALUE_MIN_LENGTH and clean_key not in merged.specs:
            merged.specs[clean_key] = clean_value

    if len(canonical.images) < MIN_IMAGES and len(reference.images) >= MIN_IMAGES:
        merged.images = list(reference.images[:MAX_IMAGES])

    if not canonical.price:
        merged.price = reference.price or canonical.price

    return merged


class ReferenceResolver:
    """Finds and merges a corroborating listing for a canonical record."""

    def __init__(
        self,
        config: ReferenceConfig,
        http_client: HttpClient,
        extractor_manager: ExtractorManager,
        search_client: Optional[SerpApiClient] = None,
    ) -> None:
        self.config = config
        self.http_client = http_client
        self.extractor_manager = extractor_manager
        self.search_client = search_client or SerpApiClient(config, http_client)
        self.logger = logger.bind(component="ReferenceResolver")

    def _is_preferred(self, link: str) -> bool:
        host = (urlparse(link).hostname or "").lower()
        return any(host == domain or host.endswith(f".{domain}") for domain in self.config.preferred_domains)

    def rank_results(self, results: Sequence[SearchResult]) -> List[SearchResult]:
        """Known brand and marketplace hosts first; order otherwise unchanged."""
        return sorted(results, key=lambda result: 0 if self._is_preferred(result.link) else 1)

    def select_best_match(
        self, record: ExtractedProduct, candidates: Sequence[ExtractedProduct]
    ) -> Optional[ExtractedProduct]:
        token = model_token(record).lower()
        best: Optional[ExtractedProduct] = None
        best_score = float("-inf")
        for candidate in candidates:
            score = title_similarity(candidate.title, record.title)
            if token and token in (candidate.title or "").lower():
                score += self.config.model_bonus
            if score > best_score:
                best, best_score = candidate, score
        return best

    async def _extract_candidate(self, link: str) -> ExtractedProduct:
        html = await self.http_client.fetch_html(link)
        return await asyncio.to_thread(self.extractor_manager.extract_html, link, html, generic_only=True)

    async def resolve(self, record: ExtractedProduct) -> Optional[ExtractedProduct]:
        """Corrected copy of ``record``, or None when no reference could be used."""
        query = build_query(record)
        try:
            results = await self.search_client.search(query, self.config.num_results)
        except SearchError as e:
            increment("reference_lookups_total", labels={"outcome": "search_failed"})
            self.logger.info("Reference search unavailable", query=query, error=str(e))
            return None

        candidates: List[ExtractedProduct] = []
        for result in self.rank_results(results)[: self.config.max_candidates]:
            try:
                candidates.append(await self._extract_candidate(result.link))
            except FetchError as e:
                self.logger.debug("Reference candidate skipped", link=result.link, error=str(e))
            except Exception as e:
                self.logger.warning(
                    "Reference candidate extraction failed",
                    link=result.link,
                    error=str(e),
                    error_type=type(e).__name__,
                )

        best = self.select_best_match(record, candidates)
        if best is None:
            increment("reference_lookups_total", labels={"outcome": "no_candidates"})
            self.logger.info("No usable reference listing", query=query, results=len(results))
            return None

        increment("reference_lookups_total", labels={"outcome": "matched"})
        self.logger.info(
            "Reference listing matched",
            query=query,
            reference_url=best.url,
            similarity=round(title_similarity(best.title, record.title), 3),
        )
        return merge_reference(record, best)
