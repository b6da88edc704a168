"""
Defines Prometheus metrics for the audit pipeline.
"""

from __future__ import annotations

from typing import Any, Dict

from prometheus_client import REGISTRY as _PROM_REGISTRY
from prometheus_client import Counter as _OrigCounter
from prometheus_client import Histogram as _OrigHistogram
from prometheus_client import generate_latest

# ---------------------------------------------------------------------------
# Duplicate-safe Prometheus metric wrappers
# ---------------------------------------------------------------------------
# Re-importing this module (test reloads, several app instances in one
# process) must reuse the already registered collectors.


def _duplicate_safe_factory(metric_cls):
    """Return a factory that reuses an existing collector if already present."""

    def _factory(name: str, documentation: str, *args, **kwargs):  # type: ignore[override]
        existing = _PROM_REGISTRY._names_to_collectors.get(name)
        if existing is not None:
            return existing  # type: ignore[return-value]

        try:
            return metric_cls(name, documentation, *args, **kwargs)  # type: ignore[call-arg]
        except ValueError:
            # Registration lost the race, fall back to the now-existing collector.
            return _PROM_REGISTRY._names_to_collectors[name]  # type: ignore[return-value]

    return _factory


Counter = _duplicate_safe_factory(_OrigCounter)  # type: ignore[assignment]
Histogram = _duplicate_safe_factory(_OrigHistogram)  # type: ignore[assignment]


def _create_metrics() -> Dict[str, Any]:
    return {
        "audits_total": Counter(
            "pdpaudit_audits_total",
            "Audited URLs by outcome",
            ["outcome"],
        ),
        "audit_score": Histogram(
            "pdpaudit_audit_score",
            "Distribution of audit scores",
            buckets=(0, 17, 33, 50, 67, 83, 100),
        ),
        "fetch_latency_seconds": Histogram(
            "pdpaudit_fetch_latency_seconds",
            "Page fetch latency",
            buckets=(0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0),
        ),
        "extraction_seconds": Histogram(
            "pdpaudit_extraction_seconds",
            "Time spent in each page extractor",
            ["extractor"],
            buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0),
        ),
        "fetch_failures_total": Counter(
            "pdpaudit_fetch_failures_total",
            "Page fetches that failed",
        ),
        "reference_lookups_total": Counter(
            "pdpaudit_reference_lookups_total",
            "External reference lookups by outcome",
            ["outcome"],
        ),
    }


METRICS: Dict[str, Any] = _create_metrics()


def export_prometheus() -> bytes:
    """Export metrics in Prometheus text format."""
    return generate_latest()
