"""
Helpers for validating metric value changes during tests.

Provides context managers to ensure metrics are properly updated by the code under test.
"""

from contextlib import contextmanager


def _child(metric, labels):
    return metric.labels(**labels) if labels else metric


@contextmanager
def metric_delta(metric, expected_delta=1, **labels):
    """
    Context manager to validate counter value changes.

    Usage:
        with metric_delta(METRICS["audits_total"], outcome="failed"):
            # Code that should increment the labelled counter by 1
            pass
    """
    child = _child(metric, labels)
    if not hasattr(child, "_value"):
        raise ValueError(f"Metric {metric} doesn't have a _value attribute")
    initial_value = child._value.get()

    yield

    actual_delta = child._value.get() - initial_value
    if actual_delta != expected_delta:
        raise AssertionError(
            f"Expected metric to change by {expected_delta}, "
            f"but it changed by {actual_delta} "
            f"(from {initial_value} to {initial_value + actual_delta})"
        )


def get_histogram_count(histogram, **labels):
    """Get the current observation count for a histogram, optionally for one label set."""
    count = 0.0
    for metric in histogram.collect():
        for sample in metric.samples:
            if sample.name.endswith("_count") and all(sample.labels.get(k) == v for k, v in labels.items()):
                count += sample.value
    return count


@contextmanager
def histogram_observes(histogram, min_observations=1, **labels):
    """
    Context manager to validate histogram observations.

    Usage:
        with histogram_observes(METRICS["fetch_latency_seconds"]):
            # Code that should record at least one timing observation
            pass
    """
    initial_count = get_histogram_count(histogram, **labels)

    yield

    actual_observations = get_histogram_count(histogram, **labels) - initial_count
    if actual_observations < min_observations:
        raise AssertionError(
            f"Expected at least {min_observations} histogram observations, but got {actual_observations}"
        )
