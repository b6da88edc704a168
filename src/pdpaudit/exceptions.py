"""
Exception hierarchy shared by the fetch, search and audit layers.
"""

from __future__ import annotations

from typing import Optional


class PdpAuditError(Exception):
    """Base class for all pdpaudit errors."""


class FetchError(PdpAuditError):
    """A page or API request failed (network error, non-2xx status, malformed URL)."""

    def __init__(self, url: str, message: str, status: Optional[int] = None) -> None:
        super().__init__(message)
        self.url = url
        self.status = status


class SearchError(PdpAuditError):
    """The external search call could not produce results."""
