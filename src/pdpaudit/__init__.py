"""
pdpaudit - product detail page extraction and content-quality auditing.
"""

from __future__ import annotations

__version__ = "0.1.0"

from .config import Config
from .container import DependencyContainer
from .pipeline import AuditPipeline

__all__ = ["__version__", "Config", "DependencyContainer", "AuditPipeline"]
