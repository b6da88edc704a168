"""HTTP API for the audit pipeline."""

from __future__ import annotations

from .main import create_app, get_pipeline, run_web_server

__all__ = ["create_app", "get_pipeline", "run_web_server"]
