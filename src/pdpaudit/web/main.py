"""
FastAPI application exposing the audit pipeline over HTTP.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, List, Optional

import structlog
from fastapi import Depends, FastAPI, Request
from fastapi.responses import Response
from prometheus_client import CONTENT_TYPE_LATEST
from pydantic import BaseModel, Field, field_validator

from pdpaudit import __version__
from pdpaudit.config import Config
from pdpaudit.container import DependencyContainer
from pdpaudit.observability import export_prometheus
from pdpaudit.pipeline import AuditPipeline

logger = structlog.get_logger(__name__)


class AuditRequest(BaseModel):
    urls: List[str] = Field(default_factory=list, description="Product page URLs to audit.")

    @field_validator("urls", mode="before")
    @classmethod
    def coerce_urls(cls, value: Any) -> List[str]:
        # Anything but a list means no URLs
        if not isinstance(value, list):
            return []
        return [str(item) for item in value]


class AuditResponse(BaseModel):
    rows: List[Dict[str, Any]]


async def get_pipeline(request: Request) -> AuditPipeline:
    container: DependencyContainer = request.app.state.container
    return await container.get_pipeline()


def create_app(config: Optional[Config] = None) -> FastAPI:
    """Build the API around a container for ``config`` (defaults apply when omitted)."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        container = DependencyContainer(config=config)
        app.state.container = container
        async with container.lifecycle():
            logger.info("Audit API started", version=__version__)
            yield
        logger.info("Audit API stopped")

    app = FastAPI(title="PDP Audit API", version=__version__, lifespan=lifespan)

    @app.post("/api/audit", response_model=AuditResponse)
    async def audit(body: AuditRequest, pipeline: AuditPipeline = Depends(get_pipeline)) -> Dict[str, Any]:
        """Audit every URL in the body; one row per URL, in request order."""
        rows = await pipeline.audit_urls(body.urls)
        return {"rows": [row.to_dict() for row in rows]}

    @app.get("/health")
    async def health(request: Request) -> Dict[str, Any]:
        container: DependencyContainer = request.app.state.container
        return {"status": "ok", "version": __version__, **container.get_health_status()}

    @app.get("/metrics")
    async def metrics() -> Response:
        """Endpoint for Prometheus to scrape."""
        return Response(export_prometheus(), media_type=CONTENT_TYPE_LATEST)

    return app


def run_web_server(config: Config) -> None:
    import uvicorn

    uvicorn.run(create_app(config), host=config.web.host, port=config.web.port, log_config=None)
