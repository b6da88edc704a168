"""
Dependency injection container wiring the audit components.
"""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from pathlib import Path
from typing import TYPE_CHECKING, Any, AsyncIterator, Callable, Dict, Generic, Optional, TypeVar

import structlog

from pdpaudit.config import Config, find_config_file

if TYPE_CHECKING:
    from pdpaudit.crawler.http_client import HttpClient
    from pdpaudit.pipeline import AuditPipeline

T = TypeVar("T")


class LazyInstance(Generic[T]):
    """Lazy-loaded instance with lifecycle management."""

    def __init__(self, factory: Callable[..., T], *args: Any, **kwargs: Any) -> None:
        self._factory = factory
        self._args = args
        self._kwargs = kwargs
        self._instance: Optional[T] = None
        self._initialized = False

    async def get(self) -> T:
        """Get or create the instance."""
        if not self._initialized:
            self._instance = self._factory(*self._args, **self._kwargs)
            if callable(getattr(self._instance, "initialize", None)):
                await self._instance.initialize()  # type: ignore
            self._initialized = True
        assert self._instance is not None
        return self._instance

    async def cleanup(self) -> None:
        """Clean up the instance."""
        if self._instance is not None and callable(getattr(self._instance, "close", None)):
            await self._instance.close()  # type: ignore
        self._instance = None
        self._initialized = False


class DependencyContainer:
    """
    Builds the HTTP client and audit pipeline from configuration.

    The HTTP client owns the only network resource, so it is the one
    instance with a lifecycle; everything else is created on top of it.
    """

    def __init__(self, config_path: Optional[Path] = None, config: Optional[Config] = None) -> None:
        self.config_path = config_path
        self.config = config
        self.logger = structlog.get_logger(self.__class__.__name__)

        self._instances: Dict[str, LazyInstance[Any]] = {}
        self._instances_lock = asyncio.Lock()
        self._pipeline: Optional[AuditPipeline] = None
        self.is_running = False

    async def initialize(self) -> None:
        """Load configuration (unless given) and register instances."""
        if self.config is None:
            self.load_config()
        self._create_instances()
        self.is_running = True
        self.logger.info(
            "Dependency container initialized",
            config_path=str(self.config_path) if self.config_path else "default",
            reference_enabled=self.config.reference.enabled if self.config else False,
        )

    def load_config(self) -> None:
        if self.config_path is None:
            self.config_path = find_config_file()
        if self.config_path and self.config_path.exists():
            self.config = Config.from_yaml(self.config_path)
        else:
            self.config = Config()

    def _create_instances(self) -> None:
        if self.config is None:
            raise RuntimeError("Configuration must be loaded before creating instances")

        from pdpaudit.crawler.http_client import HttpClient

        self._instances = {"http_client": LazyInstance(HttpClient, self.config.fetch)}
        self._pipeline = None

    async def get_http_client(self) -> HttpClient:
        """Get the shared HTTP client instance."""
        async with self._instances_lock:
            return await self._instances["http_client"].get()  # type: ignore

    async def get_pipeline(self) -> AuditPipeline:
        """Get the audit pipeline, building it on first use."""
        if self._pipeline is not None:
            return self._pipeline
        if self.config is None:
            raise RuntimeError("Container is not initialized")

        from pdpaudit.extractor.manager import ExtractorManager
        from pdpaudit.pipeline import AuditPipeline
        from pdpaudit.quality.auditor import Auditor
        from pdpaudit.quality.rules import AuditRules
        from pdpaudit.reference.resolver import ReferenceResolver

        http_client = await self.get_http_client()
        manager = ExtractorManager(self.config.extraction)
        resolver = (
            ReferenceResolver(self.config.reference, http_client, manager) if self.config.reference.enabled else None
        )
        self._pipeline = AuditPipeline(http_client, manager, Auditor(AuditRules(self.config.audit)), resolver)
        return self._pipeline

    @asynccontextmanager
    async def lifecycle(self) -> AsyncIterator[DependencyContainer]:
        """Context manager for proper lifecycle management."""
        try:
            await self.initialize()
            yield self
        finally:
            await self.shutdown()

    async def shutdown(self) -> None:
        """Close every managed instance."""
        if not self.is_running:
            return
        for name, instance in self._instances.items():
            try:
                await instance.cleanup()
            except Exception as e:
                self.logger.error(f"Error cleaning up {name}", error=str(e))
        self._pipeline = None
        self.is_running = False
        self.logger.info("Dependency container shutdown complete")

    def get_health_status(self) -> Dict[str, Any]:
        return {
            "is_running": self.is_running,
            "config_loaded": self.config is not None,
            "reference_enabled": bool(self.config and self.config.reference.enabled),
            "config_path": str(self.config_path) if self.config_path else None,
        }
