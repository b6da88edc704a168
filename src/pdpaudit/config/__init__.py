"""Configuration models and loaders."""

from .config import (
    AuditRulesConfig,
    Config,
    ExtractionSettings,
    FetchConfig,
    MonitoringConfig,
    ReferenceConfig,
    WebConfig,
    find_config_file,
)

__all__ = [
    "AuditRulesConfig",
    "Config",
    "ExtractionSettings",
    "FetchConfig",
    "MonitoringConfig",
    "ReferenceConfig",
    "WebConfig",
    "find_config_file",
]
