"""
Configuration management for pdpaudit using Pydantic.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# --- Setup Logging ---
log = logging.getLogger(__name__)

# --- Nested Configuration Models ---


class FetchConfig(BaseModel):
    """Page fetch configuration."""

    user_agent: str = Field(
        default=(
            "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
            "(KHTML, like Gecko) Chrome/124.0 Safari/537.36"
        ),
        description="Browser-like User-Agent sent with every page request.",
    )
    accept: str = Field(default="text/html,application/xhtml+xml", description="Accept header.")
    accept_language: str = Field(default="en;q=0.9", description="Accept-Language header.")
    timeout: Optional[float] = Field(
        default=None,
        description="Total request timeout in seconds. None keeps the transport default.",
    )


class ExtractionSettings(BaseModel):
    """Extractor selection and tuning."""

    storefront_domains: List[str] = Field(
        default_factory=lambda: ["fepy.com"],
        description="Hosts (and their subdomains) served by the storefront extractor.",
    )
    generic_image_cap: int = Field(default=12, ge=1, description="Maximum images kept by the generic extractor.")
    about_min_length: int = Field(
        default=60,
        ge=0,
        description="A generic description candidate longer than this wins over earlier shorter ones.",
    )

    @field_validator("storefront_domains", mode="before")
    @classmethod
    def lowercase_domains(cls, v: Any) -> List[str]:
        if isinstance(v, str):
            v = [part for part in v.split(",")]
        return [str(domain).strip().lower().lstrip(".") for domain in v if str(domain).strip()]


class AuditRulesConfig(BaseModel):
    """Content-quality rule set. Brand tokens and the model pattern are extendable without code changes."""

    brand_tokens: List[str] = Field(
        default_factory=lambda: [
            "philips",
            "dewalt",
            "atlas",
            "bosch",
            "makita",
            "black & decker",
            "black+decker",
        ],
        description="Case-insensitive brand names recognised in titles.",
    )
    model_pattern: str = Field(
        default=r"(MD-\d+)|([A-Z0-9-]{3,})",
        description="Regex for model-like tokens (case-sensitive, uppercase-biased).",
    )
    title_min_length: int = 80
    title_max_length: int = 140
    about_min_length: int = 60
    bullets_min: int = 3
    bullets_max: int = 7
    key_specs: List[str] = Field(default_factory=lambda: ["Brand", "Model", "Voltage", "Color"])
    key_specs_required: int = 2
    images_min: int = 3
    pass_score: int = Field(default=80, ge=0, le=100)
    default_warranty: str = "1 Year"
    suggested_bullets: List[str] = Field(
        default_factory=lambda: [
            "High durability for daily use",
            "Quick installation",
            "Backed by manufacturer warranty",
        ]
    )
    placeholder_images: List[str] = Field(default_factory=lambda: ["Front view", "Side view", "Packaging"])


class ReferenceConfig(BaseModel):
    """External reference lookup (web search for a corroborating listing)."""

    enabled: bool = Field(default=False, description="Run the reference resolver after the first audit pass.")
    api_key: Optional[str] = Field(
        default_factory=lambda: os.environ.get("SERPAPI_API_KEY") or None,
        description="SerpAPI key. Missing key disables lookups without failing audits.",
    )
    endpoint: str = "https://serpapi.com/search"
    engine: str = "google"
    num_results: int = Field(default=5, ge=1, le=20)
    max_candidates: int = Field(default=3, ge=1)
    model_bonus: float = Field(default=0.2, ge=0.0)
    preferred_domains: List[str] = Field(
        default_factory=lambda: [
            "amazon.ae",
            "amazon.com",
            "noon.com",
            "aceuae.com",
            "bosch-professional.com",
            "dewalt.com",
            "makita.com",
            "philips.com",
            "blackanddecker.com",
        ],
        description="Brand and marketplace hosts tried before other search results.",
    )


class MonitoringConfig(BaseModel):
    """Configuration for logging and metrics."""

    log_level: str = Field(default="INFO", description="Logging level (e.g., DEBUG, INFO, WARNING).")
    log_file: str | None = Field(
        default=None,
        description="Path to log file. If None, logs to console.",
    )

    @field_validator("log_file", mode="before")
    @classmethod
    def create_parent_dir(cls, v: str | Path | None) -> str | None:
        if v is None:
            return None
        path = Path(v)
        path.parent.mkdir(parents=True, exist_ok=True)
        return str(path)


class WebConfig(BaseModel):
    host: str = Field(default="127.0.0.1", description="Host for the audit API.")
    port: int = Field(default=8000, description="Port for the audit API.")


# --- Main Configuration Class ---


class Config(BaseSettings):
    project_name: str = "pdpaudit"
    version: str = "0.1.0"
    fetch: FetchConfig = Field(default_factory=FetchConfig)
    extraction: ExtractionSettings = Field(default_factory=ExtractionSettings)
    audit: AuditRulesConfig = Field(default_factory=AuditRulesConfig)
    reference: ReferenceConfig = Field(default_factory=ReferenceConfig)
    monitoring: MonitoringConfig = Field(default_factory=MonitoringConfig)
    web: WebConfig = Field(default_factory=WebConfig)

    model_config = SettingsConfigDict(env_prefix="PDPAUDIT_", env_nested_delimiter="__", case_sensitive=False)

    @classmethod
    def from_yaml(cls, path: Path) -> Config:
        log.debug("Loading configuration from YAML file: %s", path)
        if not path.is_file():
            raise FileNotFoundError(f"Configuration file not found or is not a file: {path}")
        with open(path, "r", encoding="utf-8") as f:
            yaml_data: Dict[str, Any] | None = yaml.safe_load(f)
        if not yaml_data:
            log.warning("Configuration file is empty: %s. Using default settings.", path)
            return cls.model_validate({})
        return cls.model_validate(yaml_data)


def find_config_file() -> Path | None:
    """``config.yaml`` or ``config.yml`` in the working directory, if present."""
    current_dir = Path.cwd()
    for path in (current_dir / "config.yaml", current_dir / "config.yml"):
        if path.is_file():
            return path
    return None
