"""
Audit rule engine.

Scores a canonical product record against six content checks and proposes a
corrected value for every field that fails. ``Auditor.audit`` is a pure
function of the record and the rule set.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from typing import Any, Dict, Generic, List, Optional, TypeVar

import structlog

from pdpaudit.config.config import AuditRulesConfig
from pdpaudit.models import ExtractedProduct
from pdpaudit.utils.normalize import normalize_whitespace

from .rules import AuditRules

logger = structlog.get_logger(__name__)

T = TypeVar("T")

FIELD_NAMES = ("title", "about", "bullets", "specs", "images", "price")
DEGRADED_REASON = "fetch/parse failed"

TITLE_TEMPLATE = "{brand} {model} Professional Grade Tool | {voltage} | {color}"
ABOUT_TEMPLATE = (
    "{brand} {model} is built for professional use with reliable performance. "
    "Includes {voltage} power and {color} finish."
)


@dataclass
class AuditField(Generic[T]):
    ok: bool
    current: T
    suggested: T
    reason: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ok": self.ok,
            "current": self.current,
            "suggested": self.suggested,
            "reason": self.reason,
        }


@dataclass
class ImagesAuditField:
    """Images report a count rather than the current list."""

    ok: bool
    current_count: int
    suggested: List[str]
    reason: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ok": self.ok,
            "currentCount": self.current_count,
            "suggested": self.suggested,
            "reason": self.reason,
        }


@dataclass
class AuditResult:
    passed: bool
    score: int
    title: AuditField[str]
    about: AuditField[str]
    bullets: AuditField[List[str]]
    specs: AuditField[Dict[str, str]]
    images: ImagesAuditField
    price: AuditField[Optional[str]]
    error: Optional[str] = None

    @property
    def checks(self) -> Dict[str, bool]:
        return {name: getattr(self, name).ok for name in FIELD_NAMES}

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"passed": self.passed, "score": self.score}
        if self.error is not None:
            data["error"] = self.error
        for name in FIELD_NAMES:
            data[name] = getattr(self, name).to_dict()
        return data


@dataclass
class AuditRow:
    url: str
    audit: AuditResult

    def to_dict(self) -> Dict[str, Any]:
        return {"url": self.url, "audit": self.audit.to_dict()}


def compute_score(checks: List[bool]) -> int:
    return round(100 * sum(checks) / len(checks))


def degraded_result(message: str) -> AuditResult:
    """Result for a URL whose page could not be fetched or parsed."""
    return AuditResult(
        passed=False,
        score=0,
        title=AuditField(False, "", "", DEGRADED_REASON),
        about=AuditField(False, "", "", DEGRADED_REASON),
        bullets=AuditField(False, [], [], DEGRADED_REASON),
        specs=AuditField(False, {}, {}, DEGRADED_REASON),
        images=ImagesAuditField(False, 0, [], DEGRADED_REASON),
        price=AuditField(False, None, None, DEGRADED_REASON),
        error=message,
    )


class Auditor:
    """Scores records and synthesizes suggestions for failing fields."""

    def __init__(self, rules: Optional[AuditRules] = None, config: Optional[AuditRulesConfig] = None) -> None:
        self.rules = rules or AuditRules(config)
        self.config = self.rules.config
        self.reasons = self.rules.reasons()

    def audit(self, record: ExtractedProduct) -> AuditResult:
        title = normalize_whitespace(record.title)
        about = normalize_whitespace(record.about)
        bullets = [b for b in (normalize_whitespace(b) for b in record.bullets) if b]
        specs = {normalize_whitespace(k): normalize_whitespace(v) for k, v in record.specs.items()}
        images = list(record.images)
        price = record.price or None

        title_ok = self.rules.title_ok(title, specs)
        about_ok = self.rules.about_ok(about)
        bullets_ok = self.rules.bullets_ok(bullets)
        specs_ok = self.rules.specs_ok(specs)
        images_ok = self.rules.images_ok(images)
        price_ok = self.rules.price_ok(price)

        score = compute_score([title_ok, about_ok, bullets_ok, specs_ok, images_ok, price_ok])
        result = AuditResult(
            passed=score >= self.config.pass_score,
            score=score,
            title=AuditField(
                title_ok, title, title if title_ok else self._suggest_title(specs), self.reasons["title"]
            ),
            about=AuditField(
                about_ok, about, about if about_ok else self._suggest_about(specs), self.reasons["about"]
            ),
            bullets=AuditField(
                bullets_ok,
                bullets,
                list(bullets) if bullets_ok else list(self.config.suggested_bullets),
                self.reasons["bullets"],
            ),
            specs=AuditField(
                specs_ok, specs, dict(specs) if specs_ok else self._suggest_specs(specs), self.reasons["specs"]
            ),
            images=ImagesAuditField(
                images_ok,
                len(images),
                list(images) if images_ok else self._suggest_images(images),
                self.reasons["images"],
            ),
            price=AuditField(price_ok, price, price, self.reasons["price"]),
        )

        logger.debug("Record audited", url=record.url, score=score, checks=result.checks)
        return result

    def apply_reference(self, original: AuditResult, corrected: AuditResult) -> AuditResult:
        """Take suggestions from ``corrected`` for the fields that failed on ``original``."""
        updates: Dict[str, Any] = {}
        for name in FIELD_NAMES:
            own = getattr(original, name)
            if not own.ok:
                updates[name] = dataclasses.replace(own, suggested=getattr(corrected, name).suggested)
        return dataclasses.replace(original, **updates)

    def _placeholders(self, specs: Dict[str, str]) -> Dict[str, str]:
        return {
            "brand": specs.get("Brand") or "Brand",
            "model": specs.get("Model") or "Model",
            "voltage": specs.get("Voltage") or "220-240V",
        }

    def _suggest_title(self, specs: Dict[str, str]) -> str:
        return TITLE_TEMPLATE.format(color=specs.get("Color") or "Color", **self._placeholders(specs))

    def _suggest_about(self, specs: Dict[str, str]) -> str:
        return ABOUT_TEMPLATE.format(color=specs.get("Color") or "color", **self._placeholders(specs))

    def _suggest_specs(self, specs: Dict[str, str]) -> Dict[str, str]:
        suggested = dict(specs)
        if not suggested.get("Warranty"):
            suggested["Warranty"] = self.config.default_warranty
        return suggested

    def _suggest_images(self, images: List[str]) -> List[str]:
        source = images or self.config.placeholder_images
        return list(source[: self.config.images_min])
