"""
Content-quality rule set built from ``AuditRulesConfig``.
"""

from __future__ import annotations

import re
from typing import Dict, List, Mapping, Optional

from pdpaudit.config.config import AuditRulesConfig


class AuditRules:
    """Brand/model recognition and the field thresholds used by the auditor."""

    def __init__(self, config: Optional[AuditRulesConfig] = None) -> None:
        self.config = config or AuditRulesConfig()
        tokens = [token for token in self.config.brand_tokens if token.strip()]
        self._brand_re = (
            re.compile("|".join(re.escape(token) for token in tokens), re.IGNORECASE) if tokens else None
        )
        self._model_re = re.compile(self.config.model_pattern)

    def has_brand(self, title: str, specs: Optional[Mapping[str, str]] = None) -> bool:
        if self._brand_re is not None and self._brand_re.search(title):
            return True
        brand = (specs or {}).get("Brand", "").strip()
        if not brand:
            return False
        # Whole words only: "Ace" must not match "Replacement"
        return re.search(rf"(?<!\w){re.escape(brand)}(?!\w)", title, re.IGNORECASE) is not None

    def has_model(self, title: str) -> bool:
        return self._model_re.search(title) is not None

    def title_ok(self, title: str, specs: Optional[Mapping[str, str]] = None) -> bool:
        return (
            self.has_brand(title, specs)
            and self.has_model(title)
            and self.config.title_min_length <= len(title) <= self.config.title_max_length
        )

    def about_ok(self, about: str) -> bool:
        return len(about) >= self.config.about_min_length

    def bullets_ok(self, bullets: List[str]) -> bool:
        return self.config.bullets_min <= len(bullets) <= self.config.bullets_max

    def present_key_specs(self, specs: Mapping[str, str]) -> List[str]:
        return [key for key in self.config.key_specs if specs.get(key)]

    def specs_ok(self, specs: Mapping[str, str]) -> bool:
        return len(self.present_key_specs(specs)) >= self.config.key_specs_required

    def images_ok(self, images: List[str]) -> bool:
        return len(images) >= self.config.images_min

    def price_ok(self, price: Optional[str]) -> bool:
        return bool(price)

    def reasons(self) -> Dict[str, str]:
        c = self.config
        return {
            "title": f"Title should include brand + model and be {c.title_min_length}-{c.title_max_length} characters.",
            "about": f"About/description should be descriptive (>= {c.about_min_length} characters).",
            "bullets": f"Provide {c.bullets_min}-{c.bullets_max} concise, benefit-led bullet points.",
            "specs": "Include key specs like " + ", ".join([*c.key_specs, "Warranty"]) + ".",
            "images": f"Provide at least {c.images_min} clear product images.",
            "price": "Ensure a visible price or clearly mark RFQ.",
        }
