"""
pdpaudit product extraction

Turns a product detail page into an ``ExtractedProduct``:

1. Storefront extractor: selector rules for the known storefront template
2. Generic extractor: heuristics for any other storefront
3. Structured data: schema.org Product JSON-LD merged into either result
4. ExtractorManager: picks the strategy per host and stamps the URL
"""

from pdpaudit.models import ExtractedProduct, StructuredProduct

from .generic_extractor import GenericExtractor
from .manager import ExtractorManager
from .protocols import Extractor
from .storefront_extractor import StorefrontExtractor

__all__ = [
    "ExtractedProduct",
    "Extractor",
    "ExtractorManager",
    "GenericExtractor",
    "StorefrontExtractor",
    "StructuredProduct",
]
