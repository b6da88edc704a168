"""
Structured metadata extraction (OpenGraph, schema.org Product JSON-LD).
"""

from .structured_data_parser import (
    OpenGraphParser,
    ProductSchemaParser,
    SchemaOrgParser,
    merge_structured_data,
)

__all__ = ["OpenGraphParser", "ProductSchemaParser", "SchemaOrgParser", "merge_structured_data"]
