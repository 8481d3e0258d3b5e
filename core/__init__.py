"""Módulo de funciones compartidas_core"""
from .normalization import (
    normalize_product_name,
    strip_accents,
    normalize_section
)
from .weight import calculate_item_weight, extract_unit_multiplier
from .categories import categorize_product
from .errors import (
    ReportError,
    CatalogUnavailable,
    NoMatchFound,
    MalformedOrder,
    DatabaseError
)

__all__ = [
    'normalize_product_name',
    'strip_accents',
    'normalize_section',
    'calculate_item_weight',
    'extract_unit_multiplier',
    'categorize_product',
    'ReportError',
    'CatalogUnavailable',
    'NoMatchFound',
    'MalformedOrder',
    'DatabaseError'
]
