"""Módulo de matching de ítems contra el catálogo mayorista"""
from .catalog_loader import (
    CatalogLoader,
    CatalogIndex,
    generate_group_key,
    generate_canonical_name
)
from .product_matcher import ProductMatcher, Estrategia, ESTRATEGIAS, detect_section
from .quantity_calculator import calculate_item_quantity, should_count_in_total
from .sorting import sort_product_names, sort_catalog_products

__all__ = [
    'CatalogLoader',
    'CatalogIndex',
    'generate_group_key',
    'generate_canonical_name',
    'ProductMatcher',
    'Estrategia',
    'ESTRATEGIAS',
    'detect_section',
    'calculate_item_quantity',
    'should_count_in_total',
    'sort_product_names',
    'sort_catalog_products'
]
