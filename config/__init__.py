"""Módulo de configuración_config"""
from .database import MongoConfig
from .settings import (
    SECCIONES,
    PRICE_TYPE_MAYORISTA,
    ORDER_TYPE_MAYORISTA,
    BUCKETS_CATEGORIA,
    CLIENT_TYPES
)

__all__ = [
    'MongoConfig',
    'SECCIONES',
    'PRICE_TYPE_MAYORISTA',
    'ORDER_TYPE_MAYORISTA',
    'BUCKETS_CATEGORIA',
    'CLIENT_TYPES'
]
