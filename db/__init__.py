"""Módulo de acceso a base de datos_db"""
from .connection import DatabaseConnection
from .queries import PricesQuery, OrdersQuery, PuntosVentaQuery
from .repository import FuenteDatos, MongoRepository

__all__ = [
    'DatabaseConnection',
    'PricesQuery',
    'OrdersQuery',
    'PuntosVentaQuery',
    'FuenteDatos',
    'MongoRepository'
]
