"""Módulo de procesadores de datos_processors"""
from .ordenes_processor import OrdenesProcessor, convertir_punto_venta

__all__ = [
    'OrdenesProcessor',
    'convertir_punto_venta'
]
