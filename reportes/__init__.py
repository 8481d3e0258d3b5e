"""Módulo de reportes mayoristas"""
from .matriz import MatrizProductos
from .estadisticas import EstadisticasPuntosVenta, calcular_frecuencia
from .mensual import ReportesMensuales, clasificar_tipo_cliente, fecha_efectiva
from .servicio import (
    get_productos_matrix,
    get_puntos_venta_stats,
    get_delivery_type_stats_by_month,
    get_quantity_stats_by_month,
    get_category_buckets_by_punto_venta
)

__all__ = [
    'MatrizProductos',
    'EstadisticasPuntosVenta',
    'calcular_frecuencia',
    'ReportesMensuales',
    'clasificar_tipo_cliente',
    'fecha_efectiva',
    'get_productos_matrix',
    'get_puntos_venta_stats',
    'get_delivery_type_stats_by_month',
    'get_quantity_stats_by_month',
    'get_category_buckets_by_punto_venta'
]
