"""
Punto de entrada de los reportes

Cada función devuelve un envelope {"success": bool, ...}. Los errores se
capturan una sola vez acá y se convierten al mismo formato:
    {"success": False, "error": "..."}
"""
from datetime import datetime
from functools import wraps
from typing import Any, Dict, Optional
import logging

from config.settings import ORDER_TYPE_MAYORISTA
from core.diagnostics import Diagnosticos
from core.errors import CatalogUnavailable, DatabaseError
from core.fechas import fin_dia, inicio_dia, ventana_consulta
from db.repository import FuenteDatos
from matching.catalog_loader import CatalogLoader
from processors.ordenes_processor import OrdenesProcessor, convertir_punto_venta
from .estadisticas import EstadisticasPuntosVenta
from .matriz import MatrizProductos
from .mensual import ReportesMensuales, fecha_efectiva

logger = logging.getLogger(__name__)


def envelope(nombre: str):
    """Convierte excepciones del reporte en {"success": False, "error": ...}"""

    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs) -> Dict[str, Any]:
            try:
                return func(*args, **kwargs)
            except CatalogUnavailable as e:
                logger.error(f"{nombre}: {e}")
                return {'success': False, 'error': str(e)}
            except DatabaseError as e:
                logger.error(f"{nombre}: error de base de datos: {e}", exc_info=True)
                return {'success': False, 'error': f"Error de base de datos obteniendo {nombre}"}
            except ValueError as e:
                logger.error(f"{nombre}: parámetros inválidos: {e}")
                return {'success': False, 'error': str(e)}
            except Exception as e:
                logger.error(f"{nombre}: error inesperado: {e}", exc_info=True)
                return {'success': False, 'error': f"Error obteniendo {nombre}"}

        return wrapper

    return decorator


def _ventana_abierta(from_date: Any = None, to_date: Any = None):
    """Fechas opcionales → (inicio del día, fin del día); None si no vienen"""
    desde = inicio_dia(from_date) if from_date is not None else None
    hasta = fin_dia(to_date) if to_date is not None else None
    if from_date is not None and desde is None:
        raise ValueError(f"Fecha inválida: {from_date}")
    if to_date is not None and hasta is None:
        raise ValueError(f"Fecha inválida: {to_date}")
    return desde, hasta


@envelope('la matriz de productos')
def get_productos_matrix(fuente: FuenteDatos,
                         year: int,
                         month: int,
                         from_date: Any = None,
                         to_date: Any = None,
                         max_workers: int = 1,
                         debug: bool = False) -> Dict[str, Any]:
    """
    Matriz productos x puntos de venta

    Args:
        year, month: Período del catálogo (y de las órdenes si no hay fechas)
        from_date, to_date: Ventana explícita de deliveryDay (ambas o ninguna)

    Returns:
        {success, matrix, productNames, diagnosticos}
    """
    desde, hasta = ventana_consulta(year, month, from_date, to_date)
    catalogo = CatalogLoader(fuente, debug=debug).load(year, month)

    motor = MatrizProductos(fuente, catalogo, max_workers=max_workers, debug=debug)
    filas, diagnosticos = motor.generar(desde, hasta)

    return {
        'success': True,
        'matrix': [fila.to_dict() for fila in filas],
        'productNames': list(motor.product_names),
        'diagnosticos': diagnosticos.to_dict()
    }


@envelope('las estadísticas de puntos de venta')
def get_puntos_venta_stats(fuente: FuenteDatos,
                           from_date: Any = None,
                           to_date: Any = None,
                           max_workers: int = 1,
                           debug: bool = False) -> Dict[str, Any]:
    """
    Estadísticas de compra por punto de venta activo

    El catálogo es el del mes de to_date (o el mes actual), con fallback.

    Returns:
        {success, stats, diagnosticos}
    """
    desde, hasta = _ventana_abierta(from_date, to_date)
    referencia = hasta or datetime.now()
    catalogo = CatalogLoader(fuente, debug=debug).load(referencia.year, referencia.month)

    motor = EstadisticasPuntosVenta(fuente, catalogo, max_workers=max_workers, debug=debug)
    stats, diagnosticos = motor.generar(desde, hasta)

    return {
        'success': True,
        'stats': stats,
        'diagnosticos': diagnosticos.to_dict()
    }


@envelope('las estadísticas por tipo de entrega')
def get_delivery_type_stats_by_month(fuente: FuenteDatos,
                                     start_date: Any = None,
                                     end_date: Any = None,
                                     debug: bool = False) -> Dict[str, Any]:
    """
    Órdenes, facturación y kilos por mes (createdAt) y tipo de entrega

    Returns:
        {success, stats, diagnosticos}
    """
    desde, hasta = _ventana_abierta(start_date, end_date)
    diagnosticos = Diagnosticos()

    ordenes = OrdenesProcessor(debug=debug).process(fuente.ordenes_por_creacion(desde, hasta), diagnosticos)
    ordenes = [o for o in ordenes if _en_ventana(o.created_at, desde, hasta)]

    return {
        'success': True,
        'stats': ReportesMensuales(debug=debug).delivery_type_stats(ordenes),
        'diagnosticos': diagnosticos.to_dict()
    }


@envelope('las estadísticas de cantidades')
def get_quantity_stats_by_month(fuente: FuenteDatos,
                                start_date: Any = None,
                                end_date: Any = None,
                                debug: bool = False) -> Dict[str, Any]:
    """
    Kilos por sabor, mes (fecha efectiva) y tipo de cliente

    Returns:
        {success, stats: {minorista, sameDay, mayorista}, diagnosticos}
    """
    desde, hasta = _ventana_abierta(start_date, end_date)
    diagnosticos = Diagnosticos()

    ordenes = OrdenesProcessor(debug=debug).process(fuente.ordenes_por_fecha_efectiva(desde, hasta), diagnosticos)
    ordenes = [o for o in ordenes if _en_ventana(fecha_efectiva(o), desde, hasta)]

    return {
        'success': True,
        'stats': ReportesMensuales(debug=debug).quantity_stats(ordenes),
        'diagnosticos': diagnosticos.to_dict()
    }


@envelope('los buckets de sabor por punto de venta')
def get_category_buckets_by_punto_venta(fuente: FuenteDatos,
                                        year: int,
                                        month: int,
                                        from_date: Any = None,
                                        to_date: Any = None,
                                        debug: bool = False) -> Dict[str, Any]:
    """
    Kilos por sabor y mes de las órdenes mayoristas de cada punto de venta

    Returns:
        {success, puntosVenta: [{puntoVentaId, puntoVentaNombre, zona, meses}], diagnosticos}
    """
    desde, hasta = ventana_consulta(year, month, from_date, to_date)
    diagnosticos = Diagnosticos()
    processor = OrdenesProcessor(debug=debug)
    reportes = ReportesMensuales(debug=debug)

    puntos_venta = []
    for doc in fuente.puntos_venta():
        punto_venta = convertir_punto_venta(doc)
        docs = fuente.ordenes_punto_venta(punto_venta.id, desde, hasta, campo_fecha='deliveryDay')
        ordenes = [o for o in processor.process(docs, diagnosticos) if o.order_type == ORDER_TYPE_MAYORISTA]

        puntos_venta.append({
            'puntoVentaId': punto_venta.id,
            'puntoVentaNombre': punto_venta.nombre,
            'zona': punto_venta.zona,
            'meses': reportes.category_buckets(ordenes)
        })

    return {
        'success': True,
        'puntosVenta': puntos_venta,
        'diagnosticos': diagnosticos.to_dict()
    }


def _en_ventana(fecha: Optional[datetime], desde: Optional[datetime], hasta: Optional[datetime]) -> bool:
    if fecha is None:
        return False
    if desde is not None and fecha < desde:
        return False
    if hasta is not None and fecha > hasta:
        return False
    return True
