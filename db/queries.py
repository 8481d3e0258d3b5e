"""
Consultas MongoDB a las colecciones prices, orders y puntos_venta

Cada método retorna la especificación de la consulta (filtro, orden,
proyección); la ejecución queda en DatabaseConnection.
"""
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from config.settings import (
    PRICE_TYPE_MAYORISTA,
    ORDER_TYPE_MAYORISTA,
    CATALOG_FALLBACK_LIMIT,
    DESFASE_HORARIO_HORAS
)

_PRICE_PROJECTION = {
    'section': 1,
    'product': 1,
    'weight': 1,
    'month': 1,
    'year': 1,
    'effectiveDate': 1,
    'createdAt': 1
}


def _rango(desde: Optional[datetime], hasta: Optional[datetime]) -> Dict[str, datetime]:
    """Condición $gte/$lte (vacía si no hay fechas)"""
    cond: Dict[str, datetime] = {}
    if desde is not None:
        cond['$gte'] = desde
    if hasta is not None:
        cond['$lte'] = hasta
    return cond


class PricesQuery:
    """Consultas relacionadas con la lista de precios MAYORISTA"""

    @staticmethod
    def mayorista_por_periodo(year: int, month: int) -> Dict[str, Any]:
        """
        Precios MAYORISTA activos de un mes exacto

        Returns:
            dict con 'filter', 'projection'
        """
        return {
            'filter': {
                'priceType': PRICE_TYPE_MAYORISTA,
                'isActive': True,
                'year': year,
                'month': month
            },
            'projection': _PRICE_PROJECTION
        }

    @staticmethod
    def ultimo_mes_disponible(year: int) -> List[Dict[str, Any]]:
        """
        Pipeline de agregación: último mes con precios activos en el año
        """
        return [
            {'$match': {'priceType': PRICE_TYPE_MAYORISTA, 'isActive': True, 'year': year}},
            {'$group': {'_id': '$month'}},
            {'$sort': {'_id': -1}},
            {'$limit': 1}
        ]

    @staticmethod
    def mayorista_mas_recientes(limit: int = CATALOG_FALLBACK_LIMIT) -> Dict[str, Any]:
        """
        Últimos precios activos de cualquier año (fallback final)
        ⚠️  Limitado para no traer todo el histórico
        """
        return {
            'filter': {'priceType': PRICE_TYPE_MAYORISTA, 'isActive': True},
            'projection': _PRICE_PROJECTION,
            'sort': [('effectiveDate', -1), ('createdAt', -1)],
            'limit': limit
        }


class OrdersQuery:
    """Consultas relacionadas con órdenes"""

    @staticmethod
    def mayoristas_por_punto_venta(punto_venta_id: str,
                                   desde: Optional[datetime] = None,
                                   hasta: Optional[datetime] = None,
                                   campo_fecha: str = 'deliveryDay') -> Dict[str, Any]:
        """
        Órdenes mayoristas de un punto de venta dentro de la ventana

        Args:
            punto_venta_id: _id del punto de venta (string)
            desde/hasta: ventana inclusiva (None = sin límite)
            campo_fecha: 'deliveryDay' (matriz) o 'createdAt' (estadísticas)
        """
        filtro: Dict[str, Any] = {
            'punto_de_venta': punto_venta_id,
            'orderType': ORDER_TYPE_MAYORISTA
        }
        cond = _rango(desde, hasta)
        if cond:
            filtro[campo_fecha] = cond

        return {
            'filter': filtro,
            'sort': [(campo_fecha, 1), ('_id', 1)]
        }

    @staticmethod
    def por_creacion(desde: Optional[datetime] = None,
                     hasta: Optional[datetime] = None) -> Dict[str, Any]:
        """Todas las órdenes creadas dentro de la ventana (createdAt)"""
        cond = _rango(desde, hasta)
        filtro: Dict[str, Any] = {}
        if cond:
            filtro = {
                '$or': [
                    {'createdAt': cond},
                    {'createdAt': {k: v.isoformat() for k, v in cond.items()}}
                ]
            }
        return {'filter': filtro, 'sort': [('createdAt', 1), ('_id', 1)]}

    @staticmethod
    def por_rango_fechas(desde: Optional[datetime] = None,
                         hasta: Optional[datetime] = None) -> Dict[str, Any]:
        """
        Todas las órdenes cuya fecha efectiva puede caer en la ventana.

        La fecha efectiva es deliveryDay o, si falta, createdAt - 3h; la
        ventana sobre createdAt se amplía con ese desfase y el filtro exacto
        se aplica en memoria.
        """
        cond_delivery = _rango(desde, hasta)
        if not cond_delivery:
            return {'filter': {}, 'sort': [('createdAt', 1), ('_id', 1)]}

        desfase = timedelta(hours=DESFASE_HORARIO_HORAS)
        cond_created = _rango(
            desde + desfase if desde is not None else None,
            hasta + desfase if hasta is not None else None
        )
        return {
            'filter': {
                '$or': [
                    {'deliveryDay': cond_delivery},
                    {'createdAt': cond_created},
                    # createdAt guardado como string en pedidos viejos
                    {'createdAt': {k: v.isoformat() for k, v in cond_created.items()}}
                ]
            },
            'sort': [('createdAt', 1), ('_id', 1)]
        }


class PuntosVentaQuery:
    """Consultas de puntos de venta"""

    @staticmethod
    def todos() -> Dict[str, Any]:
        return {'filter': {}, 'sort': [('nombre', 1), ('_id', 1)]}

    @staticmethod
    def activos() -> Dict[str, Any]:
        return {'filter': {'activo': True}, 'sort': [('nombre', 1), ('_id', 1)]}
