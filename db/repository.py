"""
Fuente de datos de los reportes

Los motores de agregación dependen sólo del protocolo FuenteDatos; la
implementación Mongo ejecuta las consultas de db.queries.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional, Protocol

from config.settings import (
    COLLECTION_PRICES,
    COLLECTION_ORDERS,
    COLLECTION_PUNTOS_VENTA,
    CATALOG_FALLBACK_LIMIT
)
from .connection import DatabaseConnection
from .queries import PricesQuery, OrdersQuery, PuntosVentaQuery


Documento = Dict[str, Any]


class FuenteDatos(Protocol):
    """Operaciones de lectura que necesitan los reportes"""

    def precios_mayoristas(self, year: int, month: int) -> List[Documento]:
        ...

    def ultimo_mes_disponible(self, year: int) -> Optional[int]:
        ...

    def precios_mayoristas_recientes(self, limit: int = CATALOG_FALLBACK_LIMIT) -> List[Documento]:
        ...

    def puntos_venta(self, solo_activos: bool = False) -> List[Documento]:
        ...

    def ordenes_punto_venta(self,
                            punto_venta_id: str,
                            desde: Optional[datetime] = None,
                            hasta: Optional[datetime] = None,
                            campo_fecha: str = 'deliveryDay') -> List[Documento]:
        ...

    def ordenes_por_creacion(self,
                             desde: Optional[datetime] = None,
                             hasta: Optional[datetime] = None) -> List[Documento]:
        ...

    def ordenes_por_fecha_efectiva(self,
                                   desde: Optional[datetime] = None,
                                   hasta: Optional[datetime] = None) -> List[Documento]:
        ...


class MongoRepository:
    """FuenteDatos sobre una DatabaseConnection"""

    def __init__(self, connection: DatabaseConnection):
        self.connection = connection

    def precios_mayoristas(self, year: int, month: int) -> List[Documento]:
        return self.connection.find(COLLECTION_PRICES, PricesQuery.mayorista_por_periodo(year, month))

    def ultimo_mes_disponible(self, year: int) -> Optional[int]:
        result = self.connection.aggregate(COLLECTION_PRICES, PricesQuery.ultimo_mes_disponible(year))
        if result and result[0].get('_id'):
            return int(result[0]['_id'])
        return None

    def precios_mayoristas_recientes(self, limit: int = CATALOG_FALLBACK_LIMIT) -> List[Documento]:
        return self.connection.find(COLLECTION_PRICES, PricesQuery.mayorista_mas_recientes(limit))

    def puntos_venta(self, solo_activos: bool = False) -> List[Documento]:
        query = PuntosVentaQuery.activos() if solo_activos else PuntosVentaQuery.todos()
        return self.connection.find(COLLECTION_PUNTOS_VENTA, query)

    def ordenes_punto_venta(self,
                            punto_venta_id: str,
                            desde: Optional[datetime] = None,
                            hasta: Optional[datetime] = None,
                            campo_fecha: str = 'deliveryDay') -> List[Documento]:
        query = OrdersQuery.mayoristas_por_punto_venta(punto_venta_id, desde, hasta, campo_fecha)
        return self.connection.find(COLLECTION_ORDERS, query)

    def ordenes_por_creacion(self,
                             desde: Optional[datetime] = None,
                             hasta: Optional[datetime] = None) -> List[Documento]:
        return self.connection.find(COLLECTION_ORDERS, OrdersQuery.por_creacion(desde, hasta))

    def ordenes_por_fecha_efectiva(self,
                                   desde: Optional[datetime] = None,
                                   hasta: Optional[datetime] = None) -> List[Documento]:
        return self.connection.find(COLLECTION_ORDERS, OrdersQuery.por_rango_fechas(desde, hasta))
