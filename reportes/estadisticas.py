"""
Estadísticas de compra por punto de venta activo

kgTotales, promedio por pedido, kg de la última compra y frecuencia de compra
calculados sobre las órdenes mayoristas (filtradas por createdAt) con el
mismo matching que la matriz. Sólo suman los productos que cuentan en el
total (PERRO, GATO, HUESOS CARNOSOS).
"""
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from typing import Dict, List, Optional, Sequence, Tuple
import logging

from config.settings import ORDER_TYPE_MAYORISTA
from core.diagnostics import Diagnosticos
from core.errors import NoMatchFound
from core.models import Orden, PuntoVenta
from db.repository import FuenteDatos
from matching.catalog_loader import CatalogIndex
from matching.product_matcher import ProductMatcher
from matching.quantity_calculator import calculate_item_quantity, should_count_in_total
from processors.ordenes_processor import OrdenesProcessor, convertir_punto_venta
from .redondeo import redondear

logger = logging.getLogger(__name__)

SEGUNDOS_POR_DIA = 60 * 60 * 24


def calcular_frecuencia(fechas: Sequence[datetime]) -> str:
    """
    Frecuencia de compra promedio entre el primer y el último pedido

    Ejemplos:
        [] → "Sin pedidos"
        [d] → "1 pedido (sin frecuencia)"
        [d, d] → "Pedidos el mismo día"
        [1/10, 15/10, 29/10] → "Cada 14 días"
    """
    if not fechas:
        return 'Sin pedidos'
    if len(fechas) == 1:
        return '1 pedido (sin frecuencia)'

    ordenadas = sorted(fechas)
    dias = (ordenadas[-1] - ordenadas[0]).total_seconds() / SEGUNDOS_POR_DIA
    promedio = int(redondear(dias / (len(ordenadas) - 1)))

    if promedio == 0:
        return 'Pedidos el mismo día'
    if promedio == 1:
        return 'Cada 1 día'
    return f"Cada {promedio} días"


class EstadisticasPuntosVenta:
    """
    Motor de estadísticas por punto de venta
    """

    def __init__(self,
                 fuente: FuenteDatos,
                 catalogo: CatalogIndex,
                 max_workers: int = 1,
                 debug: bool = False):
        self.fuente = fuente
        self.matcher = ProductMatcher(catalogo)
        self.catalogo = catalogo
        self.max_workers = max(1, int(max_workers or 1))
        self.debug = debug
        self._log_step = logger.info if debug else logger.debug
        self.processor = OrdenesProcessor(debug=debug)

    def generar(self,
                desde: Optional[datetime] = None,
                hasta: Optional[datetime] = None) -> Tuple[List[Dict], Diagnosticos]:
        """
        Returns:
            (stats ordenadas por kgTotales desc y nombre, diagnósticos)
        """
        puntos_venta = [convertir_punto_venta(doc) for doc in self.fuente.puntos_venta(solo_activos=True)]
        logger.info(f"Calculando estadísticas de {len(puntos_venta)} puntos de venta activos")

        if self.max_workers > 1 and len(puntos_venta) > 1:
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                resultados = list(executor.map(
                    lambda pv: self.procesar_punto_venta(pv, desde, hasta),
                    puntos_venta
                ))
        else:
            resultados = [self.procesar_punto_venta(pv, desde, hasta) for pv in puntos_venta]

        diagnosticos = Diagnosticos(catalogo=self.catalogo.resumen())
        stats = []
        for stat, diagnostico in resultados:
            stats.append(stat)
            diagnosticos.merge(diagnostico)

        stats.sort(key=lambda s: (-s['kgTotales'], s['nombre']))
        return stats, diagnosticos

    def procesar_punto_venta(self,
                             punto_venta: PuntoVenta,
                             desde: Optional[datetime],
                             hasta: Optional[datetime]) -> Tuple[Dict, Diagnosticos]:
        diagnosticos = Diagnosticos()
        docs = self.fuente.ordenes_punto_venta(punto_venta.id, desde, hasta, campo_fecha='createdAt')
        ordenes = [
            o for o in self.processor.process(docs, diagnosticos)
            if o.order_type == ORDER_TYPE_MAYORISTA and o.created_at is not None
        ]
        ordenes.sort(key=lambda o: (o.created_at, o.id))

        stat = self.calcular(punto_venta, ordenes, diagnosticos)
        self._log_step(f"  {punto_venta.nombre}: {stat['totalPedidos']} pedidos, {stat['kgTotales']} kg")
        return stat, diagnosticos

    def kilos_orden(self, orden: Orden, diagnosticos: Diagnosticos) -> float:
        """Kilos de una orden contando sólo productos que van al total"""
        kilos = 0.0
        for item in orden.items:
            try:
                producto = self.matcher.match(item).unwrap()
            except NoMatchFound as e:
                diagnosticos.registrar_sin_match(e, orden.punto_de_venta, orden.id)
                continue

            if should_count_in_total(producto):
                kilos += calculate_item_quantity(item, producto)
        return kilos

    def calcular(self,
                 punto_venta: PuntoVenta,
                 ordenes: List[Orden],
                 diagnosticos: Diagnosticos) -> Dict:
        """
        Stats de un punto de venta a partir de sus órdenes en orden cronológico
        """
        stat = {
            '_id': punto_venta.id,
            'nombre': punto_venta.nombre,
            'zona': punto_venta.zona,
            'telefono': punto_venta.telefono,
            'kgTotales': 0,
            'frecuenciaCompra': calcular_frecuencia([o.created_at for o in ordenes]),
            'promedioKgPorPedido': 0,
            'kgUltimaCompra': 0,
            'totalPedidos': len(ordenes)
        }

        if not ordenes:
            return stat

        kg_por_orden = [self.kilos_orden(orden, diagnosticos) for orden in ordenes]
        kg_totales = sum(kg_por_orden)

        stat.update({
            'kgTotales': int(redondear(kg_totales)),
            'promedioKgPorPedido': int(redondear(kg_totales / len(ordenes))),
            'kgUltimaCompra': int(redondear(kg_por_orden[-1])),
            'fechaPrimerPedido': ordenes[0].created_at,
            'fechaUltimoPedido': ordenes[-1].created_at
        })
        return stat
