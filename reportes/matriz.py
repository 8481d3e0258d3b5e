"""
Matriz de productos mayoristas por punto de venta

Para cada punto de venta:
1. Órdenes mayoristas con deliveryDay dentro de la ventana
2. Cada ítem → ProductMatcher → calculate_item_quantity
3. Acumulación por nombre canónico (todas las columnas arrancan en 0)
4. totalKilos sólo con productos que cuentan (PERRO, GATO, HUESOS CARNOSOS)

Los puntos de venta no comparten estado mutable: cada fold tiene su propio
Diagnosticos y pueden procesarse en paralelo (max_workers > 1).
"""
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Tuple
import logging

from config.settings import ORDER_TYPE_MAYORISTA
from core.diagnostics import Diagnosticos
from core.errors import NoMatchFound
from core.models import Orden, PointOfSaleAggregate, PuntoVenta
from db.repository import FuenteDatos
from matching.catalog_loader import CatalogIndex
from matching.product_matcher import ProductMatcher
from matching.quantity_calculator import calculate_item_quantity, should_count_in_total
from processors.ordenes_processor import OrdenesProcessor, convertir_punto_venta

logger = logging.getLogger(__name__)


class MatrizProductos:
    """
    Motor de agregación de la matriz productos x puntos de venta
    """

    def __init__(self,
                 fuente: FuenteDatos,
                 catalogo: CatalogIndex,
                 max_workers: int = 1,
                 debug: bool = False):
        """
        Args:
            fuente: Fuente de órdenes y puntos de venta
            catalogo: Catálogo mayorista del período (solo lectura)
            max_workers: Hilos para procesar puntos de venta (1 = secuencial)
            debug: Modo debug
        """
        self.fuente = fuente
        self.catalogo = catalogo
        self.matcher = ProductMatcher(catalogo)
        self.product_names = catalogo.product_names()
        self.max_workers = max(1, int(max_workers or 1))
        self.debug = debug
        self._log_step = logger.info if debug else logger.debug
        self.processor = OrdenesProcessor(debug=debug)

    def generar(self,
                desde: Optional[datetime],
                hasta: Optional[datetime]) -> Tuple[List[PointOfSaleAggregate], Diagnosticos]:
        """
        Genera la matriz completa

        Returns:
            (filas en el orden del listado de puntos de venta, diagnósticos)
        """
        puntos_venta = [convertir_punto_venta(doc) for doc in self.fuente.puntos_venta()]
        logger.info(f"Generando matriz: {len(puntos_venta)} puntos de venta, "
                    f"{len(self.product_names)} productos")

        if self.max_workers > 1 and len(puntos_venta) > 1:
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                resultados = list(executor.map(
                    lambda pv: self.procesar_punto_venta(pv, desde, hasta),
                    puntos_venta
                ))
        else:
            resultados = [self.procesar_punto_venta(pv, desde, hasta) for pv in puntos_venta]

        diagnosticos = Diagnosticos(catalogo=self.catalogo.resumen())
        filas = []
        for fila, diagnostico in resultados:
            filas.append(fila)
            diagnosticos.merge(diagnostico)

        logger.info(f"OK Matriz generada ({diagnosticos.total} diagnósticos)")
        return filas, diagnosticos

    def procesar_punto_venta(self,
                             punto_venta: PuntoVenta,
                             desde: Optional[datetime],
                             hasta: Optional[datetime]) -> Tuple[PointOfSaleAggregate, Diagnosticos]:
        diagnosticos = Diagnosticos()
        docs = self.fuente.ordenes_punto_venta(punto_venta.id, desde, hasta, campo_fecha='deliveryDay')
        ordenes = self.processor.process(docs, diagnosticos)

        fila = self.acumular(punto_venta, ordenes, diagnosticos)
        self._log_step(f"  {punto_venta.nombre}: {len(ordenes)} órdenes, {fila.total_kilos:.2f} kg")
        return fila, diagnosticos

    def acumular(self,
                 punto_venta: PuntoVenta,
                 ordenes: Iterable[Orden],
                 diagnosticos: Diagnosticos) -> PointOfSaleAggregate:
        """
        Fold de las órdenes de un punto de venta sobre una fila en cero

        product_names cubre el nombre canónico de todo el catálogo, así que
        cualquier producto matcheado tiene columna.
        """
        productos: Dict[str, float] = {name: 0.0 for name in self.product_names}
        fila = PointOfSaleAggregate(
            punto_venta_id=punto_venta.id,
            nombre=punto_venta.nombre,
            zona=punto_venta.zona,
            productos=productos
        )

        for orden in ordenes:
            if orden.order_type != ORDER_TYPE_MAYORISTA:
                continue

            for item in orden.items:
                try:
                    producto = self.matcher.match(item).unwrap()
                except NoMatchFound as e:
                    diagnosticos.registrar_sin_match(e, punto_venta.id, orden.id)
                    continue

                cantidad = calculate_item_quantity(item, producto)
                productos[producto.canonical_name] += cantidad

                if should_count_in_total(producto):
                    fila.total_kilos += cantidad

        return fila
