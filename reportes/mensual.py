"""
Reportes mensuales por tipo de entrega / tipo de cliente y buckets de sabor

No usan el catálogo: el peso sale del texto del ítem (calculate_item_weight)
y el sabor de categorize_product.

Clasificación de una orden (una sola vez, sin doble conteo):
    sameDay (flag de zona, pago legacy bank-transfer o algún ítem same-day)
    > mayorista > minorista
"""
from datetime import datetime, timedelta
from typing import Dict, Iterable, Iterator, List, Optional, Tuple
import logging

import numpy as np
import pandas as pd

from config.settings import (
    BUCKETS_CATEGORIA,
    BUCKETS_PERRO,
    BUCKETS_GATO,
    CLIENT_TYPES,
    DESFASE_HORARIO_HORAS,
    ORDER_TYPE_MAYORISTA,
    PAYMENT_METHOD_SAME_DAY_LEGACY
)
from core.categories import categorize_product
from core.fechas import clave_mes
from core.models import Orden
from core.weight import calculate_item_weight
from .redondeo import redondear

logger = logging.getLogger(__name__)

TIPO_SAME_DAY = 'sameDay'
TIPO_MAYORISTA = 'mayorista'
TIPO_MINORISTA = 'minorista'

# Nombres de columna del reporte por tipo de entrega
_TIPOS_ENTREGA = {
    TIPO_SAME_DAY: 'sameDay',
    TIPO_MAYORISTA: 'wholesale',
    TIPO_MINORISTA: 'normal'
}


def es_same_day(orden: Orden) -> bool:
    return (orden.same_day_delivery
            or orden.payment_method == PAYMENT_METHOD_SAME_DAY_LEGACY
            or any(item.same_day_delivery for item in orden.items))


def clasificar_tipo_cliente(orden: Orden) -> str:
    """
    Tipo de cliente de una orden

    Una orden mayorista con entrega same-day cuenta como sameDay.
    """
    if es_same_day(orden):
        return TIPO_SAME_DAY
    if orden.order_type == ORDER_TYPE_MAYORISTA:
        return TIPO_MAYORISTA
    return TIPO_MINORISTA


def fecha_efectiva(orden: Orden) -> Optional[datetime]:
    """deliveryDay, o createdAt - 3h (hora local) si no tiene día de entrega"""
    if orden.delivery_day is not None:
        return orden.delivery_day
    if orden.created_at is not None:
        return orden.created_at - timedelta(hours=DESFASE_HORARIO_HORAS)
    return None


def iterar_pesos_por_sabor(orden: Orden) -> Iterator[Tuple[str, float]]:
    """
    (subcategoría, kg) por cada ítem/opción de la orden

    Cantidad: item.quantity si viene, si no la de la opción.
    Ítems sin opciones no aportan.
    """
    for item in orden.items:
        for option in item.options:
            quantity = item.quantity if item.quantity is not None else option.quantity
            peso = calculate_item_weight(item.name, option.name)
            _, subcategory = categorize_product(item.name, option.name)
            yield subcategory, peso * (quantity or 0)


def _fila_vacia(month: str) -> Dict:
    fila = {'month': month}
    fila.update({bucket: 0.0 for bucket in BUCKETS_CATEGORIA})
    fila.update({'totalPerro': 0.0, 'totalGato': 0.0, 'totalMes': 0.0})
    return fila


def tabla_buckets(df: pd.DataFrame, index: List[str]) -> pd.DataFrame:
    """
    Pivot de pesos por bucket de sabor

    Args:
        df: columnas index + ['subcategory', 'peso']
        index: columnas de agrupación (ej: ['month'] o ['month', 'clientType'])

    Returns:
        DataFrame con una columna por bucket + totalPerro, totalGato, totalMes
    """
    columnas = index + BUCKETS_CATEGORIA + ['totalPerro', 'totalGato', 'totalMes']
    if df.empty:
        return pd.DataFrame(columns=columnas)

    pivot = df.pivot_table(
        index=index,
        columns='subcategory',
        values='peso',
        aggfunc='sum',
        fill_value=0.0
    )
    pivot = pivot.reindex(columns=BUCKETS_CATEGORIA, fill_value=0.0)
    pivot['totalPerro'] = pivot[BUCKETS_PERRO].sum(axis=1)
    pivot['totalGato'] = pivot[BUCKETS_GATO].sum(axis=1)
    # totalMes incluye también "otros" (complementos, RAW, etc.)
    pivot['totalMes'] = df.groupby(index)['peso'].sum()

    return pivot.reset_index()[columnas]


def _registros(df: pd.DataFrame, columnas: Iterable[str]) -> List[Dict]:
    registros = []
    for row in df.to_dict('records'):
        registro = {}
        for columna in columnas:
            valor = row[columna]
            registro[columna] = redondear(float(valor), 2) if isinstance(valor, (float, int, np.number)) else valor
        registros.append(registro)
    return registros


class ReportesMensuales:
    """
    Rollups mensuales sobre órdenes ya convertidas

    Todos los resultados salen en orden cronológico ('YYYY-MM').
    """

    def __init__(self, debug: bool = False):
        self.debug = debug
        self._log_step = logger.info if debug else logger.debug

    # ==========================================
    # POR TIPO DE ENTREGA
    # ==========================================

    def delivery_type_stats(self, ordenes: Iterable[Orden]) -> List[Dict]:
        """
        Órdenes, facturación y peso real por mes y tipo de entrega
        (agrupado por createdAt)

        Returns:
            [{month, sameDayOrders, normalOrders, wholesaleOrders,
              sameDayRevenue, ..., sameDayWeight, ...}]
        """
        filas = []
        for orden in ordenes:
            if orden.created_at is None:
                self._log_step(f"  Orden sin createdAt ignorada: {orden.id}")
                continue

            peso = 0.0
            for item in orden.items:
                for option in item.options:
                    kg = calculate_item_weight(item.name, option.name)
                    if kg > 0:
                        peso += kg * (option.quantity or 1)

            filas.append({
                'month': clave_mes(orden.created_at),
                'tipo': _TIPOS_ENTREGA[clasificar_tipo_cliente(orden)],
                'orders': 1,
                'revenue': orden.total,
                'weight': peso
            })

        columnas = ['month'] + [
            f"{tipo}{metrica}"
            for metrica in ('Orders', 'Revenue', 'Weight')
            for tipo in ('sameDay', 'normal', 'wholesale')
        ]

        if not filas:
            return []

        df = pd.DataFrame(filas)
        agrupado = df.groupby(['month', 'tipo'])[['orders', 'revenue', 'weight']].sum().unstack('tipo', fill_value=0)

        resultado = pd.DataFrame(index=agrupado.index)
        for metrica in ('orders', 'revenue', 'weight'):
            for tipo in ('sameDay', 'normal', 'wholesale'):
                columna = f"{tipo}{metrica.capitalize()}"
                if (metrica, tipo) in agrupado.columns:
                    resultado[columna] = agrupado[(metrica, tipo)]
                else:
                    resultado[columna] = 0

        resultado = resultado.sort_index().reset_index()
        registros = _registros(resultado, columnas)
        for registro in registros:
            for tipo in ('sameDay', 'normal', 'wholesale'):
                registro[f"{tipo}Orders"] = int(registro[f"{tipo}Orders"])

        logger.info(f"Estadísticas por tipo de entrega: {len(registros)} meses")
        return registros

    # ==========================================
    # POR TIPO DE CLIENTE Y SABOR
    # ==========================================

    def quantity_stats(self, ordenes: Iterable[Orden]) -> Dict[str, List[Dict]]:
        """
        Kilos por bucket de sabor, mes (fecha efectiva) y tipo de cliente

        Cada mes con órdenes tiene fila para los tres tipos de cliente.

        Returns:
            {'minorista': [...], 'sameDay': [...], 'mayorista': [...]}
        """
        filas = []
        for orden in ordenes:
            fecha = fecha_efectiva(orden)
            if fecha is None:
                self._log_step(f"  Orden sin fecha ignorada: {orden.id}")
                continue
            month = clave_mes(fecha)
            client_type = clasificar_tipo_cliente(orden)
            for subcategory, peso in iterar_pesos_por_sabor(orden):
                filas.append({
                    'month': month,
                    'clientType': client_type,
                    'subcategory': subcategory,
                    'peso': peso
                })

        resultado: Dict[str, List[Dict]] = {client_type: [] for client_type in CLIENT_TYPES}
        if not filas:
            return resultado

        df = pd.DataFrame(filas)
        meses = sorted(df['month'].unique())
        tabla = tabla_buckets(df, ['month', 'clientType']).set_index(['month', 'clientType'])

        columnas = ['month'] + BUCKETS_CATEGORIA + ['totalPerro', 'totalGato', 'totalMes']
        for client_type in CLIENT_TYPES:
            for month in meses:
                if (month, client_type) in tabla.index:
                    fila = tabla.loc[(month, client_type)].to_dict()
                    fila['month'] = month
                    resultado[client_type].append(
                        {c: fila[c] if c == 'month' else redondear(float(fila[c]), 2) for c in columnas}
                    )
                else:
                    resultado[client_type].append(_fila_vacia(month))

        logger.info(f"Estadísticas de cantidades: {len(meses)} meses x {len(CLIENT_TYPES)} tipos de cliente")
        return resultado

    def category_buckets(self, ordenes: Iterable[Orden]) -> List[Dict]:
        """Buckets de sabor por mes (fecha efectiva) para un conjunto de órdenes"""
        filas = []
        for orden in ordenes:
            fecha = fecha_efectiva(orden)
            if fecha is None:
                continue
            month = clave_mes(fecha)
            for subcategory, peso in iterar_pesos_por_sabor(orden):
                filas.append({'month': month, 'subcategory': subcategory, 'peso': peso})

        if not filas:
            return []

        tabla = tabla_buckets(pd.DataFrame(filas), ['month']).sort_values('month')
        return _registros(tabla, ['month'] + BUCKETS_CATEGORIA + ['totalPerro', 'totalGato', 'totalMes'])
