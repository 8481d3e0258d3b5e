"""
Fixtures compartidas: fuente de datos en memoria y catálogo de prueba
"""
from datetime import datetime
from pathlib import Path
import sys

import pytest

# Agregar path del proyecto
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.fechas import to_datetime
from matching.catalog_loader import CatalogLoader


def precio(product, weight='', section='PERRO', year=2025, month=10, **extra):
    """Documento de la colección prices"""
    doc = {
        '_id': f"{section}-{product}-{weight}-{year}-{month}",
        'section': section,
        'product': product,
        'weight': weight,
        'priceType': 'MAYORISTA',
        'isActive': True,
        'year': year,
        'month': month,
        'effectiveDate': datetime(year, month, 1)
    }
    doc.update(extra)
    return doc


def item(name, *options, **extra):
    """Ítem de orden: item('BIG DOG', ('POLLO', 1))"""
    doc = {'name': name, 'options': [{'name': n, 'quantity': q} for n, q in options]}
    doc.update(extra)
    return doc


def orden(_id, punto_de_venta=None, items=(), order_type='mayorista',
          created_at=datetime(2025, 10, 10, 12, 0), delivery_day=datetime(2025, 10, 11), **extra):
    """Documento de la colección orders"""
    doc = {
        '_id': _id,
        'items': list(items),
        'orderType': order_type,
        'punto_de_venta': punto_de_venta,
        'createdAt': created_at,
        'deliveryDay': delivery_day,
        'paymentMethod': 'cash',
        'total': 0
    }
    doc.update(extra)
    return doc


def punto_venta(_id, nombre, zona='NORTE', activo=True, telefono=None):
    doc = {'_id': _id, 'nombre': nombre, 'zona': zona, 'activo': activo}
    if telefono:
        doc['contacto'] = {'telefono': telefono}
    return doc


CATALOGO_BASE = [
    precio('POLLO', '5KG'),
    precio('POLLO', '10KG'),
    precio('CERDO', '10KG'),
    precio('VACA', '10KG'),
    precio('CORDERO', '10KG'),
    precio('BIG DOG POLLO', '15KG'),
    precio('BIG DOG VACA', '15KG'),
    precio('POLLO', '5KG', section='GATO'),
    precio('VACA', '5KG', section='GATO'),
    precio('CORDERO', '5KG', section='GATO'),
    precio('HUESOS CARNOSOS 5KG', '', section='OTROS'),
    precio('GARRAS', '', section='OTROS'),
    precio('HIGADO', '40GRS', section='RAW'),
    precio('HIGADO', '100GRS', section='RAW'),
    precio('OREJAS', 'X50', section='RAW'),
]


class FakeFuente:
    """
    FuenteDatos en memoria

    Aplica los mismos filtros que las consultas Mongo de db.queries.
    """

    def __init__(self, precios=(), puntos_venta=(), ordenes=()):
        self.precios = list(precios)
        self._puntos_venta = list(puntos_venta)
        self.ordenes = list(ordenes)
        self.llamadas = []

    def _mayoristas(self):
        return [p for p in self.precios if p.get('priceType') == 'MAYORISTA' and p.get('isActive')]

    def precios_mayoristas(self, year, month):
        self.llamadas.append(('precios_mayoristas', year, month))
        return [p for p in self._mayoristas() if p.get('year') == year and p.get('month') == month]

    def ultimo_mes_disponible(self, year):
        self.llamadas.append(('ultimo_mes_disponible', year))
        meses = [p['month'] for p in self._mayoristas() if p.get('year') == year]
        return max(meses) if meses else None

    def precios_mayoristas_recientes(self, limit=500):
        self.llamadas.append(('precios_mayoristas_recientes', limit))
        ordenados = sorted(
            self._mayoristas(),
            key=lambda p: (p.get('effectiveDate') or datetime.min, p.get('createdAt') or datetime.min),
            reverse=True
        )
        return ordenados[:limit]

    def puntos_venta(self, solo_activos=False):
        docs = [pv for pv in self._puntos_venta if pv.get('activo') or not solo_activos]
        return sorted(docs, key=lambda pv: (pv.get('nombre', ''), pv['_id']))

    @staticmethod
    def _en_rango(valor, desde, hasta):
        fecha = to_datetime(valor)
        if fecha is None:
            return desde is None and hasta is None
        if desde is not None and fecha < desde:
            return False
        if hasta is not None and fecha > hasta:
            return False
        return True

    def ordenes_punto_venta(self, punto_venta_id, desde=None, hasta=None, campo_fecha='deliveryDay'):
        return [
            o for o in self.ordenes
            if o.get('punto_de_venta') == punto_venta_id
            and o.get('orderType') == 'mayorista'
            and self._en_rango(o.get(campo_fecha), desde, hasta)
        ]

    def ordenes_por_creacion(self, desde=None, hasta=None):
        return [o for o in self.ordenes if self._en_rango(o.get('createdAt'), desde, hasta)]

    def ordenes_por_fecha_efectiva(self, desde=None, hasta=None):
        return list(self.ordenes)


@pytest.fixture
def catalogo_docs():
    return [dict(doc) for doc in CATALOGO_BASE]


@pytest.fixture
def catalogo(catalogo_docs):
    """CatalogIndex de octubre 2025"""
    return CatalogLoader(FakeFuente(precios=catalogo_docs)).load(2025, 10)
