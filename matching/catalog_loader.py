"""
Carga del catálogo MAYORISTA vigente para un período

Fallback de períodos:
1. Mes/año exacto
2. Último mes disponible del mismo año
3. Precios más recientes de cualquier año

El índice resultante es inmutable durante toda la corrida.
"""
import re
from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple
import logging

from config.settings import (
    SECCION_RAW,
    SECCION_DEFAULT,
    PESO_UNIDAD,
    VARIACIONES_RAW,
    NOMBRE_OREJAS_UNIFICADO
)
from core.errors import CatalogUnavailable
from core.fechas import to_datetime
from core.models import CatalogProduct
from core.normalization import normalize_product_name, normalize_section
from core.weight import calculate_item_weight
from db.repository import FuenteDatos
from .sorting import sort_catalog_products, sort_product_names

logger = logging.getLogger(__name__)

NIVEL_EXACTO = 'exacto'
NIVEL_MISMO_ANIO = 'mismo_anio'
NIVEL_HISTORICO = 'historico'

_OREJAS_RE = re.compile(r"RAW -\s*OREJA(S)?", re.IGNORECASE)


def normalize_raw_product_name(product_name: str) -> str:
    """
    Unifica variaciones comunes de productos RAW

    Ejemplos:
        "OREJAS" → "OREJA", "HIGADOS" → "HIGADO"
    """
    normalized = normalize_product_name(product_name)
    return VARIACIONES_RAW.get(normalized, normalized)


def generate_group_key(product: str, section: str) -> str:
    """
    Clave de agrupación sección + producto

    Ejemplos:
        ("POLLO", "PERRO") → "PERRO - POLLO"
        ("BIG DOG VACA", "PERRO") → "PERRO - BIG DOG VACA"
        ("OREJA X50", "RAW") → "RAW - OREJA"  (X1/X50/X100 son el mismo producto)
        ("HIGADO 100GRS", "RAW") → "RAW - HIGADO 100GRS"
    """
    normalized_product = normalize_product_name(product)
    normalized_section = normalize_section(section)

    if normalized_section == SECCION_RAW and 'OREJA' in normalized_product:
        base = re.sub(r"\s*X\d+\s*$", "", normalized_product, flags=re.IGNORECASE)
        base = re.sub(r"\s*\d+\s*$", "", base).strip()
        return f"{normalized_section} - {normalize_raw_product_name(base)}"

    return f"{normalized_section} - {normalized_product}"


def generate_canonical_name(product: str, section: str, weight: str) -> str:
    """
    Nombre de columna de la matriz para un producto del catálogo

    Ejemplos:
        ("POLLO", "PERRO", "10KG") → "PERRO POLLO"
        ("BIG DOG POLLO", "PERRO", "15KG") → "BIG DOG POLLO"
        ("HIGADO", "RAW", "100GRS") → "RAW - HIGADO 100GRS"
        ("OREJA X50", "RAW", "UNIDAD") → "RAW - OREJAS"
    """
    section = normalize_section(section)
    product = normalize_product_name(product)
    weight = normalize_product_name(weight)

    if section.startswith(SECCION_RAW):
        if weight and weight != PESO_UNIDAD:
            name = f"RAW - {product} {weight}"
        else:
            name = f"RAW - {product}"
    elif section.startswith('BOX PERRO'):
        name = f"BOX PERRO {product}"
    elif section.startswith('BOX GATO'):
        name = f"BOX GATO {product}"
    elif section.startswith('BIG DOG') or product.startswith('BIG DOG'):
        name = product if product.startswith('BIG DOG') else f"BIG DOG {product}"
    elif section:
        name = f"{section} {product}"
    else:
        name = product

    if _OREJAS_RE.search(name):
        name = NOMBRE_OREJAS_UNIFICADO

    return normalize_product_name(name)


def build_catalog_product(doc: Dict[str, Any]) -> Optional[CatalogProduct]:
    """Documento de prices → CatalogProduct (None si no tiene producto)"""
    product = normalize_product_name(doc.get('product'))
    if not product:
        return None

    section = normalize_section(doc.get('section'), default=SECCION_DEFAULT)
    weight = normalize_product_name(doc.get('weight'))
    full_name = f"{product} {weight}".strip() if weight else product

    kilos = calculate_item_weight('', weight)

    return CatalogProduct(
        full_name=full_name,
        product=product,
        weight=weight or PESO_UNIDAD,
        kilos_per_unit=kilos if kilos > 0 else 1.0,
        section=section,
        group_key=generate_group_key(product, section),
        canonical_name=generate_canonical_name(product, section, weight)
    )


def _fecha_vigencia(doc: Dict[str, Any]) -> datetime:
    return to_datetime(doc.get('effectiveDate')) or to_datetime(doc.get('createdAt')) or datetime.min


@dataclass(frozen=True)
class CatalogIndex:
    """Índice de solo lectura del catálogo de un período"""
    productos: Tuple[CatalogProduct, ...]
    year: int
    month: int
    nivel: str
    por_clave: Mapping[str, CatalogProduct] = field(default_factory=dict)
    por_seccion: Mapping[str, Tuple[CatalogProduct, ...]] = field(default_factory=dict)

    @classmethod
    def build(cls, productos: Iterable[CatalogProduct], year: int, month: int, nivel: str) -> 'CatalogIndex':
        ordenados = tuple(sort_catalog_products(productos))

        por_seccion: Dict[str, List[CatalogProduct]] = {}
        for producto in ordenados:
            por_seccion.setdefault(producto.section, []).append(producto)

        return cls(
            productos=ordenados,
            year=year,
            month=month,
            nivel=nivel,
            por_clave=MappingProxyType({p.index_key: p for p in ordenados}),
            por_seccion=MappingProxyType({s: tuple(ps) for s, ps in por_seccion.items()})
        )

    def candidatos(self, seccion: Optional[str] = None) -> Tuple[CatalogProduct, ...]:
        """Productos de una sección (todos si seccion es None)"""
        if seccion is None:
            return self.productos
        return self.por_seccion.get(seccion, ())

    def get(self, section: str, full_name: str) -> Optional[CatalogProduct]:
        key = f"{normalize_section(section)}||{normalize_product_name(full_name)}"
        return self.por_clave.get(key)

    def product_names(self) -> List[str]:
        """Nombres canónicos únicos, ordenados para presentación"""
        return sort_product_names({p.canonical_name for p in self.productos})

    def resumen(self) -> Dict[str, Any]:
        return {
            'year': self.year,
            'month': self.month,
            'nivel': self.nivel,
            'productos': len(self.productos)
        }

    def __len__(self) -> int:
        return len(self.productos)


class CatalogLoader:
    """
    Carga precios MAYORISTA activos y construye el CatalogIndex

    Solo falla (CatalogUnavailable) si no hay registros en ningún nivel.
    """

    def __init__(self, fuente: FuenteDatos, debug: bool = False):
        self.fuente = fuente
        self.debug = debug
        self._log_step = logger.info if debug else logger.debug

    def load(self, year: int, month: int) -> CatalogIndex:
        """
        Args:
            year, month: Período objetivo

        Returns:
            CatalogIndex con el nivel de fallback usado
        """
        logger.info(f"Cargando productos mayoristas desde prices ({month}/{year})")

        docs = self.fuente.precios_mayoristas(year, month)
        nivel = NIVEL_EXACTO
        periodo = (year, month)

        if not docs:
            ultimo_mes = self.fuente.ultimo_mes_disponible(year)
            if ultimo_mes:
                logger.warning(f"Sin precios para {month}/{year}; usando último mes del año: {ultimo_mes}/{year}")
                docs = self.fuente.precios_mayoristas(year, ultimo_mes)
                nivel = NIVEL_MISMO_ANIO
                periodo = (year, ultimo_mes)

        if not docs:
            logger.warning(f"Sin precios en {year}; usando los más recientes de cualquier año")
            docs = self.fuente.precios_mayoristas_recientes()
            nivel = NIVEL_HISTORICO

        if not docs:
            raise CatalogUnavailable(year, month)

        if nivel == NIVEL_HISTORICO:
            periodo = self._periodo_mas_reciente(docs, default=periodo)

        index = self.build_index(docs, periodo[0], periodo[1], nivel)
        logger.info(f"OK {len(index)} productos mayoristas cargados (nivel: {nivel})")
        return index

    def build_index(self,
                    docs: Iterable[Dict[str, Any]],
                    year: int,
                    month: int,
                    nivel: str = NIVEL_EXACTO) -> CatalogIndex:
        """
        Construye el índice deduplicando por sección + nombre completo.
        Ante duplicados gana el precio con effectiveDate/createdAt más reciente.
        """
        vigentes: Dict[str, Tuple[datetime, CatalogProduct]] = {}

        for doc in docs:
            producto = build_catalog_product(doc)
            if producto is None:
                self._log_step(f"  Precio sin producto ignorado: {doc.get('_id')}")
                continue

            fecha = _fecha_vigencia(doc)
            previo = vigentes.get(producto.index_key)
            if previo is None or fecha > previo[0]:
                vigentes[producto.index_key] = (fecha, producto)

        if self.debug:
            for seccion in sorted({p.section for _, p in vigentes.values()}):
                cantidad = sum(1 for _, p in vigentes.values() if p.section == seccion)
                logger.debug(f"  {seccion}: {cantidad} productos")

        return CatalogIndex.build((p for _, p in vigentes.values()), year, month, nivel)

    @staticmethod
    def _periodo_mas_reciente(docs: List[Dict[str, Any]], default: Tuple[int, int]) -> Tuple[int, int]:
        periodos = []
        for doc in docs:
            try:
                periodos.append((int(doc.get('year')), int(doc.get('month'))))
            except (TypeError, ValueError):
                continue
        return max(periodos) if periodos else default
