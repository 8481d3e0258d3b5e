"""
Orden de presentación de productos en la matriz

Orden de columnas:
1. BIG DOG (pollo, vaca)
2. PERRO (pollo, cerdo, vaca, cordero)
3. GATO (pollo, vaca, cordero)
4. HUESOS CARNOSOS
5. Complementos (box complementos, garras, cornalitos, caldo, huesos recreativos)
6. RAW
7. Resto
Empates → alfabético.
"""
from typing import Iterable, List, Sequence, Tuple

from config.settings import (
    SECCION_PERRO,
    SECCION_GATO,
    SECCION_OTROS,
    SECCION_RAW,
    ORDEN_BIG_DOG,
    ORDEN_SABORES_PERRO,
    ORDEN_SABORES_GATO,
    ORDEN_COMPLEMENTOS
)
from core.models import CatalogProduct
from core.normalization import normalize_product_name

TIER_BIG_DOG = 0
TIER_PERRO = 1
TIER_GATO = 2
TIER_HUESOS_CARNOSOS = 3
TIER_COMPLEMENTOS = 4
TIER_RAW = 5
TIER_RESTO = 6


def _posicion(text: str, orden: Sequence[str]) -> int:
    """Índice de la primera palabra clave contenida en text (len(orden) si ninguna)"""
    for idx, clave in enumerate(orden):
        if clave in text:
            return idx
    return len(orden)


def _tier(name: str, section: str = '') -> Tuple[int, int]:
    if name.startswith('RAW -') or section == SECCION_RAW:
        return TIER_RAW, 0

    if 'BIG DOG' in name:
        return TIER_BIG_DOG, _posicion(name, ORDEN_BIG_DOG)

    if name.startswith(f"{SECCION_PERRO} ") or section == SECCION_PERRO:
        return TIER_PERRO, _posicion(name, ORDEN_SABORES_PERRO)

    if name.startswith(f"{SECCION_GATO} ") or section == SECCION_GATO:
        return TIER_GATO, _posicion(name, ORDEN_SABORES_GATO)

    if 'HUESOS CARNOSOS' in name:
        return TIER_HUESOS_CARNOSOS, 0

    posicion = _posicion(name, ORDEN_COMPLEMENTOS)
    if posicion < len(ORDEN_COMPLEMENTOS):
        return TIER_COMPLEMENTOS, posicion

    if name.startswith(f"{SECCION_OTROS} ") or section == SECCION_OTROS:
        return TIER_HUESOS_CARNOSOS, 1

    return TIER_RESTO, 0


def clave_orden_nombre(name: str) -> Tuple[int, int, str]:
    """
    Clave de ordenamiento para un nombre canónico

    Ejemplos:
        "BIG DOG POLLO" → (0, 0, ...)
        "PERRO CERDO" → (1, 1, ...)
        "RAW - HIGADO 100GRS" → (5, 0, ...)
    """
    normalized = normalize_product_name(name)
    tier, posicion = _tier(normalized)
    return tier, posicion, normalized


def sort_product_names(names: Iterable[str]) -> List[str]:
    """
    Ordena nombres canónicos para las columnas de la matriz

    Ejemplo:
        ["RAW - HIGADO 100GRS", "GATO VACA", "BIG DOG POLLO", "PERRO POLLO"]
        → ["BIG DOG POLLO", "PERRO POLLO", "GATO VACA", "RAW - HIGADO 100GRS"]
    """
    return sorted(names, key=lambda name: (clave_orden_nombre(name), name))


def clave_producto(producto: CatalogProduct) -> Tuple[int, int, str, str]:
    """Clave de orden para productos del catálogo (sección, sabor, groupKey, fullName)"""
    tier, posicion = _tier(producto.product, producto.section)
    return tier, posicion, producto.group_key, producto.full_name


def sort_catalog_products(productos: Iterable[CatalogProduct]) -> List[CatalogProduct]:
    return sorted(productos, key=clave_producto)
