"""
Matching de ítems de órdenes contra el catálogo mayorista

Los ítems se cargan a mano y no referencian al catálogo, así que el match es
heurístico: una lista ordenada de estrategias (aplica, resolver) que se evalúa
en secuencia y devuelve el primer éxito. Las exactas van primero; la parcial
(todas las palabras del producto en el nombre del ítem) siempre al final.
"""
import re
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple
import logging

from config.settings import SECCION_PERRO, SECCION_GATO, SECCION_RAW
from core.models import CatalogProduct, Matched, MatchResult, OrderLineItem, Unmatched
from core.normalization import normalize_product_name, split_words, contains_all_words
from .catalog_loader import CatalogIndex

logger = logging.getLogger(__name__)

_OPCION_RAW_RE = re.compile(r"\d+\s*GRS?|X\d+", re.IGNORECASE)


def detect_section(item_name: str, option_names: Sequence[str] = ()) -> Optional[str]:
    """
    Sección probable de un ítem según su nombre y opciones

    Ejemplos:
        ("BOX GATO VACA", []) → "GATO"
        ("BIG DOG", ["POLLO"]) → "PERRO"
        ("HIGADO", ["100GRS"]) → "RAW"
        ("HUESOS CARNOSOS", ["5KG"]) → None (busca en todo el catálogo)
    """
    name = normalize_product_name(item_name)

    if 'GATO' in name:
        return SECCION_GATO
    if 'PERRO' in name or 'BIG DOG' in name:
        return SECCION_PERRO

    for option in option_names:
        if _OPCION_RAW_RE.search(option or ''):
            return SECCION_RAW

    return None


@dataclass(frozen=True)
class ContextoMatch:
    """Ítem ya normalizado + candidatos de su sección"""
    item: OrderLineItem
    nombre: str
    opciones: Tuple[str, ...]
    seccion: Optional[str]
    candidatos: Tuple[CatalogProduct, ...]

    @classmethod
    def crear(cls, item: OrderLineItem, catalogo: CatalogIndex) -> 'ContextoMatch':
        opciones = tuple(
            normalize_product_name(o.name) for o in item.options if normalize_product_name(o.name)
        )
        seccion = detect_section(item.name, opciones)
        return cls(
            item=item,
            nombre=normalize_product_name(item.name),
            opciones=opciones,
            seccion=seccion,
            candidatos=catalogo.candidatos(seccion)
        )


@dataclass(frozen=True)
class Estrategia:
    nombre: str
    aplica: Callable[[ContextoMatch], bool]
    resolver: Callable[[ContextoMatch], Optional[CatalogProduct]]


def _primero(candidatos, condicion) -> Optional[CatalogProduct]:
    return next((p for p in candidatos if condicion(p)), None)


# ==========================================
# ESTRATEGIAS
# ==========================================

def por_nombre_completo(ctx: ContextoMatch) -> Optional[CatalogProduct]:
    """"POLLO 10KG" == fullName"""
    return _primero(ctx.candidatos, lambda p: p.full_name == ctx.nombre)


def por_producto(ctx: ContextoMatch) -> Optional[CatalogProduct]:
    """
    "HUESOS CARNOSOS" == product

    Si varias presentaciones comparten producto ("HIGADO" 40GRS / 100GRS)
    gana la que tiene como peso alguna de las opciones del ítem.
    """
    matches = [p for p in ctx.candidatos if p.product == ctx.nombre]
    if not matches:
        return None
    return _primero(matches, lambda p: p.weight in ctx.opciones) or matches[0]


def por_opcion(ctx: ContextoMatch) -> Optional[CatalogProduct]:
    """
    RAW: "<ítem> <opción>" == fullName ("HIGADO" + "100GRS")
    Resto: opción == weight y todas las palabras del producto en el nombre
    ("BOX PERRO POLLO" + "5KG" → POLLO 5KG)
    """
    for opcion in ctx.opciones:
        if ctx.seccion == SECCION_RAW:
            nombre_completo = f"{ctx.nombre} {opcion}"
            match = _primero(ctx.candidatos, lambda p: p.full_name == nombre_completo)
        else:
            match = _primero(
                ctx.candidatos,
                lambda p: p.weight == opcion and contains_all_words(split_words(p.product), ctx.nombre)
            )
        if match:
            return match
    return None


def por_sabor_big_dog(ctx: ContextoMatch) -> Optional[CatalogProduct]:
    """"BIG DOG (15KG)" + opción "POLLO" → producto "BIG DOG POLLO" """
    sabor = normalize_product_name(ctx.item.options[0].name)
    buscado = f"BIG DOG {sabor}".strip()
    return _primero(ctx.candidatos, lambda p: p.product == buscado)


def por_prefijo_box(ctx: ContextoMatch) -> Optional[CatalogProduct]:
    """"BOX PERRO POLLO" → producto "POLLO" en PERRO"""
    prefijo = f"BOX {ctx.seccion} "
    sabor = ctx.nombre.replace(prefijo, '', 1).strip()
    return _primero(ctx.candidatos, lambda p: p.product == sabor)


def por_nombre_con_opcion(ctx: ContextoMatch) -> Optional[CatalogProduct]:
    """"HUESOS CARNOSOS" + "5KG" == product "HUESOS CARNOSOS 5KG" """
    for opcion in ctx.opciones:
        buscado = f"{ctx.nombre} {opcion}"
        match = _primero(ctx.candidatos, lambda p: p.product == buscado)
        if match:
            return match
    return None


def por_coincidencia_parcial(ctx: ContextoMatch) -> Optional[CatalogProduct]:
    """
    Último recurso: todas las palabras del producto aparecen en el nombre.
    Entre esos, gana el que además tiene su peso en el nombre.
    """
    parciales = [p for p in ctx.candidatos if contains_all_words(split_words(p.product), ctx.nombre)]
    if not parciales:
        return None
    con_peso = _primero(parciales, lambda p: p.weight in ctx.nombre)
    return con_peso or parciales[0]


ESTRATEGIAS: List[Estrategia] = [
    Estrategia('nombre_completo', lambda ctx: True, por_nombre_completo),
    Estrategia('producto', lambda ctx: True, por_producto),
    Estrategia('opcion', lambda ctx: bool(ctx.opciones), por_opcion),
    Estrategia(
        'big_dog',
        lambda ctx: ctx.seccion == SECCION_PERRO and 'BIG DOG' in ctx.nombre and bool(ctx.item.options),
        por_sabor_big_dog
    ),
    Estrategia('box', lambda ctx: ctx.seccion in (SECCION_PERRO, SECCION_GATO), por_prefijo_box),
    Estrategia('nombre_con_opcion', lambda ctx: bool(ctx.opciones), por_nombre_con_opcion),
    Estrategia('parcial', lambda ctx: True, por_coincidencia_parcial),
]


class ProductMatcher:
    """
    Resuelve OrderLineItem → CatalogProduct sobre un CatalogIndex fijo

    Sin estado mutable: una instancia puede compartirse entre hilos.
    """

    def __init__(self, catalogo: CatalogIndex, estrategias: Optional[List[Estrategia]] = None):
        self.catalogo = catalogo
        self.estrategias = estrategias if estrategias is not None else ESTRATEGIAS

    def match(self, item: OrderLineItem) -> MatchResult:
        ctx = ContextoMatch.crear(item, self.catalogo)

        if not ctx.nombre:
            return Unmatched(item.name, 'nombre vacío', ctx.seccion)

        if not ctx.candidatos:
            return Unmatched(item.name, f"sin productos en la sección {ctx.seccion}", ctx.seccion)

        for estrategia in self.estrategias:
            if not estrategia.aplica(ctx):
                continue
            producto = estrategia.resolver(ctx)
            if producto is not None:
                logger.debug(f"Match {estrategia.nombre}: '{item.name}' → '{producto.full_name}'")
                return Matched(producto, estrategia.nombre)

        seccion = ctx.seccion or 'todas'
        return Unmatched(item.name, f"ninguna estrategia aplicó (sección: {seccion})", ctx.seccion)
