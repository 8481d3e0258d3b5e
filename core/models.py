"""
Tipos de frontera: catálogo, órdenes, puntos de venta y resultado de matching

Los documentos crudos se convierten UNA vez al ingresar (ver processors/);
el matching y la agregación sólo trabajan con estos tipos.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Tuple, Union

from .errors import NoMatchFound


@dataclass(frozen=True)
class CatalogProduct:
    """Producto oficial de la lista MAYORISTA"""
    full_name: str          # "BIG DOG VACA 15KG"
    product: str            # "BIG DOG VACA"
    weight: str             # "15KG" o "UNIDAD"
    kilos_per_unit: float   # 15
    section: str            # PERRO / GATO / OTROS / RAW
    group_key: str          # "PERRO - BIG DOG VACA"
    canonical_name: str     # nombre de columna en la matriz

    @property
    def index_key(self) -> str:
        """Clave calificada por sección (evita colisiones PERRO/GATO)"""
        return f"{self.section}||{self.full_name}"


@dataclass(frozen=True)
class OrderOption:
    name: str
    quantity: float = 0


@dataclass(frozen=True)
class OrderLineItem:
    """Ítem de orden tal como lo cargó el cliente (nombre + opciones)"""
    name: str
    options: Tuple[OrderOption, ...] = ()
    quantity: Optional[float] = None
    same_day_delivery: bool = False


@dataclass(frozen=True)
class Orden:
    id: str
    items: Tuple[OrderLineItem, ...] = ()
    order_type: str = "minorista"
    same_day_delivery: bool = False
    payment_method: str = ""
    created_at: Optional[datetime] = None
    delivery_day: Optional[datetime] = None
    punto_de_venta: Optional[str] = None
    total: float = 0.0
    shipping_price: float = 0.0


@dataclass(frozen=True)
class PuntoVenta:
    id: str
    nombre: str
    zona: str
    telefono: str
    activo: bool = True


@dataclass(frozen=True)
class Matched:
    producto: CatalogProduct
    estrategia: str

    @property
    def ok(self) -> bool:
        return True

    def unwrap(self) -> CatalogProduct:
        return self.producto


@dataclass(frozen=True)
class Unmatched:
    item_name: str
    motivo: str
    seccion: Optional[str] = None

    @property
    def ok(self) -> bool:
        return False

    def unwrap(self) -> CatalogProduct:
        raise NoMatchFound(self.item_name, self.motivo)


MatchResult = Union[Matched, Unmatched]


@dataclass
class PointOfSaleAggregate:
    """Fila de la matriz: totales por producto de un punto de venta"""
    punto_venta_id: str
    nombre: str
    zona: str
    productos: dict = field(default_factory=dict)
    total_kilos: float = 0.0

    def to_dict(self) -> dict:
        return {
            'puntoVentaId': self.punto_venta_id,
            'puntoVentaNombre': self.nombre,
            'zona': self.zona,
            'productos': dict(self.productos),
            'totalKilos': self.total_kilos
        }
