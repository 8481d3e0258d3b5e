"""
Colector de diagnósticos de una corrida de agregación

Reemplaza los logs por consola como único canal: los ítems sin match y las
órdenes malformadas se devuelven junto al resultado.
"""
from dataclasses import dataclass, field
from typing import Dict, List, Optional
import logging

from .errors import MalformedOrder, NoMatchFound

logger = logging.getLogger(__name__)


@dataclass
class Diagnosticos:
    """Diagnósticos acumulados (uno por fold; se combinan con merge)"""
    sin_match: List[Dict] = field(default_factory=list)
    ordenes_malformadas: List[Dict] = field(default_factory=list)
    catalogo: Optional[Dict] = None

    def registrar_sin_match(self, error: NoMatchFound, punto_venta_id: Optional[str] = None,
                            order_id: Optional[str] = None) -> None:
        logger.debug(f"Sin match: '{error.item_name}' ({error.motivo})")
        self.sin_match.append({
            'puntoVentaId': punto_venta_id,
            'orderId': order_id,
            'item': error.item_name,
            'motivo': error.motivo
        })

    def registrar_malformada(self, error: MalformedOrder) -> None:
        logger.debug(str(error))
        self.ordenes_malformadas.append({
            'orderId': error.order_id,
            'detalle': error.detalle
        })

    def merge(self, other: 'Diagnosticos') -> 'Diagnosticos':
        self.sin_match.extend(other.sin_match)
        self.ordenes_malformadas.extend(other.ordenes_malformadas)
        return self

    @property
    def total(self) -> int:
        return len(self.sin_match) + len(self.ordenes_malformadas)

    def to_dict(self) -> Dict:
        return {
            'catalogo': self.catalogo,
            'sinMatch': list(self.sin_match),
            'ordenesMalformadas': list(self.ordenes_malformadas)
        }
