"""
Procesador de documentos crudos de órdenes y puntos de venta
Convierte los documentos de Mongo (sin garantías de esquema) a los tipos de
frontera de core.models, una sola vez al ingresar.
"""
import math
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Tuple
import logging

import pandas as pd

from config.settings import ORDER_TYPE_MINORISTA, TELEFONO_DEFAULT, ZONA_DEFAULT
from core.diagnostics import Diagnosticos
from core.errors import MalformedOrder
from core.fechas import to_datetime
from core.models import Orden, OrderLineItem, OrderOption, PuntoVenta

logger = logging.getLogger(__name__)


def _to_number(value: Any, default: Optional[float] = 0.0) -> Optional[float]:
    """Número o default si no es convertible ("3" → 3.0, None → default)"""
    if value is None or isinstance(value, (bool, dict, list, tuple)):
        return default
    try:
        number = pd.to_numeric(value, errors='coerce')
    except (TypeError, ValueError):
        return default
    if number is None or pd.isna(number) or math.isinf(number):
        return default
    return float(number)


class OrdenesProcessor:
    """
    Pipeline de conversión para documentos de la colección orders.

    Entrada esperada (documento Mongo):
        - _id, items[{name|id, options[{name, quantity}], quantity?, sameDayDelivery?}],
          orderType, deliveryArea.sameDayDelivery, paymentMethod, createdAt,
          deliveryDay, punto_de_venta, total, shippingPrice

    Salida:
        - Orden inmutable; los ítems malformados se descartan y se registran
          en los diagnósticos sin descartar la orden. Una fecha ilegible
          queda en None (la orden se saltea en los reportes que la usan) y
          también se registra.
    """

    def __init__(self, debug: bool = False):
        self.debug = debug
        self._log_step = logger.info if debug else logger.debug

    def process(self,
                docs: Iterable[Dict[str, Any]],
                diagnosticos: Optional[Diagnosticos] = None) -> List[Orden]:
        """
        Convierte una lista de documentos

        Args:
            docs: Documentos crudos
            diagnosticos: Colector donde registrar órdenes malformadas

        Returns:
            Lista de Orden en el mismo orden de entrada
        """
        if diagnosticos is None:
            diagnosticos = Diagnosticos()

        ordenes = [self.convertir_orden(doc, diagnosticos) for doc in docs]
        self._log_step(f"Convertidas {len(ordenes):,} órdenes")
        return ordenes

    def convertir_orden(self, doc: Dict[str, Any], diagnosticos: Diagnosticos) -> Orden:
        order_id = str(doc.get('_id', ''))
        items = self._convertir_items(order_id, doc.get('items'), diagnosticos)

        delivery_area = doc.get('deliveryArea')
        same_day = bool(delivery_area.get('sameDayDelivery')) if isinstance(delivery_area, dict) else False

        punto_de_venta = doc.get('punto_de_venta')

        return Orden(
            id=order_id,
            items=items,
            order_type=str(doc.get('orderType') or ORDER_TYPE_MINORISTA),
            same_day_delivery=same_day,
            payment_method=str(doc.get('paymentMethod') or ''),
            created_at=self._convertir_fecha(order_id, doc, 'createdAt', diagnosticos),
            delivery_day=self._convertir_fecha(order_id, doc, 'deliveryDay', diagnosticos),
            punto_de_venta=str(punto_de_venta) if punto_de_venta is not None else None,
            total=_to_number(doc.get('total')),
            shipping_price=_to_number(doc.get('shippingPrice'))
        )

    def _convertir_fecha(self,
                         order_id: str,
                         doc: Dict[str, Any],
                         campo: str,
                         diagnosticos: Diagnosticos) -> Optional[datetime]:
        """Fecha del documento; si viene pero no se puede leer queda None y se registra"""
        raw = doc.get(campo)
        fecha = to_datetime(raw)
        if fecha is None and raw is not None and raw != '':
            diagnosticos.registrar_malformada(
                MalformedOrder(order_id, f"{campo} inválido ({raw!r})")
            )
        return fecha

    def _convertir_items(self,
                         order_id: str,
                         raw_items: Any,
                         diagnosticos: Diagnosticos) -> Tuple[OrderLineItem, ...]:
        if not isinstance(raw_items, list):
            diagnosticos.registrar_malformada(
                MalformedOrder(order_id, f"items ausente o inválido ({type(raw_items).__name__})")
            )
            return ()

        items = []
        for idx, raw in enumerate(raw_items):
            if not isinstance(raw, dict):
                diagnosticos.registrar_malformada(
                    MalformedOrder(order_id, f"item #{idx} no es un objeto")
                )
                continue
            items.append(self._convertir_item(order_id, idx, raw, diagnosticos))

        return tuple(items)

    def _convertir_item(self,
                        order_id: str,
                        idx: int,
                        raw: Dict[str, Any],
                        diagnosticos: Diagnosticos) -> OrderLineItem:
        name = raw.get('name') or raw.get('id') or ''

        raw_options = raw.get('options')
        options: List[OrderOption] = []
        if isinstance(raw_options, list):
            for option in raw_options:
                if not isinstance(option, dict):
                    diagnosticos.registrar_malformada(
                        MalformedOrder(order_id, f"item #{idx} tiene una opción inválida")
                    )
                    continue
                options.append(OrderOption(
                    name=str(option.get('name') or ''),
                    quantity=_to_number(option.get('quantity'))
                ))
        elif raw_options is not None:
            diagnosticos.registrar_malformada(
                MalformedOrder(order_id, f"item #{idx} tiene options inválido")
            )

        return OrderLineItem(
            name=str(name),
            options=tuple(options),
            quantity=_to_number(raw.get('quantity'), default=None),
            same_day_delivery=bool(raw.get('sameDayDelivery'))
        )


def convertir_punto_venta(doc: Dict[str, Any]) -> PuntoVenta:
    """Documento de puntos_venta → PuntoVenta"""
    contacto = doc.get('contacto')
    telefono = contacto.get('telefono') if isinstance(contacto, dict) else None

    return PuntoVenta(
        id=str(doc.get('_id', '')),
        nombre=str(doc.get('nombre') or ''),
        zona=str(doc.get('zona') or ZONA_DEFAULT),
        telefono=str(telefono) if telefono else TELEFONO_DEFAULT,
        activo=bool(doc.get('activo', True))
    )
