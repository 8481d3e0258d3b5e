"""
Taxonomía de errores de los reportes mayoristas
"""
from typing import Optional


class ReportError(Exception):
    """Error base de la capa de reportes"""


class CatalogUnavailable(ReportError):
    """No hay precios MAYORISTA activos en ningún nivel de fallback (fatal)"""

    def __init__(self, year: Optional[int] = None, month: Optional[int] = None):
        self.year = year
        self.month = month
        periodo = f"{month}/{year}" if year and month else "cualquier período"
        super().__init__(f"No hay precios mayoristas disponibles para {periodo} ni en períodos anteriores")


class NoMatchFound(ReportError):
    """Un ítem de orden no pudo resolverse contra el catálogo (no fatal)"""

    def __init__(self, item_name: str, motivo: str):
        self.item_name = item_name
        self.motivo = motivo
        super().__init__(f"Sin match para '{item_name}': {motivo}")


class MalformedOrder(ReportError):
    """Orden con items ausentes o inválidos (se saltea el ítem, no la orden)"""

    def __init__(self, order_id: str, detalle: str):
        self.order_id = order_id
        self.detalle = detalle
        super().__init__(f"Orden {order_id} malformada: {detalle}")


class DatabaseError(ReportError):
    """Error de acceso a datos (se devuelve como envelope genérico)"""
