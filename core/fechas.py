"""
Fechas: conversión de valores crudos, ventanas de consulta y claves de mes
"""
import calendar
import numbers
from datetime import datetime, time
from typing import Any, Optional, Tuple

import pandas as pd


def to_datetime(value: Any) -> Optional[datetime]:
    """
    Convierte un valor crudo (datetime, string ISO, epoch en ms) a datetime naive UTC.

    Ejemplos:
        "2025-10-24T15:00:00Z" → datetime(2025, 10, 24, 15, 0)
        1760000000000 → datetime(2025, 10, 9, 8, 53, 20)
        "basura" / {"$date": ...} / [1, 2] / None → None
    """
    if value is None or isinstance(value, (bool, dict, list, tuple, set)) or value == "":
        return None

    try:
        if isinstance(value, numbers.Number):
            # Epoch numérico como en Date de JS (milisegundos)
            ts = pd.to_datetime(value, unit='ms', errors='coerce')
        else:
            ts = pd.to_datetime(value, errors='coerce')
    except (ValueError, TypeError, OverflowError):
        return None

    if ts is None or pd.isna(ts):
        return None

    if ts.tzinfo is not None:
        ts = ts.tz_convert('UTC').tz_localize(None)

    return ts.to_pydatetime()


def inicio_dia(value: Any) -> Optional[datetime]:
    """00:00:00 del día indicado"""
    dt = to_datetime(value)
    if dt is None:
        return None
    return datetime.combine(dt.date(), time.min)


def fin_dia(value: Any) -> Optional[datetime]:
    """23:59:59.999999 del día indicado"""
    dt = to_datetime(value)
    if dt is None:
        return None
    return datetime.combine(dt.date(), time.max)


def rango_mes(year: int, month: int) -> Tuple[datetime, datetime]:
    """
    Primer y último instante de un mes

    Ejemplo:
        (2025, 2) → (2025-02-01 00:00:00, 2025-02-28 23:59:59.999999)
    """
    if not 1 <= month <= 12:
        raise ValueError(f"Mes inválido: {month}")
    ultimo_dia = calendar.monthrange(year, month)[1]
    return (datetime(year, month, 1),
            datetime.combine(datetime(year, month, ultimo_dia).date(), time.max))


def ventana_consulta(year: int, month: int,
                     from_date: Any = None,
                     to_date: Any = None) -> Tuple[datetime, datetime]:
    """
    Ventana de órdenes: fechas explícitas (días completos) si vienen ambas,
    si no el mes year/month completo.
    """
    if from_date is not None and to_date is not None:
        desde = inicio_dia(from_date)
        hasta = fin_dia(to_date)
        if desde is None or hasta is None:
            raise ValueError(f"Rango de fechas inválido: {from_date} - {to_date}")
        return desde, hasta
    return rango_mes(year, month)


def clave_mes(dt: datetime) -> str:
    """datetime → 'YYYY-MM'"""
    return f"{dt.year}-{dt.month:02d}"
