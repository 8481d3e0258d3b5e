"""Redondeo comercial (mitad hacia arriba) para los reportes"""
import math


def redondear(valor: float, decimales: int = 0) -> float:
    """
    Redondea con la mitad hacia arriba (no bancario)

    Ejemplos:
        redondear(2.5) → 3.0
        redondear(-2.5) → -2.0
        redondear(1.005, 2) → 1.01
    """
    factor = 10 ** decimales
    escalado = round(valor * factor, 9)
    return math.floor(escalado + 0.5) / factor
