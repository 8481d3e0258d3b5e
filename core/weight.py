"""
Extracción de peso en kilos a partir de nombre de producto y opción

Centraliza la regla usada por la matriz mayorista, las estadísticas por
punto de venta y los reportes mensuales. El orden de las reglas importa:
las exclusiones siempre ganan sobre BIG DOG, y BIG DOG sobre el regex.
"""
import re

from config.settings import (
    PALABRAS_EXCLUIDAS_PESO,
    GRAMOS_MINIMO_KILO,
    BIG_DOG_KG,
    BOX_GATO_KG,
    BOX_PERRO_KG
)

_GRAMOS_RE = re.compile(r"(\d+)\s*GRS", re.IGNORECASE)
_PESO_RE = re.compile(r"(\d+(?:\.\d+)?)\s*K?G", re.IGNORECASE)
_MULTIPLICADOR_RE = re.compile(r"X(\d+)", re.IGNORECASE)


def calculate_item_weight(product_name: str = '', option_name: str = '') -> float:
    """
    Peso en KG de un ítem, o 0 si no se encuentra o está excluido.

    Reglas (en este orden):
    1. Exclusiones → 0: OREJA, porciones <1000 GRS, CORNALITO/GARRA/CALDO/COMPLEMENTO
    2. BIG DOG → 15
    3. Regex "<N>KG"/"<N>G" en la opción, luego en el producto
    4. BOX sin peso: GATO → 5, resto → 10
    5. Resto → 0

    Ejemplos:
        ("PERRO POLLO", "10KG") → 10
        ("BIG DOG VACA", "") → 15
        ("HIGADO 100GRS", "") → 0
        ("BOX GATO", "") → 5
    """
    upper_product = (product_name or '').upper()
    upper_option = (option_name or '').upper()
    combined = f"{upper_product} {upper_option}"

    # 1. Exclusiones
    if 'OREJA' in upper_product:
        return 0.0

    grams_match = _GRAMOS_RE.search(combined)
    if grams_match and int(grams_match.group(1)) < GRAMOS_MINIMO_KILO:
        return 0.0

    if any(word in upper_product for word in PALABRAS_EXCLUIDAS_PESO):
        return 0.0

    # 2. BIG DOG
    if 'BIG DOG' in upper_product:
        return BIG_DOG_KG

    # 3. Regex (opción primero)
    option_match = _PESO_RE.search(upper_option)
    if option_match:
        return float(option_match.group(1))

    product_match = _PESO_RE.search(upper_product)
    if product_match:
        return float(product_match.group(1))

    # 4. BOX sin peso explícito
    if 'BOX' in upper_product:
        if 'GATO' in upper_product:
            return BOX_GATO_KG
        return BOX_PERRO_KG

    return 0.0


def extract_unit_multiplier(text) -> int:
    """
    Multiplicador de unidades de un string

    Ejemplos:
        "X1" → 1, "X50" → 50, "OREJAS x100" → 100
        None / "" / "5KG" → 1
    """
    if not text or not isinstance(text, str):
        return 1
    match = _MULTIPLICADOR_RE.search(text)
    return int(match.group(1)) if match else 1
