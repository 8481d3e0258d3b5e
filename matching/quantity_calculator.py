"""
Cantidad (kg o unidades) que aporta un ítem al producto matcheado
"""
from config.settings import SECCION_PERRO, SECCION_GATO, SECCION_OTROS
from core.models import CatalogProduct, OrderLineItem
from core.normalization import normalize_product_name
from core.weight import calculate_item_weight, extract_unit_multiplier


def _multiplicador_orejas(producto: CatalogProduct) -> int:
    multiplicador = extract_unit_multiplier(producto.product)
    if multiplicador == 1:
        multiplicador = extract_unit_multiplier(producto.weight)
    return multiplicador


def calculate_item_quantity(item: OrderLineItem, producto: CatalogProduct) -> float:
    """
    Calcula cuántos kilos o unidades hay en un ítem de orden

    Por cada opción (la primera regla que aplica):
    1. Producto en gramos (GRS en opción, ítem o catálogo) → cantidad tal cual (unidades)
    2. BIG DOG → 15 × cantidad
    3. OREJAS con multiplicador X<N> (N > 1) → cantidad × N
    4. Opción con peso en KG → kg × cantidad
    5. Resto → kilosPerUnit × cantidad × multiplicador del peso del catálogo

    Sin opciones → kilosPerUnit × multiplicador del peso del catálogo

    Ejemplos:
        "BOX PERRO POLLO" [5KG × 2] → 10
        "BIG DOG" [POLLO × 1] → 15
        "HIGADO" [100GRS × 3] → 3 (unidades)
    """
    item_name = normalize_product_name(item.name)
    full_name = producto.full_name

    en_gramos = 'GRS' in item_name or 'GRS' in full_name
    es_orejas = 'OREJA' in item_name or 'OREJA' in full_name
    multiplicador_orejas = _multiplicador_orejas(producto) if es_orejas else 1
    peso_big_dog = calculate_item_weight(item_name, '') if 'BIG DOG' in item_name else 0.0

    if not item.options:
        return producto.kilos_per_unit * extract_unit_multiplier(producto.weight)

    total = 0.0
    for option in item.options:
        quantity = option.quantity or 0
        option_name = normalize_product_name(option.name)

        if 'GRS' in option_name or en_gramos:
            total += quantity
        elif peso_big_dog > 0:
            total += peso_big_dog * quantity
        elif multiplicador_orejas > 1:
            total += quantity * multiplicador_orejas
        else:
            kilos_opcion = calculate_item_weight('', option_name)
            if kilos_opcion > 0:
                total += kilos_opcion * quantity
            else:
                total += producto.kilos_per_unit * quantity * extract_unit_multiplier(producto.weight)

    return total


def should_count_in_total(producto: CatalogProduct) -> bool:
    """
    Si el producto suma a totalKilos del punto de venta

    PERRO y GATO siempre; OTROS sólo HUESOS CARNOSOS; RAW nunca (son unidades).
    """
    if producto.section in (SECCION_PERRO, SECCION_GATO):
        return True
    if producto.section == SECCION_OTROS:
        return 'HUESOS CARNOSOS' in producto.product
    return False
