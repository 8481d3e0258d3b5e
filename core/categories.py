"""
Clasificación de productos por especie/sabor

Independiente del catálogo: sólo mira el texto del ítem y la opción.
"""
from typing import Tuple

_SABORES_PERRO = ('pollo', 'vaca', 'cerdo', 'cordero')
_SABORES_GATO = (('pollo', 'gatoPollo'), ('vaca', 'gatoVaca'), ('cordero', 'gatoCordero'))
_SABORES_BIG_DOG = (('pollo', 'bigDogPollo'), ('vaca', 'bigDogVaca'))


def categorize_product(product_name: str, option_name: str = '') -> Tuple[str, str]:
    """
    Categoriza un producto basado en su nombre y opción

    Prioridad: BIG DOG > GATO > sabores PERRO > HUESOS CARNOSOS (estricto) > otros

    Returns:
        (category, subcategory) con category en {'perro', 'gato', 'otros'}

    Ejemplos:
        ("BIG DOG", "POLLO") → ('perro', 'bigDogPollo')
        ("BOX GATO VACA", "5KG") → ('gato', 'gatoVaca')
        ("HUESOS CARNOSOS RECREATIVOS", "") → ('otros', 'otros')
    """
    lower_name = (product_name or '').lower()
    lower_option = (option_name or '').lower()
    full_name = f"{lower_name} {lower_option}"

    if 'big dog' in lower_name:
        for sabor, subcategory in _SABORES_BIG_DOG:
            if sabor in full_name:
                return 'perro', subcategory
        return 'perro', 'bigDog'

    if 'gato' in lower_name:
        for sabor, subcategory in _SABORES_GATO:
            if sabor in full_name:
                return 'gato', subcategory
        return 'gato', 'gato'

    for sabor in _SABORES_PERRO:
        if sabor in full_name:
            return 'perro', sabor

    # Huesos carnosos: excluir recreativos y caldo
    if (('huesos carnosos' in lower_name or 'hueso carnoso' in lower_name)
            and 'recreativo' not in lower_name
            and 'caldo' not in lower_name):
        return 'otros', 'huesosCarnosos'

    return 'otros', 'otros'
