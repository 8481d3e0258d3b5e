"""
Funciones de normalización y limpieza de texto
CRÍTICO: los nombres de ítems vienen de carga manual (mayúsculas, espacios y
acentos inconsistentes) y no hay clave foránea contra el catálogo
"""
import re
import unicodedata
from typing import Any, List

_WHITESPACE_RE = re.compile(r"\s+")
_CONTROL_CHARS_RE = re.compile(r"[\x00-\x1F\x7F]")


def strip_accents(text: str) -> str:
    """
    Elimina acentos y diéresis conservando la letra base.

    Ejemplos:
        "CORAZÓN" → "CORAZON"
        "RIÑONES" → "RINONES"
    """
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(c for c in decomposed if not unicodedata.combining(c))


def normalize_product_name(name: Any) -> str:
    """
    Normalización de nombres de producto/opción:
    1. Convertir a string (None → "")
    2. Eliminar caracteres de control y acentos
    3. Upper case
    4. Colapsar espacios internos y strip

    Ejemplos:
        "  box perro   pollo " → "BOX PERRO POLLO"
        "Hígado 100grs" → "HIGADO 100GRS"
        None → ""
    """
    if name is None:
        return ""
    text = _CONTROL_CHARS_RE.sub("", str(name))
    text = strip_accents(text).upper()
    return _WHITESPACE_RE.sub(" ", text).strip()


def normalize_section(section: Any, default: str = "") -> str:
    """Sección normalizada; vacía → default"""
    normalized = normalize_product_name(section)
    return normalized or default


def split_words(name: str) -> List[str]:
    """Palabras de un nombre ya normalizado (sin vacíos)"""
    return [w for w in name.split(" ") if w]


def contains_all_words(words: List[str], text: str) -> bool:
    """
    True si TODAS las palabras aparecen como substring en text.
    Lista vacía → False (no se considera match).
    """
    if not words:
        return False
    return all(word in text for word in words)
