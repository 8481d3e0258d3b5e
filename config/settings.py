"""
Configuración de reglas de negocio y constantes
Externalizadas para fácil mantenimiento
"""
from typing import Dict, List, Set, Tuple

# ==========================================
# SECCIONES DEL CATÁLOGO
# ==========================================

SECCION_PERRO = "PERRO"
SECCION_GATO = "GATO"
SECCION_OTROS = "OTROS"
SECCION_RAW = "RAW"

SECCIONES: Set[str] = {
    SECCION_PERRO,
    SECCION_GATO,
    SECCION_OTROS,
    SECCION_RAW
}

# Sección asignada cuando el precio no trae una
SECCION_DEFAULT = SECCION_OTROS

# Peso asignado a productos sin peso declarado
PESO_UNIDAD = "UNIDAD"

# ==========================================
# LISTA DE PRECIOS
# ==========================================

PRICE_TYPE_MAYORISTA = "MAYORISTA"

# Máximo de precios a traer en el último nivel de fallback (histórico)
CATALOG_FALLBACK_LIMIT = 500

# ==========================================
# PESOS
# ==========================================

# Productos que NO suman kilos (packs por unidad y complementos)
PALABRAS_EXCLUIDAS_PESO: Tuple[str, ...] = (
    "CORNALITO",
    "GARRA",
    "CALDO",
    "COMPLEMENTO"
)

# Porciones en gramos por debajo de este valor no suman kilos
GRAMOS_MINIMO_KILO = 1000

BIG_DOG_KG = 15.0        # BIG DOG siempre pesa 15kg
BOX_GATO_KG = 5.0        # BOX GATO sin peso explícito
BOX_PERRO_KG = 10.0      # BOX PERRO (u otro BOX) sin peso explícito

# ==========================================
# TIPOS DE ORDEN / ENTREGA
# ==========================================

ORDER_TYPE_MAYORISTA = "mayorista"
ORDER_TYPE_MINORISTA = "minorista"

# Pedidos viejos: transferencia bancaria implicaba entrega en el día
PAYMENT_METHOD_SAME_DAY_LEGACY = "bank-transfer"

# Sin deliveryDay, la fecha efectiva es createdAt menos este desfase (UTC-3)
DESFASE_HORARIO_HORAS = 3

CLIENT_TYPES: List[str] = ["minorista", "sameDay", "mayorista"]

# ==========================================
# CATEGORÍAS (desglose por sabor)
# ==========================================

BUCKETS_CATEGORIA: List[str] = [
    "pollo",
    "vaca",
    "cerdo",
    "cordero",
    "bigDogPollo",
    "bigDogVaca",
    "gatoPollo",
    "gatoVaca",
    "gatoCordero",
    "huesosCarnosos"
]

BUCKETS_PERRO: List[str] = ["pollo", "vaca", "cerdo", "cordero", "bigDogPollo", "bigDogVaca"]
BUCKETS_GATO: List[str] = ["gatoPollo", "gatoVaca", "gatoCordero"]

# ==========================================
# ORDEN DE PRESENTACIÓN (matriz)
# ==========================================

ORDEN_BIG_DOG: List[str] = ["POLLO", "VACA"]
ORDEN_SABORES_PERRO: List[str] = ["POLLO", "CERDO", "VACA", "CORDERO"]
ORDEN_SABORES_GATO: List[str] = ["POLLO", "VACA", "CORDERO"]
ORDEN_COMPLEMENTOS: List[str] = [
    "BOX COMPLEMENTOS",
    "GARRAS",
    "CORNALITOS",
    "CALDO",
    "HUESOS RECREATIVOS"
]

# ==========================================
# NORMALIZACIÓN RAW
# ==========================================

VARIACIONES_RAW: Dict[str, str] = {
    "OREJAS": "OREJA",
    "HIGADOS": "HIGADO",
    "CORAZONES": "CORAZON",
    "RINONES": "RINON",
    "MOLLEJAS": "MOLLEJA",
    "LENGUAS": "LENGUA",
    "PULMONES": "PULMON",
    "BOCADOS": "BOCADO",
    "PATAS": "PATA"
}

NOMBRE_OREJAS_UNIFICADO = "RAW - OREJAS"

# ==========================================
# COLECCIONES
# ==========================================

COLLECTION_PRICES = "prices"
COLLECTION_ORDERS = "orders"
COLLECTION_PUNTOS_VENTA = "puntos_venta"

TELEFONO_DEFAULT = "Sin teléfono"
ZONA_DEFAULT = "Sin zona"
