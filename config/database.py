"""
Configuración de conexión a MongoDB
"""
from dataclasses import dataclass
from pathlib import Path
import os
import re
from typing import Optional

@dataclass
class MongoConfig:
    """Configuración de conexión a base de datos"""
    uri: str
    database: str
    timeout_ms: int = 30000

    @classmethod
    def from_env(cls, env_file: Optional[Path] = None):
        """
        Carga configuración desde variables de entorno o archivo .env

        Variables esperadas:
        - MONGODB_URI: URI de conexión (mongodb://... o mongodb+srv://...)
        - MONGODB_DATABASE: nombre de la base de datos
        - MONGODB_TIMEOUT_MS: timeout de selección de servidor (opcional)
        """
        from dotenv import load_dotenv

        # Cargar .env si existe
        if env_file is None:
            env_file = Path('.env')

        if env_file.exists():
            load_dotenv(env_file, override=True)
        else:
            # Intentar cargar .env sin especificar ruta (busca automáticamente)
            load_dotenv(override=True)

        return cls(
            uri=os.getenv("MONGODB_URI", "mongodb://localhost:27017"),
            database=os.getenv("MONGODB_DATABASE", "barfer"),
            timeout_ms=int(os.getenv("MONGODB_TIMEOUT_MS", "30000"))
        )

    def connection_uri(self) -> str:
        """URI para pymongo.MongoClient"""
        if not self.uri.startswith(("mongodb://", "mongodb+srv://")):
            raise ValueError("MONGODB_URI inválida: debe empezar con mongodb:// o mongodb+srv://")
        return self.uri

    def __repr__(self) -> str:
        """Representación segura sin credenciales"""
        safe_uri = re.sub(r"//[^@/]+@", "//***@", self.uri)
        return f"MongoConfig(uri={safe_uri}, database={self.database})"
