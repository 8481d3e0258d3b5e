"""
Manejo de conexiones a MongoDB
"""
from typing import Any, Dict, List, Optional
import logging

from pymongo import MongoClient
from pymongo.errors import PyMongoError

from core.errors import DatabaseError

logger = logging.getLogger(__name__)

class DatabaseConnection:
    """Administrador de conexiones a MongoDB (sólo lectura)"""

    def __init__(self, uri: str, database: str, timeout_ms: int = 30000):
        self.uri = uri
        self.database = database
        self.timeout_ms = timeout_ms
        self._client: Optional[MongoClient] = None

    def connect(self) -> MongoClient:
        """Establece conexión si no existe"""
        if self._client is None:
            logger.info("Estableciendo conexión a MongoDB")
            try:
                self._client = MongoClient(
                    self.uri,
                    serverSelectionTimeoutMS=self.timeout_ms,
                    tz_aware=False
                )
                self._client.admin.command('ping')
                logger.info("Conexión establecida exitosamente")
            except PyMongoError as e:
                logger.error(f"Error conectando a base de datos: {e}")
                self._client = None
                raise DatabaseError(f"No se pudo conectar a MongoDB: {e}") from e
        return self._client

    def close(self):
        """Cierra conexión activa"""
        if self._client:
            self._client.close()
            self._client = None
            logger.info("Conexión cerrada")

    def collection(self, name: str):
        """Colección de la base configurada"""
        return self.connect()[self.database][name]

    def find(self,
             collection: str,
             query: Dict[str, Any]) -> List[Dict[str, Any]]:
        """
        Ejecuta un find y retorna los documentos en memoria

        Args:
            collection: Nombre de la colección
            query: Especificación de db.queries ('filter', opcionales
                   'projection', 'sort', 'limit')

        Returns:
            Lista de documentos
        """
        logger.debug(f"find {collection}: {query.get('filter')}")

        try:
            cursor = self.collection(collection).find(
                query.get('filter', {}),
                query.get('projection')
            )
            if query.get('sort'):
                cursor = cursor.sort(query['sort'])
            if query.get('limit'):
                cursor = cursor.limit(query['limit'])

            docs = list(cursor)
            logger.debug(f"Query retornó {len(docs):,} documentos de {collection}")
            return docs

        except PyMongoError as e:
            logger.error(f"Error ejecutando query sobre {collection}: {e}")
            raise DatabaseError(f"Error consultando {collection}: {e}") from e

    def aggregate(self, collection: str, pipeline: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """Ejecuta un pipeline de agregación"""
        logger.debug(f"aggregate {collection}: {pipeline}")

        try:
            return list(self.collection(collection).aggregate(pipeline))
        except PyMongoError as e:
            logger.error(f"Error ejecutando agregación sobre {collection}: {e}")
            raise DatabaseError(f"Error agregando {collection}: {e}") from e

    def __enter__(self):
        """Permite usar como context manager"""
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Cierra conexión al salir del contexto"""
        self.close()
