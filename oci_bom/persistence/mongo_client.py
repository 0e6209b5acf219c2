"""
Mongo Client — raw database connection management.
With the in-memory persistence backend, no connection is created.
"""

from __future__ import annotations

import logging
from typing import Any

from oci_bom.config import get_settings

logger = logging.getLogger(__name__)


class MongoClient:
    """
    Thin wrapper around pymongo.
    A no-op placeholder unless PERSISTENCE_BACKEND=mongo.
    """

    def __init__(self):
        self.settings = get_settings()
        self._client: Any = None
        self._db: Any = None

    @property
    def enabled(self) -> bool:
        return self.settings.persistence_backend == "mongo"

    def connect(self) -> None:
        """Establish the MongoDB connection (no-op for the memory backend)."""
        if not self.enabled:
            logger.info("[MEMORY] MongoDB connection skipped")
            return

        from pymongo import MongoClient as PyMongoClient

        self._client = PyMongoClient(self.settings.mongodb_uri, serverSelectionTimeoutMS=5000)
        self._db = self._client[self.settings.mongodb_database]
        logger.info(f"Connected to MongoDB: {self.settings.mongodb_database}")

    def get_database(self) -> Any:
        """Return the database handle (None for the memory backend)."""
        if self._db is None and self.enabled:
            self.connect()
        return self._db

    def close(self) -> None:
        """Close the connection."""
        if self._client:
            self._client.close()
            logger.info("MongoDB connection closed")
