import logging

from pymongo import AsyncMongoClient

from catalog.config import Settings

logger = logging.getLogger(__name__)

PRODUCTS_COLLECTION = "products"


def connect(settings: Settings):
    """
    Build the shared client for the service.

    Returns (client, products collection). The client is lazy, the first
    operation opens the connection pool.
    """
    client = AsyncMongoClient(settings.MONGO_URI, tz_aware=True)
    db = client[settings.MONGO_DB]
    logger.info(f"MongoDB client created for database '{settings.MONGO_DB}'")
    return client, db[PRODUCTS_COLLECTION]
