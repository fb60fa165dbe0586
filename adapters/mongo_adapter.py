"""MongoDB adapter owning the process-wide connection to the catalog store.

Repositories never create clients themselves; they borrow the database
handle returned by :func:`get_database`.
"""

from typing import Optional
import logging

from pymongo import AsyncMongoClient
from pymongo.asynchronous.database import AsyncDatabase

logger = logging.getLogger("healthybites.mongo")

PRODUCTS_COLLECTION = "products"
INGREDIENTS_COLLECTION = "ingredients"

_client: Optional[AsyncMongoClient] = None
_db: Optional[AsyncDatabase] = None


# ------------------ Connection ------------------
async def connect(uri: str, db_name: str = "healthyBites", timeout_ms: int = 5000):
    """Open the shared client and verify the server answers a ping.

    Raises whatever pymongo raises when the server is unreachable; the caller
    decides whether to retry.
    """
    global _client, _db
    client = AsyncMongoClient(uri, serverSelectionTimeoutMS=timeout_ms)
    try:
        await client.admin.command("ping")
    except Exception:
        await client.close()
        raise
    _client = client
    _db = client[db_name]
    logger.info("Connected to MongoDB %s (database: %s)", uri, db_name)
    return _db


async def close():
    """Close MongoDB connection."""
    global _client, _db
    try:
        if _client is not None:
            await _client.close()
            logger.info("MongoDB client closed")
    finally:
        _client = None
        _db = None


def get_database() -> AsyncDatabase:
    """Return the connected database handle.

    Raises:
        RuntimeError: if :func:`connect` has not completed
    """
    if _db is None:
        raise RuntimeError("MongoDB is not connected")
    return _db


async def ping() -> bool:
    """Report whether the store currently answers."""
    if _client is None:
        return False
    try:
        await _client.admin.command("ping")
        return True
    except Exception as exc:
        logger.warning("MongoDB ping failed: %s", exc)
        return False
